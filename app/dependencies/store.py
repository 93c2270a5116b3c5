from typing import Optional

from fastapi import Request

from app.db.store import Store
from app.services.cache import SearchCache

def get_store(request: Request) -> Store:
    return request.app.state.store

def get_search_cache(request: Request) -> Optional[SearchCache]:
    return getattr(request.app.state, "search_cache", None)
