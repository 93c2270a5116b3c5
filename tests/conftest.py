import os

# Settings are read at import time; keep Redis out of the test app
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEARCH_CACHE_TTL", "0")

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.dependencies.store import get_search_cache, get_store
from app.main import app


WRITE_VERBS = {"INSERT", "UPDATE", "DELETE"}


class FakeStore:
    """Records every statement and answers from a queue of row lists or errors."""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.transactions = 0
        self.committed = False
        self.rolled_back = False
        self.in_transaction = False
        # writes issued outside transaction() are dropped by a real store
        self.uncommitted_writes = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def fetch(self, sql, params=()):
        self.calls.append((sql, tuple(params)))
        if not self.in_transaction and sql.lstrip().split(" ", 1)[0].upper() in WRITE_VERBS:
            self.uncommitted_writes.append(sql)
        response = self.responses.pop(0) if self.responses else []
        if isinstance(response, Exception):
            raise response
        return response

    async def fetch_one(self, sql, params=()):
        rows = await self.fetch(sql, params)
        return rows[0] if rows else None

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        self.in_transaction = True
        try:
            yield self
        except Exception:
            self.rolled_back = True
            raise
        finally:
            self.in_transaction = False
        self.committed = True

    async def ping(self):
        await self.fetch("SELECT 1")


@pytest.fixture
def fake_store():
    store = FakeStore()
    yield store
    assert store.uncommitted_writes == []


@pytest.fixture
def property_row():
    def make(**overrides):
        row = {
            "id": 1,
            "owner_id": 7,
            "title": "Speed lamp",
            "description": "description",
            "thumbnail_photo_url": "https://images.example.com/1/thumb.jpg",
            "cover_photo_url": "https://images.example.com/1/cover.jpg",
            "cost_per_night": 93061,
            "parking_spaces": 6,
            "number_of_bathrooms": 4,
            "number_of_bedrooms": 8,
            "country": "Canada",
            "street": "536 Namsub Highway",
            "city": "Vancouver",
            "province": "British Columbia",
            "post_code": "28142",
            "active": True,
            "average_rating": 4.2,
        }
        row.update(overrides)
        return row
    return make


@pytest_asyncio.fixture
async def client(fake_store):
    app.dependency_overrides[get_store] = lambda: fake_store
    app.dependency_overrides[get_search_cache] = lambda: None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides = {}
