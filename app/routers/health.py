from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from structlog import get_logger

from app.core.errors import StoreError
from app.db.store import Store
from app.dependencies.store import get_search_cache, get_store
from app.services.cache import SearchCache

logger = get_logger()
router = APIRouter(prefix="/api/v1", tags=["health"])

@router.get("/health")
async def health():
    return {"status": "ok"}

@router.get("/health/ready")
async def readiness(store: Store = Depends(get_store), cache: Optional[SearchCache] = Depends(get_search_cache)):
    details = {"status": "ok", "checks": {}}

    # Database check
    try:
        await store.ping()
        details["checks"]["database"] = "ok"
    except StoreError as e:
        logger.warning("health db fail", error=e.message, kind=e.kind.value)
        details["checks"]["database"] = f"fail: {e.message}"
        details["status"] = "degraded"

    # Redis check, only when the search cache is configured
    if cache is not None:
        try:
            pong = await cache.redis.ping()
            details["checks"]["redis"] = "ok" if pong else "fail"
        except Exception as e:
            logger.warning("health redis fail", error=str(e))
            details["checks"]["redis"] = f"fail: {str(e)}"
            details["status"] = "degraded"

    return details

@router.post("/cache/clear")
async def clear_cache(cache: Optional[SearchCache] = Depends(get_search_cache)):
    """
    Drop all cached search results.
    Use this after deploying changes to the search query.
    """
    if cache is None:
        return {"status": "ok", "cleared_keys": 0}
    try:
        deleted = await cache.clear()
        logger.info("Cache cleared", deleted_keys=deleted)
        return {"status": "ok", "cleared_keys": deleted}
    except Exception as e:
        logger.error("Failed to clear cache", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to clear cache: {str(e)}")
