from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis

from app.config import settings
from app.core.errors import ValidationError
from app.core.logging import setup_logging
from app.db.store import create_store
from app.exceptions.handlers import validation_error_handler
from app.routers import health, properties, users
from app.services.cache import SearchCache

app = FastAPI(title="LightBnB Data Service")
app.include_router(properties.router)
app.include_router(users.router)
app.include_router(health.router)
app.add_exception_handler(ValidationError, validation_error_handler)

@app.on_event("startup")
async def startup_event():
    setup_logging()
    app.state.store = create_store(settings)
    app.state.search_cache = None
    if settings.SEARCH_CACHE_TTL > 0 or settings.RATE_LIMIT_ENABLED:
        redis = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        app.state.redis = redis
        if settings.SEARCH_CACHE_TTL > 0:
            app.state.search_cache = SearchCache(redis, settings.SEARCH_CACHE_TTL)
        if settings.RATE_LIMIT_ENABLED:
            await FastAPILimiter.init(redis)

@app.on_event("shutdown")
async def shutdown_event():
    await app.state.store.dispose()
    redis = getattr(app.state, "redis", None)
    if redis is not None:
        await redis.aclose()
