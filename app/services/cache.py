import json
from typing import List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError
from structlog import get_logger

from app.schemas.property import PropertyRecord, SearchOptions

logger = get_logger()

CACHE_PREFIX = "search:"

class SearchCache:
    """Search results in Redis, keyed by the filters and the limit."""

    def __init__(self, redis: Redis, ttl: int):
        self.redis = redis
        self.ttl = ttl

    @staticmethod
    def key(options: SearchOptions, limit: int) -> str:
        return (
            f"{CACHE_PREFIX}{options.city}:{options.owner_id}:{options.minimum_price_per_night}:"
            f"{options.maximum_price_per_night}:{options.minimum_rating}:{limit}"
        )

    async def get(self, options: SearchOptions, limit: int) -> Optional[List[PropertyRecord]]:
        cache_key = self.key(options, limit)
        try:
            cached = await self.redis.get(cache_key)
        except RedisError as e:
            logger.warning("Search cache unavailable", cache_key=cache_key, error=str(e))
            return None
        if cached is None:
            logger.info("Search cache miss", cache_key=cache_key)
            return None
        try:
            listings = [PropertyRecord.model_validate(item) for item in json.loads(cached)]
        except (ValueError, TypeError):
            # pydantic's ValidationError is a ValueError
            logger.warning("Cache parse failed; rebuilding", cache_key=cache_key)
            return None
        logger.info("Search cache hit", cache_key=cache_key)
        return listings

    async def set(self, options: SearchOptions, limit: int, listings: List[PropertyRecord]) -> None:
        cache_key = self.key(options, limit)
        payload = json.dumps([listing.model_dump(mode="json") for listing in listings])
        try:
            await self.redis.setex(cache_key, self.ttl, payload)
        except RedisError as e:
            logger.warning("Search cache write failed", cache_key=cache_key, error=str(e))

    async def clear(self) -> int:
        keys = await self.redis.keys(f"{CACHE_PREFIX}*")
        if not keys:
            return 0
        return await self.redis.delete(*keys)
