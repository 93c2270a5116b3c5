#!/usr/bin/env python3
"""
Script to clear cached property search results.
Run this after making changes to the search query.
"""
import asyncio
from redis.asyncio import Redis
from app.config import settings
from app.services.cache import SearchCache

async def clear_cache():
    redis = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    deleted = await SearchCache(redis, settings.SEARCH_CACHE_TTL).clear()
    print(f"✓ Cleared {deleted} cache keys")
    await redis.aclose()

if __name__ == "__main__":
    asyncio.run(clear_cache())
