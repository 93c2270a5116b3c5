from typing import List, Optional

from structlog import get_logger

from app.config import settings
from app.core.errors import StoreError
from app.core.result import Err, Ok, Result
from app.db.query import BuiltQuery, SearchQueryBuilder
from app.db.store import Store
from app.schemas.property import PropertyRecord, SearchOptions
from app.services.cache import SearchCache

logger = get_logger()

def build_search_query(options: SearchOptions, limit: int = settings.DEFAULT_RESULT_LIMIT) -> BuiltQuery:
    """
    Translate the filters into one statement. Filters are applied in a fixed
    order (city, owner, minimum price, maximum price, minimum rating) so equal
    options always render the same SQL and parameters.
    """
    builder = SearchQueryBuilder()
    if options.city is not None:
        builder.where("properties.city LIKE {}", f"%{options.city}%")
    if options.owner_id is not None:
        builder.where("properties.owner_id = {}", options.owner_id)
    if options.minimum_price_per_night is not None:
        builder.where("properties.cost_per_night >= {}", options.minimum_price_per_night)
    if options.maximum_price_per_night is not None:
        builder.where("properties.cost_per_night <= {}", options.maximum_price_per_night)
    if options.minimum_rating is not None:
        builder.having("avg(property_reviews.rating) >= {}", options.minimum_rating)
    return builder.build(limit)

async def search_properties(
    store: Store,
    options: SearchOptions,
    limit: int = settings.DEFAULT_RESULT_LIMIT,
    cache: Optional[SearchCache] = None,
) -> Result[List[PropertyRecord]]:
    query = build_search_query(options, limit)

    if cache is not None:
        cached = await cache.get(options, limit)
        if cached is not None:
            return Ok(cached)

    try:
        rows = await store.fetch(query.sql, query.params)
    except StoreError as e:
        logger.error("Property search failed", options=options.model_dump(exclude_none=True), limit=limit,
                     kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)

    listings = [PropertyRecord.model_validate(row) for row in rows]
    logger.info("Property search completed", options=options.model_dump(exclude_none=True), result_count=len(listings))
    if cache is not None:
        await cache.set(options, limit, listings)
    return Ok(listings)
