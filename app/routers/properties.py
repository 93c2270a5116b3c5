from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from structlog import get_logger

from app.core.result import Err
from app.db.store import Store
from app.dependencies.rate_limit import rate_limited
from app.dependencies.store import get_search_cache, get_store
from app.exceptions.handlers import http_error_for
from app.schemas.property import NewProperty, PropertyRecord, PropertySearchQuery
from app.services.cache import SearchCache
from app.services.property import create_property, get_property_by_id
from app.services.search import search_properties

logger = get_logger()
router = APIRouter(prefix="/api/v1", tags=["properties"])

@router.get("/properties", response_model=List[PropertyRecord], dependencies=rate_limited(times=10, seconds=60))
async def search(
    query: Annotated[PropertySearchQuery, Query()],
    store: Store = Depends(get_store),
    cache: Optional[SearchCache] = Depends(get_search_cache),
):
    logger.info("Received search request", query_params=query.model_dump(exclude_none=True))

    if (query.minimum_price_per_night is not None and query.maximum_price_per_night is not None
            and query.minimum_price_per_night > query.maximum_price_per_night):
        logger.warning("Invalid price range", minimum=query.minimum_price_per_night, maximum=query.maximum_price_per_night)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="minimum_price_per_night cannot be greater than maximum_price_per_night",
        )

    result = await search_properties(store, query.to_options(), query.limit, cache=cache)
    if isinstance(result, Err):
        raise http_error_for(result, "Search")
    return result.value

@router.get("/properties/{property_id}", response_model=PropertyRecord)
async def get_property(property_id: int, store: Store = Depends(get_store)):
    result = await get_property_by_id(store, property_id)
    if isinstance(result, Err):
        raise http_error_for(result, "Get property")
    if result.value is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return result.value

@router.post("/properties", response_model=PropertyRecord, status_code=status.HTTP_201_CREATED,
             dependencies=rate_limited(times=5, seconds=60))
async def add_property(request: NewProperty, store: Store = Depends(get_store)):
    result = await create_property(store, request)
    if isinstance(result, Err):
        raise http_error_for(result, "Create property")
    return result.value
