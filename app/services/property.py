from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from app.core.errors import StoreError, ValidationError
from app.core.result import Err, Ok, Result
from app.db.store import Store
from app.schemas.property import NewProperty, PropertyRecord

logger = get_logger()

INSERT_COLUMNS = (
    "owner_id", "title", "description", "thumbnail_photo_url", "cover_photo_url",
    "cost_per_night", "street", "city", "province", "post_code", "country",
    "parking_spaces", "number_of_bathrooms", "number_of_bedrooms",
)

INSERT_PROPERTY = (
    f"INSERT INTO properties ({', '.join(INSERT_COLUMNS)})\n"
    f"VALUES ({', '.join(f'${i}' for i in range(1, len(INSERT_COLUMNS) + 1))})\n"
    "RETURNING id"
)

PROPERTY_BY_ID = """
SELECT properties.*, avg(property_reviews.rating) AS average_rating
FROM properties
LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
WHERE properties.id = $1
GROUP BY properties.id
"""

async def get_property_by_id(store: Store, property_id: int) -> Result[Optional[PropertyRecord]]:
    try:
        row = await store.fetch_one(PROPERTY_BY_ID, (property_id,))
    except StoreError as e:
        logger.error("Get property failed", property_id=property_id, kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)
    return Ok(PropertyRecord.model_validate(row) if row else None)

async def create_property(store: Store, prop: Union[NewProperty, Mapping[str, Any]]) -> Result[PropertyRecord]:
    """
    Insert a listing and read it back with its rating, both inside one
    transaction so a concurrent reader never sees a half-created row.
    """
    try:
        new_property = prop if isinstance(prop, NewProperty) else NewProperty.model_validate(prop)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, "property") from e

    params = tuple(getattr(new_property, column) for column in INSERT_COLUMNS)
    try:
        async with store.transaction() as tx:
            inserted = await tx.fetch_one(INSERT_PROPERTY, params)
            row = await tx.fetch_one(PROPERTY_BY_ID, (inserted["id"],))
    except StoreError as e:
        logger.error("Create property failed", owner_id=new_property.owner_id, kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)

    created = PropertyRecord.model_validate(row)
    logger.info("Property created", property_id=created.id, owner_id=created.owner_id)
    return Ok(created)
