from typing import List

from structlog import get_logger

from app.config import settings
from app.core.errors import StoreError, ValidationError
from app.core.result import Err, Ok, Result
from app.db.store import Store
from app.schemas.reservation import ReservationRecord

logger = get_logger()

# reservations and properties both have an id column, hence the aliases
RESERVATIONS_FOR_GUEST = """
SELECT reservations.id AS reservation_id, reservations.guest_id,
       reservations.start_date, reservations.end_date,
       properties.id AS property_id, properties.title, properties.thumbnail_photo_url,
       properties.cost_per_night, properties.number_of_bedrooms,
       properties.number_of_bathrooms, properties.parking_spaces, properties.city,
       avg(property_reviews.rating) AS average_rating
FROM reservations
JOIN properties ON reservations.property_id = properties.id
LEFT JOIN property_reviews ON properties.id = property_reviews.property_id
WHERE reservations.guest_id = $1
GROUP BY properties.id, reservations.id
ORDER BY reservations.start_date
LIMIT $2;
"""

async def list_reservations_for_guest(
    store: Store, guest_id: int, limit: int = settings.DEFAULT_RESULT_LIMIT
) -> Result[List[ReservationRecord]]:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    try:
        rows = await store.fetch(RESERVATIONS_FOR_GUEST, (guest_id, limit))
    except StoreError as e:
        logger.error("Reservation lookup failed", guest_id=guest_id, kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)
    return Ok([ReservationRecord.model_validate(row) for row in rows])
