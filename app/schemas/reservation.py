from datetime import date
from pydantic import BaseModel
from typing import Optional

class ReservationRecord(BaseModel):
    reservation_id: int
    guest_id: int
    start_date: date
    end_date: date
    property_id: int
    title: str
    thumbnail_photo_url: Optional[str] = None
    cost_per_night: int
    number_of_bedrooms: int = 0
    number_of_bathrooms: int = 0
    parking_spaces: int = 0
    city: Optional[str] = None
    average_rating: Optional[float] = None
