from pydantic import BaseModel, Field, field_validator
from typing import Optional
from app.config import settings

class SearchOptions(BaseModel):
    city: Optional[str] = Field(None, min_length=1, description="Partial, case-sensitive match on the city name.")
    owner_id: Optional[int] = Field(None, ge=1)
    minimum_price_per_night: Optional[int] = Field(None, ge=0, description="Cents.")
    maximum_price_per_night: Optional[int] = Field(None, ge=0, description="Cents.")
    minimum_rating: Optional[float] = Field(None, ge=0, le=5)

    class Config:
        frozen = True

class PropertySearchQuery(BaseModel):
    """Search form as submitted by the browser; prices are in dollars."""
    city: Optional[str] = None
    owner_id: Optional[int] = Field(None, ge=1)
    minimum_price_per_night: Optional[float] = Field(None, ge=0, description="Dollars per night.")
    maximum_price_per_night: Optional[float] = Field(None, ge=0, description="Dollars per night.")
    minimum_rating: Optional[float] = Field(None, ge=0, le=5)
    limit: int = Field(settings.DEFAULT_RESULT_LIMIT, ge=1, le=settings.MAX_RESULT_LIMIT)

    @field_validator("city", mode="before")
    @classmethod
    def blank_city_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_options(self) -> SearchOptions:
        def cents(dollars: Optional[float]) -> Optional[int]:
            return None if dollars is None else int(round(dollars * 100))

        return SearchOptions(
            city=self.city,
            owner_id=self.owner_id,
            minimum_price_per_night=cents(self.minimum_price_per_night),
            maximum_price_per_night=cents(self.maximum_price_per_night),
            minimum_rating=self.minimum_rating,
        )

class NewProperty(BaseModel):
    owner_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    thumbnail_photo_url: str = Field(..., min_length=1, max_length=255)
    cover_photo_url: str = Field(..., min_length=1, max_length=255)
    cost_per_night: int = Field(..., ge=0, description="Cents.")
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    province: str = Field(..., min_length=1, max_length=255)
    post_code: str = Field(..., min_length=1, max_length=255)
    country: str = Field(..., min_length=1, max_length=255)
    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": 1,
                "title": "Speed lamp",
                "description": "Quiet two-bedroom near the seawall.",
                "thumbnail_photo_url": "https://images.example.com/1/thumb.jpg",
                "cover_photo_url": "https://images.example.com/1/cover.jpg",
                "cost_per_night": 93061,
                "street": "536 Namsub Highway",
                "city": "Vancouver",
                "province": "British Columbia",
                "post_code": "V6B 1A1",
                "country": "Canada",
                "parking_spaces": 1,
                "number_of_bathrooms": 2,
                "number_of_bedrooms": 2
            }
        }

class PropertyRecord(BaseModel):
    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    thumbnail_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cost_per_night: int
    parking_spaces: int = 0
    number_of_bathrooms: int = 0
    number_of_bedrooms: int = 0
    country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    post_code: Optional[str] = None
    active: bool = True
    average_rating: Optional[float] = None # avg() over reviews; None when unreviewed
