from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.core.result import Err
from app.db.store import Store
from app.dependencies.store import get_store
from app.exceptions.handlers import http_error_for
from app.schemas.reservation import ReservationRecord
from app.schemas.user import UserResponse
from app.services.reservation import list_reservations_for_guest
from app.services.user import get_user_by_email, get_user_by_id

router = APIRouter(prefix="/api/v1", tags=["users"])

def _found(result, action: str, what: str):
    if isinstance(result, Err):
        raise http_error_for(result, action)
    if result.value is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
    return result.value

@router.get("/users", response_model=UserResponse)
async def find_user_by_email(email: str = Query(..., min_length=3), store: Store = Depends(get_store)):
    return _found(await get_user_by_email(store, email), "Get user", "User")

@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, store: Store = Depends(get_store)):
    return _found(await get_user_by_id(store, user_id), "Get user", "User")

@router.get("/users/{guest_id}/reservations", response_model=List[ReservationRecord])
async def list_reservations(
    guest_id: int,
    limit: int = Query(settings.DEFAULT_RESULT_LIMIT, ge=1, le=settings.MAX_RESULT_LIMIT),
    store: Store = Depends(get_store),
):
    result = await list_reservations_for_guest(store, guest_id, limit)
    if isinstance(result, Err):
        raise http_error_for(result, "List reservations")
    return result.value
