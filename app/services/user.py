from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from structlog import get_logger

from app.core.errors import StoreError, ValidationError
from app.core.result import Err, Ok, Result
from app.db.store import Store
from app.schemas.user import NewUser, UserRecord

logger = get_logger()

USER_BY_EMAIL = "SELECT id, name, email, password FROM users WHERE email = $1"
USER_BY_ID = "SELECT id, name, email, password FROM users WHERE id = $1"
INSERT_USER = """
INSERT INTO users (name, email, password)
VALUES ($1, $2, $3)
RETURNING id, name, email, password
"""

async def _lookup(store: Store, sql: str, value: Any, field: str) -> Result[Optional[UserRecord]]:
    try:
        row = await store.fetch_one(sql, (value,))
    except StoreError as e:
        logger.error("User lookup failed", field=field, kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)
    return Ok(UserRecord.model_validate(row) if row else None)

async def get_user_by_email(store: Store, email: str) -> Result[Optional[UserRecord]]:
    return await _lookup(store, USER_BY_EMAIL, email, "email")

async def get_user_by_id(store: Store, user_id: int) -> Result[Optional[UserRecord]]:
    return await _lookup(store, USER_BY_ID, user_id, "id")

async def create_user(store: Store, user: Union[NewUser, Mapping[str, Any]]) -> Result[UserRecord]:
    """Insert a user. ``password`` must already be hashed.

    Raises ``ValidationError`` for a missing or empty field; a duplicate email
    comes back as ``Err(CONSTRAINT_VIOLATION)``.
    """
    try:
        new_user = user if isinstance(user, NewUser) else NewUser.model_validate(user)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, "user") from e

    try:
        async with store.transaction() as tx:
            row = await tx.fetch_one(INSERT_USER, (new_user.name, new_user.email, new_user.password))
    except StoreError as e:
        logger.error("Create user failed", kind=e.kind.value, error=e.message)
        return Err(e.kind, e.message)
    created = UserRecord.model_validate(row)
    logger.info("User created", user_id=created.id)
    return Ok(created)
