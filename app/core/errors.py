from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.result import ErrorKind


class ValidationError(Exception):
    """Input rejected before any statement was sent to the store."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, what: str) -> "ValidationError":
        errors = [
            {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
            for e in exc.errors()
        ]
        fields = ", ".join(e["field"] for e in errors)
        return cls(f"Invalid {what}: {fields}", errors)


class StoreError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


HTTP_STATUS_FOR_ERROR = {
    ErrorKind.STORE_UNAVAILABLE: 503,
    ErrorKind.QUERY_FAILED: 500,
    ErrorKind.CONSTRAINT_VIOLATION: 409,
}
