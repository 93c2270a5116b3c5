from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from structlog import get_logger

from app.core.errors import HTTP_STATUS_FOR_ERROR, ValidationError
from app.core.result import Err

logger = get_logger()

async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Validation failed", error=exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "errors": exc.errors},
    )

def http_error_for(err: Err, action: str) -> HTTPException:
    status_code = HTTP_STATUS_FOR_ERROR[err.kind]
    if status_code == 503:
        detail = "Database is unavailable"
    elif status_code == 409:
        detail = f"{action} violates a database constraint"
    else:
        detail = f"{action} failed"
    return HTTPException(status_code=status_code, detail=detail)
