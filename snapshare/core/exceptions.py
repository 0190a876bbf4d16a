# snapshare/core/exceptions.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """
    Base class for errors that map onto a JSON error envelope.

    Subclasses set a default status code and message; handlers may override
    the message and attach the underlying error, a handler-specific error
    code or a list of field errors.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Any = None,
        err_code: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
    ):
        self.message = message or self.message
        self.error = error
        self.err_code = err_code
        self.errors = errors
        super().__init__(self.message)

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            content["error"] = self.error
        if self.err_code is not None:
            content["errCode"] = self.err_code
        if self.errors is not None:
            content["errors"] = self.errors
        return content


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized to access this route."


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You are not allowed to act on behalf of another user."


class UserNotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "No user found with this id."


class DatabaseError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Database error"


async def api_error_handler(request: Request, exc: APIError):
    """Render an APIError as its JSON envelope"""
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing client input is a 400 with one entry per field"""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(loc) or "body",
            "msg": err.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": errors},
    )


async def internal_error_handler(request: Request, exc: Exception):
    """Global exception handler for internal server errors"""
    error_msg = f"Internal Server Error: {str(exc)}"
    logger.error(f"{error_msg}\nRequest path: {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "type": type(exc).__name__
        }
    )
