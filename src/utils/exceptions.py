import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """
    Base for every error this service reports on purpose.

    Rendered as {"error": message} plus `detail` (when given) and any `extra` keys.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        detail: Any = None,
        extra: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        if message is not None:
            self.message = message
        if status_code is None:
            status_code = type(self).status_code
        super().__init__(status_code=status_code, detail=self.message)
        self.error_detail = detail
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.error_detail is not None:
            body["detail"] = self.error_detail
        body.update(self.extra)
        return body


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "missing fields"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "conflict"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "unauthenticated"


class ConfigError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "teacher has no webapp configured"


class UpstreamError(AppError):
    # 400 when the web app answered with a failure during verification, 500 otherwise
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "teacher webapp error"


class PayloadTooLargeError(AppError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    message = "request body too large"


class ServerError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "server error"


def handle_exceptions(db: Optional[Session], exc: Exception) -> None:
    """
    Roll back the transaction and raise a consistent AppError based on the error type.
    """
    if db is not None:
        db.rollback()

    if isinstance(exc, AppError):
        raise exc
    elif isinstance(exc, SQLAlchemyError):
        logger.exception("Database error")
        raise ServerError("db error") from exc
    elif isinstance(exc, HTTPException):
        raise exc
    else:
        logger.exception("Unexpected error")
        raise ServerError("server error", detail=str(exc)) from exc


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid request body", "detail": jsonable_encoder(exc.errors())},
    )
