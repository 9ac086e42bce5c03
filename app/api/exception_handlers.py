from collections import defaultdict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.schemas.common_schema import ValidationErrorResponse
from app.services.user.exceptions import (
    UserAlreadyExists,
    UserEmailNotFound,
    UserNotAuthenticated,
    UserNotFound,
)

logger = get_logger(__name__)


def _field_name(loc: tuple) -> str:
    # drop the "body" / "query" / "path" prefix
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = defaultdict(list)
    for error in exc.errors():
        errors[_field_name(tuple(error.get("loc", ())))].append(error.get("msg", ""))

    logger.info("Validation failed for %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationErrorResponse(errors=dict(errors)).model_dump(),
    )


def _detail_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UserNotAuthenticated, _detail_handler(status.HTTP_401_UNAUTHORIZED))
    app.add_exception_handler(UserNotFound, _detail_handler(status.HTTP_404_NOT_FOUND))
    app.add_exception_handler(UserEmailNotFound, _detail_handler(status.HTTP_400_BAD_REQUEST))
    app.add_exception_handler(UserAlreadyExists, _detail_handler(status.HTTP_400_BAD_REQUEST))
