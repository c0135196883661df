"""Error taxonomy and the JSON error envelope.

Every failure leaves the API as ``{"error": <message>}`` with the status code
of its class. Messages are written for clients; store internals stay in the
server logs.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from guardtime.core.logging import get_logger
from guardtime.core.monitoring import report_failure

logger = get_logger(__name__)


class GuardtimeError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def payload(self) -> dict[str, str]:
        return {"error": self.message}


class ValidationError(GuardtimeError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(GuardtimeError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(GuardtimeError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(GuardtimeError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: object | None = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConflictError(GuardtimeError):
    status_code = status.HTTP_409_CONFLICT


class AggregationFailure(GuardtimeError):
    """A recalculation step could not reach an ancestor record.

    ``level`` names the hierarchy level that was missing (``timelog``,
    ``dtr`` or ``timesheet``); the whole transaction is rolled back.
    """

    def __init__(self, level: str, entity_id: object | None, origin: str):
        self.level = level
        self.entity_id = entity_id
        self.origin = origin
        super().__init__(f"Recalculation failed: {level} {entity_id} referenced by {origin} no longer exists")

    def payload(self) -> dict[str, str]:
        return {"error": self.message, "level": self.level}


def _describe_validation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GuardtimeError)
    async def guardtime_error_handler(request: Request, exc: GuardtimeError) -> JSONResponse:
        if isinstance(exc, AggregationFailure):
            logger.error(
                "aggregation_failed",
                path=request.url.path,
                level=exc.level,
                entity_id=exc.entity_id,
                origin=exc.origin,
            )
            report_failure(exc)
        elif exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
            report_failure(exc)
        else:
            logger.info("request_rejected", path=request.url.path, status=exc.status_code, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation(exc)
        logger.info("request_invalid", path=request.url.path, error=message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected_error", path=request.url.path)
        report_failure(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An unexpected error occurred"},
        )
