"""Domain errors raised by the services and rendered at the HTTP boundary."""
# surveyhub/app/core/errors.py
from fastapi import Request
from fastapi.responses import JSONResponse


class ServiceError(Exception):
    status_code: int = 400
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailure(ServiceError):
    status_code = 422
    code = "validation_failure"
    default_detail = "Invalid input"


class Unauthorized(ServiceError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Not authenticated"


class NotFound(ServiceError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class DuplicateSubmission(ServiceError):
    status_code = 409
    code = "duplicate_submission"
    default_detail = "You have already answered this survey"


class Conflict(ServiceError):
    status_code = 409
    code = "conflict"
    default_detail = "Conflict"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=headers,
    )
