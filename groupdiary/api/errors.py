"""
Mapping from service exceptions to HTTP responses. Internal failures get a
fixed message; their details only go to the log.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from structlog import get_logger

from groupdiary.core.hashing import PasswordHashingError
from groupdiary.service import groups as groups_service
from groupdiary.service import user as user_service

STATUS_CODES = {
    groups_service.GroupNotFound: 404,
    user_service.UserNotFound: 404,
    groups_service.GroupAccessDenied: 403,
    groups_service.InvalidMembershipChange: 400,
    groups_service.InvalidGroupRequest: 400,
    user_service.UserExistsError: 409,
}


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = 500

    for exception_type in type(exc).__mro__:
        if exception_type in STATUS_CODES:
            status_code = STATUS_CODES[exception_type]
            break

    log = get_logger()
    await log.ainfo(
        "api.request_failed",
        path=request.url.path,
        status_code=status_code,
        error=str(exc),
    )

    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log = get_logger()
    await log.aerror(
        "api.internal_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )

    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def add_exception_handlers(app: FastAPI) -> FastAPI:
    """
    Register handlers turning service exceptions into JSON error responses.
    """
    for exception_type in STATUS_CODES:
        app.add_exception_handler(exception_type, service_error_handler)

    app.add_exception_handler(PasswordHashingError, internal_error_handler)
    app.add_exception_handler(SQLAlchemyError, internal_error_handler)

    return app
