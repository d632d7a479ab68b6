from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.constants.error_codes import ErrorCode
from app.core.exceptions import (
    AppException,
    BusinessRuleViolation,
    InfrastructureFailure,
)
from app.utils.response import error_response
import logging

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


# -------------------------
# APP EXCEPTIONS
# -------------------------
async def app_exception_handler(request: Request, exc: AppException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.detail, exc.error_code, exc.details),
    )


# -------------------------
# FASTAPI VALIDATION
# -------------------------
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content=error_response(
            "Invalid request data",
            ErrorCode.VALIDATION_ERROR,
            details,
        ),
    )


# -------------------------
# HTTP EXCEPTIONS (mapped)
# -------------------------
HTTP_STATUS_TO_ERROR_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
):
    error_code = HTTP_STATUS_TO_ERROR_CODE.get(
        exc.status_code,
        ErrorCode.INTERNAL_SERVER_ERROR,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), error_code),
    )


# -------------------------
# STORED PROCEDURE ERRORS
# -------------------------
async def business_rule_exception_handler(
    request: Request, exc: BusinessRuleViolation
):
    return JSONResponse(
        status_code=400,
        content=error_response(exc.message, ErrorCode.BUSINESS_RULE_VIOLATION),
    )


async def infrastructure_exception_handler(
    request: Request, exc: InfrastructureFailure
):
    logger.error(
        "Infrastructure failure",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
            "procedure": exc.procedure,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_response(
            GENERIC_ERROR_MESSAGE,
            ErrorCode.INTERNAL_SERVER_ERROR,
        ),
    )


# -------------------------
# LAST RESORT
# -------------------------
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_response(
            GENERIC_ERROR_MESSAGE,
            ErrorCode.INTERNAL_SERVER_ERROR,
        ),
    )
