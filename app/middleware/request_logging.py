import time
import uuid

from fastapi import Request

from app.utils.logger import get_logger

logger = get_logger("access")

REQUEST_ID_HEADER = "x-request-id"


def _caller(request: Request) -> dict:
    return {
        "client_addr": request.client.host if request.client else "unknown",
        "account_id": request.headers.get("x-account-id") or "-",
        "user_id": request.headers.get("x-user-id") or "-",
    }


async def request_logging_middleware(request: Request, call_next):
    """One access line per request, tagged with the caller's identity headers.

    The request id is taken from ``x-request-id`` when the caller sends one
    and echoed back on the response.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        logger.error(
            "request failed",
            extra={
                **_caller(request),
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": 500,
                "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        raise

    response.headers[REQUEST_ID_HEADER] = request_id

    logger.info(
        "",
        extra={
            **_caller(request),
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )

    return response
