# app/utils/response.py

from datetime import datetime, timezone
from typing import TypeVar, Generic, Optional, Dict, Any
from pydantic import BaseModel

T = TypeVar("T")


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(
    data: Optional[T] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "metadata": {
            **(metadata or {}),
            "timestamp": utc_timestamp(),
        },
    }


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    error: Dict[str, Any] = {
        "code": code or "ERROR",
        "message": message,
    }
    if details is not None:
        error["details"] = details

    return {
        "success": False,
        "error": error,
        "timestamp": utc_timestamp(),
    }


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    metadata: Dict[str, Any]
