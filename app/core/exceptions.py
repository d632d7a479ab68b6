from typing import Any, Optional

from fastapi import HTTPException
from app.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: Optional[Any] = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


# -------------------------
# DATA ACCESS BOUNDARY
# -------------------------
class DataAccessError(Exception):
    """Base for failures raised by the stored-procedure client."""

    def __init__(self, message: str, procedure: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.procedure = procedure


class BusinessRuleViolation(DataAccessError):
    """A stored function rejected the call with the business-rule SQLSTATE.

    The message is the one raised by the database and is safe to show to
    the client as-is.
    """

    def __init__(
        self,
        message: str,
        procedure: Optional[str] = None,
        sqlstate: Optional[str] = None,
    ):
        super().__init__(message, procedure)
        self.sqlstate = sqlstate


class InfrastructureFailure(DataAccessError):
    """Any other database failure. Never shown to the client."""
