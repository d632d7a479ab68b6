# app/core/procedures.py

import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import BusinessRuleViolation, InfrastructureFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)

PROCEDURE_NAME = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)?$")
PARAM_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")


class ExpectedReturn(str, Enum):
    SINGLE = "single"
    MULTI = "multi"
    NONE = "none"


def _build_call(procedure: str, params: Mapping[str, Any]) -> str:
    if not PROCEDURE_NAME.match(procedure):
        raise ValueError(f"Invalid procedure name: {procedure}")

    for key in params:
        if not PARAM_NAME.match(key):
            raise ValueError(f"Invalid parameter name: {key}")

    args = ", ".join(f"{key} => :{key}" for key in params)
    return f"SELECT * FROM {procedure}({args})"


def _sqlstate(exc: DBAPIError) -> Optional[str]:
    orig = exc.orig
    for source in (orig, getattr(orig, "__cause__", None)):
        code = getattr(source, "sqlstate", None) or getattr(source, "pgcode", None)
        if code:
            return code
    return None


def _db_message(exc: DBAPIError) -> str:
    orig = exc.orig
    for source in (getattr(orig, "__cause__", None), orig):
        message = getattr(source, "message", None)
        if message:
            return message
    return str(orig)


class StoredProcedureClient:
    """Calls stored functions over one async session.

    Every call runs in its own transaction: rows are read, then the
    transaction is committed. Database errors are translated into
    ``BusinessRuleViolation`` when the SQLSTATE matches the configured
    business-rule code, and ``InfrastructureFailure`` otherwise.
    """

    def __init__(self, session: AsyncSession, business_rule_sqlstate: str = "51000"):
        self.session = session
        self.business_rule_sqlstate = business_rule_sqlstate

    async def call(
        self,
        procedure: str,
        params: Mapping[str, Any],
        expected: ExpectedReturn = ExpectedReturn.MULTI,
        result_sets: Optional[Sequence[str]] = None,
    ):
        sql = _build_call(procedure, params)
        logger.debug("Calling procedure", extra={"procedure": procedure})

        try:
            if result_sets:
                data = await self._fetch_result_sets(sql, params, result_sets)
            else:
                result = await self.session.execute(text(sql), dict(params))
                data = self._shape(result, expected)

            await self.session.commit()
            return data

        except DBAPIError as exc:
            await self.session.rollback()

            if _sqlstate(exc) == self.business_rule_sqlstate:
                message = _db_message(exc)
                logger.info(
                    "Business rule violation",
                    extra={"procedure": procedure, "db_message": message},
                )
                raise BusinessRuleViolation(
                    message,
                    procedure=procedure,
                    sqlstate=self.business_rule_sqlstate,
                ) from exc

            logger.exception("Procedure call failed", extra={"procedure": procedure})
            raise InfrastructureFailure(
                "Database call failed", procedure=procedure
            ) from exc

        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Procedure call failed", extra={"procedure": procedure})
            raise InfrastructureFailure(
                "Database call failed", procedure=procedure
            ) from exc

    @staticmethod
    def _shape(result, expected: ExpectedReturn):
        if expected == ExpectedReturn.NONE:
            return None

        rows = [dict(r) for r in result.mappings().all()]

        if expected == ExpectedReturn.SINGLE:
            return rows[0] if rows else None

        return rows

    async def _fetch_result_sets(
        self,
        sql: str,
        params: Mapping[str, Any],
        result_sets: Sequence[str],
    ) -> Dict[str, List[dict]]:
        # The function returns one refcursor per result set, in order.
        result = await self.session.execute(text(sql), dict(params))
        cursors = [row[0] for row in result.all()]

        data: Dict[str, List[dict]] = {}
        for index, name in enumerate(result_sets):
            if index >= len(cursors):
                data[name] = []
                continue

            cursor = str(cursors[index]).replace('"', '""')
            fetched = await self.session.execute(text(f'FETCH ALL FROM "{cursor}"'))
            data[name] = [dict(r) for r in fetched.mappings().all()]

        return data


# =====================================================
# DEPENDENCY
# =====================================================
async def get_procedures(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> StoredProcedureClient:
    settings = request.app.state.settings
    return StoredProcedureClient(db, settings.business_rule_sqlstate)
