# app/services/auth/permission_service.py

from app.constants import procedures
from app.constants.securables import Permission, Securable
from app.core.procedures import ExpectedReturn, StoredProcedureClient
from app.schemas.auth.credential_schemas import Credential
from app.utils.logger import get_logger

logger = get_logger("auth.permissions")


async def authorize(
    client: StoredProcedureClient,
    credential: Credential,
    securable: Securable,
    permission: Permission,
    *,
    enforce: bool = True,
) -> bool:
    """Return True when the caller holds ``permission`` on ``securable``."""
    if not enforce:
        logger.debug(
            "Permission enforcement disabled",
            extra={"securable": securable.value, "permission": permission.value},
        )
        return True

    row = await client.call(
        procedures.PERMISSION_CHECK,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "securable": securable.value,
            "permission": permission.value,
        },
        ExpectedReturn.SINGLE,
    )

    allowed = bool(row and row.get("allowed"))
    if not allowed:
        logger.warning(
            "Permission denied",
            extra={
                "id_account": credential.id_account,
                "id_user": credential.id_user,
                "securable": securable.value,
                "permission": permission.value,
            },
        )
    return allowed
