# app/utils/crud_controller.py

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Sequence, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.constants.error_codes import ErrorCode
from app.constants.securables import Permission, Securable
from app.core.exceptions import AppException
from app.core.procedures import StoredProcedureClient
from app.schemas.auth.credential_schemas import Credential
from app.services.auth.permission_service import authorize
from app.utils.logger import get_logger

logger = get_logger("auth.guard")

ACCOUNT_HEADER = "x-account-id"
USER_HEADER = "x-user-id"

# Identity columns are PostgreSQL integers
MAX_ID = 2_147_483_647

S = TypeVar("S", bound=BaseModel)


@dataclass(frozen=True)
class SecurityRule:
    securable: Securable
    permission: Permission


@dataclass
class ValidatedRequest(Generic[S]):
    credential: Credential
    params: S


def _positive_int(value: str | None) -> int | None:
    if value is None:
        return None
    value = value.strip()
    if not (value.isascii() and value.isdigit()) or len(value) > len(str(MAX_ID)):
        return None
    number = int(value)
    return number if 0 < number <= MAX_ID else None


def resolve_credential(request: Request) -> Credential:
    id_account = _positive_int(request.headers.get(ACCOUNT_HEADER))
    id_user = _positive_int(request.headers.get(USER_HEADER))

    if not id_account or not id_user:
        logger.warning("Missing or invalid identity headers")
        raise AppException(
            401,
            "Authentication required",
            ErrorCode.UNAUTHORIZED,
        )

    return Credential(id_account=id_account, id_user=id_user)


def _validation_details(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def _validation_failed(details: List[Dict[str, Any]]) -> AppException:
    return AppException(
        422,
        "Validation failed",
        ErrorCode.VALIDATION_ERROR,
        details,
    )


async def _read_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        body = await request.json()
    except ValueError:
        raise _validation_failed(
            [{"field": "body", "message": "Malformed JSON body", "type": "json_invalid"}]
        )

    if not isinstance(body, dict):
        raise _validation_failed(
            [{"field": "body", "message": "Body must be a JSON object", "type": "dict_type"}]
        )

    return body


class CrudController:
    """Identity, permission and parameter gate shared by every endpoint.

    Each operation resolves the caller from the identity headers (401),
    checks the declared security rules for that permission (403), then
    merges path, query and body parameters, later sources winning on key
    collision, and validates them against the schema (422).
    """

    def __init__(self, rules: Sequence[SecurityRule]):
        self.rules = list(rules)

    async def create(
        self, request: Request, client: StoredProcedureClient, schema: Type[S]
    ) -> ValidatedRequest[S]:
        return await self._validate(request, client, schema, Permission.CREATE)

    async def read(
        self, request: Request, client: StoredProcedureClient, schema: Type[S]
    ) -> ValidatedRequest[S]:
        return await self._validate(request, client, schema, Permission.READ)

    async def update(
        self, request: Request, client: StoredProcedureClient, schema: Type[S]
    ) -> ValidatedRequest[S]:
        return await self._validate(request, client, schema, Permission.UPDATE)

    async def delete(
        self, request: Request, client: StoredProcedureClient, schema: Type[S]
    ) -> ValidatedRequest[S]:
        return await self._validate(request, client, schema, Permission.DELETE)

    async def _validate(
        self,
        request: Request,
        client: StoredProcedureClient,
        schema: Type[S],
        permission: Permission,
    ) -> ValidatedRequest[S]:
        credential = resolve_credential(request)
        await self._check_security(request, client, credential, permission)
        params = await self._validate_params(request, schema)
        return ValidatedRequest(credential=credential, params=params)

    async def _check_security(
        self,
        request: Request,
        client: StoredProcedureClient,
        credential: Credential,
        permission: Permission,
    ) -> None:
        rules = [r for r in self.rules if r.permission == permission]
        if not rules:
            logger.warning(
                "No security rule declared",
                extra={"permission": permission.value, "path": request.url.path},
            )
            raise AppException(
                403,
                "Permission denied",
                ErrorCode.PERMISSION_DENIED,
            )

        enforce = request.app.state.settings.enforce_permissions
        for rule in rules:
            allowed = await authorize(
                client,
                credential,
                rule.securable,
                rule.permission,
                enforce=enforce,
            )
            if not allowed:
                raise AppException(
                    403,
                    "Permission denied",
                    ErrorCode.PERMISSION_DENIED,
                )

    async def _validate_params(self, request: Request, schema: Type[S]) -> S:
        params: Dict[str, Any] = {
            **request.path_params,
            **request.query_params,
            **(await _read_body(request)),
        }

        try:
            return schema.model_validate(params)
        except ValidationError as exc:
            raise _validation_failed(_validation_details(exc))
