# app/services/inventory/product_service.py

from typing import List

from app.constants import procedures
from app.constants.error_codes import ErrorCode
from app.core.exceptions import AppException
from app.core.procedures import ExpectedReturn, StoredProcedureClient
from app.schemas.auth.credential_schemas import Credential
from app.schemas.inventory.product_schemas import (
    CriticalProductItem,
    CriticalStatusOut,
    MinimumStockUpdate,
    MinimumStockUpdateOut,
    ProductCreate,
    ProductCriticalHistoryOut,
    ProductCriticalListParams,
    ProductIdOut,
    ProductListItem,
    ProductListParams,
    ProductOut,
    ProductUpdate,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _not_found() -> AppException:
    return AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)


# ---------------- CREATE ----------------
async def product_create(
    client: StoredProcedureClient,
    credential: Credential,
    payload: ProductCreate,
) -> ProductIdOut:
    row = await client.call(
        procedures.PRODUCT_CREATE,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "code": payload.code,
            "description": payload.description,
            "id_category": payload.id_category,
            "id_unit_of_measure": payload.id_unit_of_measure,
            "minimum_stock": payload.minimum_stock,
            "active": payload.active,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise AppException(
            500,
            "Product creation returned no identifier",
            ErrorCode.INTERNAL_SERVER_ERROR,
        )

    logger.info("Product created", extra={"code": payload.code})
    return ProductIdOut.model_validate(row)


# ---------------- LIST ----------------
async def product_list(
    client: StoredProcedureClient,
    credential: Credential,
    params: ProductListParams,
) -> List[ProductListItem]:
    rows = await client.call(
        procedures.PRODUCT_LIST,
        {
            "id_account": credential.id_account,
            "filter_code": params.filter_code,
            "filter_description": params.filter_description,
            "filter_id_category": params.filter_id_category,
            "filter_active": params.filter_active,
            "sort_by": params.sort_by,
            "sort_direction": params.sort_direction,
            "page_number": params.page_number,
            "page_size": params.page_size,
        },
        ExpectedReturn.MULTI,
    )
    return [ProductListItem.model_validate(r) for r in rows]


# ---------------- GET ----------------
async def product_get(
    client: StoredProcedureClient,
    credential: Credential,
    id_product: int,
) -> ProductOut:
    row = await client.call(
        procedures.PRODUCT_GET,
        {
            "id_account": credential.id_account,
            "id_product": id_product,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise _not_found()
    return ProductOut.model_validate(row)


# ---------------- UPDATE ----------------
async def product_update(
    client: StoredProcedureClient,
    credential: Credential,
    payload: ProductUpdate,
) -> ProductIdOut:
    row = await client.call(
        procedures.PRODUCT_UPDATE,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "id_product": payload.id,
            "description": payload.description,
            "id_category": payload.id_category,
            "id_unit_of_measure": payload.id_unit_of_measure,
            "minimum_stock": payload.minimum_stock,
            "active": payload.active,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise _not_found()

    logger.info("Product updated", extra={"id_product": payload.id})
    return ProductIdOut.model_validate(row)


# ---------------- DELETE (SOFT) ----------------
async def product_delete(
    client: StoredProcedureClient,
    credential: Credential,
    id_product: int,
) -> ProductIdOut:
    row = await client.call(
        procedures.PRODUCT_DELETE,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "id_product": id_product,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise _not_found()

    logger.info("Product deactivated", extra={"id_product": id_product})
    return ProductIdOut.model_validate(row)


# ---------------- CRITICAL STOCK ----------------
async def product_list_critical(
    client: StoredProcedureClient,
    credential: Credential,
    params: ProductCriticalListParams,
) -> List[CriticalProductItem]:
    rows = await client.call(
        procedures.PRODUCT_LIST_CRITICAL,
        {
            "id_account": credential.id_account,
            "filter_id_category": params.filter_id_category,
            "sort_by": params.sort_by,
            "sort_direction": params.sort_direction,
        },
        ExpectedReturn.MULTI,
    )
    return [CriticalProductItem.model_validate(r) for r in rows]


async def product_critical_history_get(
    client: StoredProcedureClient,
    credential: Credential,
    id_product: int,
) -> ProductCriticalHistoryOut:
    result = await client.call(
        procedures.PRODUCT_CRITICAL_HISTORY_GET,
        {
            "id_account": credential.id_account,
            "id_product": id_product,
        },
        ExpectedReturn.MULTI,
        result_sets=["product_info", "critical_history"],
    )

    product_info = result.get("product_info") or []
    if not product_info:
        raise _not_found()

    return ProductCriticalHistoryOut(
        product_info=product_info[0],
        critical_history=result.get("critical_history") or [],
    )


async def product_update_minimum_stock(
    client: StoredProcedureClient,
    credential: Credential,
    payload: MinimumStockUpdate,
) -> MinimumStockUpdateOut:
    """Set a new threshold; the database re-evaluates critical status."""
    row = await client.call(
        procedures.PRODUCT_UPDATE_MINIMUM_STOCK,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "id_product": payload.id,
            "minimum_stock": payload.minimum_stock,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise _not_found()

    result = MinimumStockUpdateOut.model_validate(row)
    logger.info(
        "Minimum stock updated",
        extra={
            "id_product": payload.id,
            "previous_minimum_stock": result.previous_minimum_stock,
            "minimum_stock": result.minimum_stock,
            "was_revaluated": result.was_revaluated,
        },
    )
    return result


async def product_check_critical_status(
    client: StoredProcedureClient,
    credential: Credential,
    id_product: int,
) -> CriticalStatusOut:
    row = await client.call(
        procedures.PRODUCT_CHECK_CRITICAL_STATUS,
        {
            "id_account": credential.id_account,
            "id_product": id_product,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise _not_found()
    return CriticalStatusOut.model_validate(row)
