# app/services/inventory/stock_movement_service.py

from typing import List

from app.constants import procedures
from app.constants.error_codes import ErrorCode
from app.core.exceptions import AppException
from app.core.procedures import ExpectedReturn, StoredProcedureClient
from app.schemas.auth.credential_schemas import Credential
from app.schemas.inventory.stock_movement_schemas import (
    StockMovementCreate,
    StockMovementCreateOut,
    StockMovementListItem,
    StockMovementListParams,
    StockMovementOut,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def stock_movement_create(
    client: StoredProcedureClient,
    credential: Credential,
    payload: StockMovementCreate,
) -> StockMovementCreateOut:
    # Stock arithmetic happens in the stored function
    row = await client.call(
        procedures.STOCK_MOVEMENT_CREATE,
        {
            "id_account": credential.id_account,
            "id_user": credential.id_user,
            "id_product": payload.id_product,
            "movement_type": payload.movement_type.value,
            "quantity": payload.quantity,
            "movement_date": payload.movement_date,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise AppException(
            500,
            "Stock movement creation returned no identifier",
            ErrorCode.INTERNAL_SERVER_ERROR,
        )

    result = StockMovementCreateOut.model_validate(row)
    logger.info(
        "Stock movement recorded",
        extra={
            "id_product": payload.id_product,
            "movement_type": payload.movement_type.value,
            "quantity": payload.quantity,
            "new_quantity": result.new_quantity,
        },
    )
    return result


async def stock_movement_list(
    client: StoredProcedureClient,
    credential: Credential,
    params: StockMovementListParams,
) -> List[StockMovementListItem]:
    rows = await client.call(
        procedures.STOCK_MOVEMENT_LIST,
        {
            "id_account": credential.id_account,
            "filter_id_product": params.filter_id_product,
            "filter_movement_type": (
                params.filter_movement_type.value
                if params.filter_movement_type
                else None
            ),
            "filter_date_from": params.filter_date_from,
            "filter_date_to": params.filter_date_to,
            "sort_by": params.sort_by,
            "sort_direction": params.sort_direction,
            "page_number": params.page_number,
            "page_size": params.page_size,
        },
        ExpectedReturn.MULTI,
    )
    return [StockMovementListItem.model_validate(r) for r in rows]


async def stock_movement_get(
    client: StoredProcedureClient,
    credential: Credential,
    id_stock_movement: int,
) -> StockMovementOut:
    row = await client.call(
        procedures.STOCK_MOVEMENT_GET,
        {
            "id_account": credential.id_account,
            "id_stock_movement": id_stock_movement,
        },
        ExpectedReturn.SINGLE,
    )
    if row is None:
        raise AppException(
            404,
            "Stock movement not found",
            ErrorCode.STOCK_MOVEMENT_NOT_FOUND,
        )
    return StockMovementOut.model_validate(row)
