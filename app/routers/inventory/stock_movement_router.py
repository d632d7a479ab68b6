# app/routers/inventory/stock_movement_router.py

from typing import List

from fastapi import APIRouter, Depends, Request

from app.constants.securables import Permission, Securable
from app.core.procedures import StoredProcedureClient, get_procedures
from app.schemas.inventory.stock_movement_schemas import (
    StockMovementCreate,
    StockMovementCreateOut,
    StockMovementIdParams,
    StockMovementListItem,
    StockMovementListParams,
    StockMovementOut,
)
from app.services.inventory.stock_movement_service import (
    stock_movement_create,
    stock_movement_get,
    stock_movement_list,
)
from app.utils.crud_controller import CrudController, SecurityRule
from app.utils.pagination import build_pagination, total_from_rows
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/stock-movement", tags=["Stock Movements"])
logger = get_logger(__name__)

# Movements are append-only: no update or delete rules
operation = CrudController(
    [
        SecurityRule(Securable.STOCK_MOVEMENT, Permission.CREATE),
        SecurityRule(Securable.STOCK_MOVEMENT, Permission.READ),
    ]
)


@router.get("", response_model=APIResponse[List[StockMovementListItem]])
async def list_stock_movements_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, StockMovementListParams)
    params = validated.params

    items = await stock_movement_list(client, validated.credential, params)

    return success_response(
        items,
        build_pagination(params.page_number, params.page_size, total_from_rows(items)),
    )


@router.post("", response_model=APIResponse[StockMovementCreateOut])
async def create_stock_movement_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.create(request, client, StockMovementCreate)
    logger.info(
        "Create stock movement",
        extra={
            "id_product": validated.params.id_product,
            "movement_type": validated.params.movement_type.value,
        },
    )

    data = await stock_movement_create(client, validated.credential, validated.params)
    return success_response(data)


@router.get("/{id}", response_model=APIResponse[StockMovementOut])
async def get_stock_movement_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, StockMovementIdParams)

    data = await stock_movement_get(client, validated.credential, validated.params.id)
    return success_response(data)
