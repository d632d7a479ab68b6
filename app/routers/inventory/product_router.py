# app/routers/inventory/product_router.py

from typing import List

from fastapi import APIRouter, Depends, Request

from app.constants.securables import Permission, Securable
from app.core.procedures import StoredProcedureClient, get_procedures
from app.schemas.inventory.product_schemas import (
    CriticalProductItem,
    CriticalStatusOut,
    MinimumStockUpdate,
    MinimumStockUpdateOut,
    ProductCreate,
    ProductCriticalHistoryOut,
    ProductCriticalListParams,
    ProductIdOut,
    ProductIdParams,
    ProductListItem,
    ProductListParams,
    ProductOut,
    ProductUpdate,
)
from app.services.inventory.product_service import (
    product_check_critical_status,
    product_create,
    product_critical_history_get,
    product_delete,
    product_get,
    product_list,
    product_list_critical,
    product_update,
    product_update_minimum_stock,
)
from app.utils.crud_controller import CrudController, SecurityRule
from app.utils.pagination import build_pagination, total_from_rows
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/product", tags=["Products"])
logger = get_logger(__name__)

operation = CrudController(
    [
        SecurityRule(Securable.PRODUCT, Permission.CREATE),
        SecurityRule(Securable.PRODUCT, Permission.READ),
        SecurityRule(Securable.PRODUCT, Permission.UPDATE),
        SecurityRule(Securable.PRODUCT, Permission.DELETE),
    ]
)


@router.get("", response_model=APIResponse[List[ProductListItem]])
async def list_products_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, ProductListParams)
    params = validated.params

    items = await product_list(client, validated.credential, params)

    return success_response(
        items,
        build_pagination(params.page_number, params.page_size, total_from_rows(items)),
    )


@router.post("", response_model=APIResponse[ProductIdOut])
async def create_product_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.create(request, client, ProductCreate)
    logger.info("Create product", extra={"code": validated.params.code})

    data = await product_create(client, validated.credential, validated.params)
    return success_response(data)


# Declared before /{id} so "critical" is not taken as an id
@router.get("/critical", response_model=APIResponse[List[CriticalProductItem]])
async def list_critical_products_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, ProductCriticalListParams)

    items = await product_list_critical(client, validated.credential, validated.params)
    return success_response(items)


@router.get("/{id}", response_model=APIResponse[ProductOut])
async def get_product_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, ProductIdParams)

    data = await product_get(client, validated.credential, validated.params.id)
    return success_response(data)


@router.put("/{id}", response_model=APIResponse[ProductIdOut])
async def update_product_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.update(request, client, ProductUpdate)
    logger.info("Update product", extra={"id_product": validated.params.id})

    data = await product_update(client, validated.credential, validated.params)
    return success_response(data)


@router.delete("/{id}", response_model=APIResponse[ProductIdOut])
async def delete_product_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.delete(request, client, ProductIdParams)
    logger.info("Delete product", extra={"id_product": validated.params.id})

    data = await product_delete(client, validated.credential, validated.params.id)
    return success_response(data)


@router.get(
    "/{id}/critical-history",
    response_model=APIResponse[ProductCriticalHistoryOut],
)
async def get_product_critical_history_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, ProductIdParams)

    data = await product_critical_history_get(
        client, validated.credential, validated.params.id
    )
    return success_response(data)


@router.get("/{id}/critical-status", response_model=APIResponse[CriticalStatusOut])
async def get_product_critical_status_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.read(request, client, ProductIdParams)

    data = await product_check_critical_status(
        client, validated.credential, validated.params.id
    )
    return success_response(data)


@router.patch(
    "/{id}/minimum-stock",
    response_model=APIResponse[MinimumStockUpdateOut],
)
async def update_product_minimum_stock_api(
    request: Request,
    client: StoredProcedureClient = Depends(get_procedures),
):
    validated = await operation.update(request, client, MinimumStockUpdate)
    logger.info(
        "Update minimum stock",
        extra={
            "id_product": validated.params.id,
            "minimum_stock": validated.params.minimum_stock,
        },
    )

    data = await product_update_minimum_stock(
        client, validated.credential, validated.params
    )
    return success_response(data)
