# app/schemas/inventory/stock_movement_schemas.py

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field, field_validator

from app.constants.inventory_movement_type import MovementType
from app.constants.pagination import PAGE_SIZES
from app.schemas.base import CamelModel, FK, IsoDate, IsoDateTime, PositiveCount


class StockMovementCreate(CamelModel):
    id_product: FK
    movement_type: MovementType
    quantity: PositiveCount
    movement_date: Optional[IsoDateTime] = None

    @field_validator("movement_date")
    @classmethod
    def not_in_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        # Naive timestamps are taken as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        if value > datetime.now(timezone.utc):
            raise ValueError("Movement date cannot be in the future")
        return value


class StockMovementListParams(CamelModel):
    filter_id_product: Optional[FK] = None
    filter_movement_type: Optional[MovementType] = None
    filter_date_from: Optional[IsoDate] = None
    filter_date_to: Optional[IsoDate] = None
    sort_by: Literal["movementDate", "product", "quantity", "type"] = "movementDate"
    sort_direction: Literal["asc", "desc"] = "desc"
    page_number: int = Field(default=1, ge=1)
    page_size: int = 50

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"pageSize must be one of {', '.join(map(str, PAGE_SIZES))}")
        return value


class StockMovementIdParams(CamelModel):
    id: FK


class StockMovementCreateOut(CamelModel):
    id_stock_movement: int
    new_quantity: int


class StockMovementOut(CamelModel):
    id_stock_movement: int
    id_product: int
    product_code: str
    product_description: str
    movement_type: MovementType
    quantity: int
    movement_date: datetime
    date_created: datetime
    current_quantity: int


class StockMovementListItem(CamelModel):
    id_stock_movement: int
    id_product: int
    product_code: str
    product_description: str
    movement_type: MovementType
    quantity: int
    movement_date: datetime
    date_created: datetime
    total_count: int
