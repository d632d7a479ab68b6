# app/schemas/inventory/product_schemas.py

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from app.constants.pagination import PAGE_SIZES
from app.schemas.base import Bit, CamelModel, FK, NonNegativeCount


# =====================================================
# REQUEST PARAMS
# =====================================================
class ProductCreate(CamelModel):
    code: str = Field(
        min_length=3,
        max_length=20,
        pattern=r"^[A-Z0-9]+$",
        description="Uppercase letters and numbers only",
    )
    description: str = Field(min_length=5, max_length=200)
    id_category: FK
    id_unit_of_measure: FK
    minimum_stock: NonNegativeCount = 5
    active: Bit = 1


class ProductListParams(CamelModel):
    filter_code: Optional[str] = Field(default=None, max_length=20)
    filter_description: Optional[str] = Field(default=None, max_length=200)
    filter_id_category: Optional[FK] = None
    filter_active: Optional[Bit] = None
    sort_by: Literal["code", "description", "category", "dateCreated"] = "code"
    sort_direction: Literal["asc", "desc"] = "asc"
    page_number: int = Field(default=1, ge=1)
    page_size: int = 25

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"pageSize must be one of {', '.join(map(str, PAGE_SIZES))}")
        return value


class ProductIdParams(CamelModel):
    id: FK


class ProductUpdate(CamelModel):
    id: FK
    description: str = Field(min_length=5, max_length=200)
    id_category: FK
    id_unit_of_measure: FK
    minimum_stock: NonNegativeCount
    active: Bit


class ProductCriticalListParams(CamelModel):
    filter_id_category: Optional[FK] = None
    sort_by: Literal["quantity", "code", "description", "category"] = "quantity"
    sort_direction: Literal["asc", "desc"] = "asc"


class MinimumStockUpdate(CamelModel):
    id: FK
    minimum_stock: NonNegativeCount


# =====================================================
# RESPONSES
# =====================================================
class ProductIdOut(CamelModel):
    id_product: int


class ProductOut(CamelModel):
    id_product: int
    code: str
    description: str
    id_category: int
    category_name: Optional[str] = None
    category_description: Optional[str] = None
    id_unit_of_measure: int
    unit_of_measure_code: Optional[str] = None
    unit_of_measure_name: Optional[str] = None
    minimum_stock: int
    active: int
    date_created: datetime
    date_modified: Optional[datetime] = None


class ProductListItem(CamelModel):
    id_product: int
    code: str
    description: str
    id_category: int
    category_name: Optional[str] = None
    id_unit_of_measure: int
    unit_of_measure_code: Optional[str] = None
    unit_of_measure_name: Optional[str] = None
    minimum_stock: int
    active: int
    date_created: datetime
    date_modified: Optional[datetime] = None
    total_count: int


class CriticalProductItem(CamelModel):
    id_product: int
    code: str
    description: str
    id_category: int
    category_name: Optional[str] = None
    id_unit_of_measure: int
    unit_of_measure_code: Optional[str] = None
    unit_of_measure_name: Optional[str] = None
    minimum_stock: int
    current_quantity: int
    critical_status: int
    zero_stock: int
    last_update: Optional[datetime] = None


class CriticalHistoryEntry(CamelModel):
    id_critical_stock_history: int
    entry_date: datetime
    exit_date: Optional[datetime] = None
    minimum_quantity: int
    duration_days: Optional[int] = None
    is_active: int


class CriticalHistoryProductInfo(CamelModel):
    id_product: int
    code: str
    description: str
    minimum_stock: int
    critical_status: int


class ProductCriticalHistoryOut(CamelModel):
    product_info: CriticalHistoryProductInfo
    critical_history: List[CriticalHistoryEntry]


class MinimumStockUpdateOut(CamelModel):
    id_product: int
    minimum_stock: int
    previous_minimum_stock: int
    is_critical: bool
    was_revaluated: bool


class CriticalStatusOut(CamelModel):
    id_product: int
    critical_status: int
    current_quantity: int
    minimum_stock: int
    verification_date: datetime
