# app/routers/__init__.py

from .inventory.product_router import router as product_router
from .inventory.stock_movement_router import router as stock_movement_router


__all__ = [
"product_router",
"stock_movement_router",
]
