# app/constants/procedures.py
# Stored functions owned by the database. Names are interpolated into SQL,
# so they must stay plain schema-qualified identifiers.

# Security
PERMISSION_CHECK = "security.sp_permission_check"

# Products
PRODUCT_CREATE = "functional.sp_product_create"
PRODUCT_LIST = "functional.sp_product_list"
PRODUCT_GET = "functional.sp_product_get"
PRODUCT_UPDATE = "functional.sp_product_update"
PRODUCT_DELETE = "functional.sp_product_delete"
PRODUCT_LIST_CRITICAL = "functional.sp_product_list_critical"
PRODUCT_CRITICAL_HISTORY_GET = "functional.sp_product_critical_history_get"
PRODUCT_UPDATE_MINIMUM_STOCK = "functional.sp_product_update_minimum_stock"
PRODUCT_CHECK_CRITICAL_STATUS = "functional.sp_product_check_critical_status"

# Stock movements
STOCK_MOVEMENT_CREATE = "functional.sp_stock_movement_create"
STOCK_MOVEMENT_LIST = "functional.sp_stock_movement_list"
STOCK_MOVEMENT_GET = "functional.sp_stock_movement_get"
