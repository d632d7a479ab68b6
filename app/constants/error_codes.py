# app/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # Generic
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    # Products
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"

    # Stock movements
    STOCK_MOVEMENT_NOT_FOUND = "STOCK_MOVEMENT_NOT_FOUND"
