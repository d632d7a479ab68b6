# app/constants/securables.py

from enum import Enum


class Securable(str, Enum):
    PRODUCT = "PRODUCT"
    STOCK_MOVEMENT = "STOCK_MOVEMENT"


class Permission(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
