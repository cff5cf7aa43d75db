# stockroom/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # masters
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PRODUCT_CODE_EXISTS = "PRODUCT_CODE_EXISTS"
    PRODUCT_VERSION_CONFLICT = "PRODUCT_VERSION_CONFLICT"
    PRODUCT_IN_USE = "PRODUCT_IN_USE"
    WAREHOUSE_NOT_FOUND = "WAREHOUSE_NOT_FOUND"
    WAREHOUSE_VERSION_CONFLICT = "WAREHOUSE_VERSION_CONFLICT"
    WAREHOUSE_IN_USE = "WAREHOUSE_IN_USE"

    # stock ledger
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    STOCK_CONFLICT = "STOCK_CONFLICT"
    LEDGER_IMMUTABLE = "LEDGER_IMMUTABLE"
