from fastapi import HTTPException
from stockroom.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class InvalidQuantity(AppException):
    def __init__(self, quantity, message: str = "Quantity must be a positive integer"):
        super().__init__(
            400,
            message,
            ErrorCode.INVALID_QUANTITY,
            {"quantity": quantity},
        )


class InsufficientStock(AppException):
    def __init__(self, available: int, requested: int):
        super().__init__(
            409,
            "Insufficient stock",
            ErrorCode.INSUFFICIENT_STOCK,
            {"available": available, "requested": requested},
        )
        self.available = available
        self.requested = requested


class LedgerImmutableError(Exception):
    """Raised when code tries to rewrite or remove a ledger row."""

    def __init__(self, transaction_id, operation: str):
        super().__init__(
            f"Stock transaction {transaction_id} is immutable ({operation} rejected)"
        )
        self.transaction_id = transaction_id
        self.operation = operation
