import enum


class TransactionType(str, enum.Enum):
    IN = "in"
    OUT = "out"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionType.IN else -1
