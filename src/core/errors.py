"""
Exception hierarchy for row-level product import failures.

Every error here is fatal for the row it was raised in. The core never
recovers from them; the caller decides whether to skip, retry or abort.
"""

from typing import Any


class RowImportError(Exception):
    """Base class for errors raised while importing a single row."""

    def __init__(self, message: str, sku: str | None = None, row_number: int | None = None):
        self.message = message
        self.sku = sku
        self.row_number = row_number
        super().__init__(message)

    def with_row(self, sku: str | None, row_number: int | None) -> "RowImportError":
        """Attach row context without overwriting what is already known."""
        if self.sku is None:
            self.sku = sku
        if self.row_number is None:
            self.row_number = row_number
        return self

    def __str__(self) -> str:
        location = []
        if self.row_number is not None:
            location.append(f"row {self.row_number}")
        if self.sku:
            location.append(f"sku '{self.sku}'")
        if location:
            return f"[{', '.join(location)}] {self.message}"
        return self.message


class MissingKeyError(RowImportError):
    """Raised when the natural key column is missing or empty."""

    def __init__(self, column: str, row_number: int | None = None):
        self.column = column
        super().__init__(f"Natural key column '{column}' is missing or empty", row_number=row_number)


class CoercionError(RowImportError):
    """Raised when a raw value cannot be converted to its backend type."""

    def __init__(self, field_name: str, column: str, value: Any, backend_type: str, reason: str = ""):
        self.field_name = field_name
        self.column = column
        self.value = value
        self.backend_type = backend_type
        message = f"Cannot coerce column '{column}' value {value!r} to {backend_type} for field '{field_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PersistenceError(RowImportError):
    """Raised by a bunch processor when a load or persist operation fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class AttributeSetNotFoundError(RowImportError):
    """Raised when a row references an attribute set that is not configured."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Attribute set '{code}' is not configured")


class MissingEntityIdError(RowImportError):
    """Raised when a dependent observer runs before a product id was published."""

    def __init__(self, observer_name: str):
        self.observer_name = observer_name
        super().__init__(
            f"Observer '{observer_name}' requires a product entity id, but none was published for this row"
        )


class ObserverOrderError(ValueError):
    """Raised when the declared observer dependencies cannot be ordered."""
