"""
RowContext - per-row state handed from observer to observer.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping

from src.core.attributes.backend_types import BackendType
from src.core.errors import CoercionError, MissingKeyError
from src.core.keys import ColumnKeys

if TYPE_CHECKING:
    from .product_subject import ProductImportSubject


class RowContext:
    """
    State of one row while its observers run.

    The subject creates a fresh context for every row, so an entity id
    published by one observer is only ever visible to the observers of
    the same row.
    """

    def __init__(self, subject: "ProductImportSubject", row: Mapping[str, Any], row_number: int | None = None):
        self.subject = subject
        self.row = MappingProxyType(dict(row))
        self.row_number = row_number
        self._last_entity_id: int | None = None

    @property
    def sku(self) -> str:
        """
        The natural key of the row.

        Raises:
            MissingKeyError: If the SKU column is missing or empty
        """
        if not self.has_value(ColumnKeys.SKU):
            raise MissingKeyError(ColumnKeys.SKU, row_number=self.row_number)
        return str(self.row[ColumnKeys.SKU]).strip()

    def has_value(self, column: str) -> bool:
        """Whether the row has a non-empty value for the column."""
        value = self.row.get(column)
        if value is None:
            return False
        return not (isinstance(value, str) and value.strip() == "")

    def get_value(
        self,
        column: str,
        default: Any = None,
        formatter: Callable[[Any], Any] | None = None,
        formatted_as: str = BackendType.DATETIME.value,
    ) -> Any:
        """
        Return the value of a column.

        The formatter is only applied to values taken from the row; the
        default is returned as given. `formatted_as` names the target type
        in the error raised when the formatter rejects a value.

        Raises:
            CoercionError: If the formatter rejects the value
        """
        if not self.has_value(column):
            return default

        value = self.row[column]
        if formatter is None:
            return value

        try:
            return formatter(value)
        except (ValueError, TypeError) as e:
            raise CoercionError(column, column, value, formatted_as, str(e)) from e

    @property
    def last_entity_id(self) -> int | None:
        """entity_id of the product persisted for this row, if any."""
        return self._last_entity_id

    @last_entity_id.setter
    def last_entity_id(self, entity_id: int | None) -> None:
        self._last_entity_id = entity_id

    def __repr__(self) -> str:
        return f"RowContext(row_number={self.row_number}, sku={self.row.get(ColumnKeys.SKU)!r})"
