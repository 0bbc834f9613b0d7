"""
AttributeLoader - extracts mapped columns from a row and coerces them.
"""

from typing import TYPE_CHECKING, Any, Mapping

from src.core.errors import CoercionError
from src.observability import metrics

from .backend_types import BackendType, coerce_value

if TYPE_CHECKING:
    from src.core.subject.row_context import RowContext


# target field -> (source column, backend type)
AttributeMappings = Mapping[str, "tuple[str, BackendType | str]"]


class AttributeLoader:
    """
    Loads attribute values for a row based on a column mapping.

    Only columns that are present in the row with a non-empty value are
    returned; everything else is left out so callers can tell "absent"
    apart from "zero".
    """

    def load(self, context: "RowContext", mappings: AttributeMappings) -> dict[str, Any]:
        """
        Load and coerce the mapped attributes of the current row.

        Args:
            context: Row context giving access to the row's values
            mappings: target field -> (source column, backend type)

        Returns:
            target field -> coerced value, for every column with a value

        Raises:
            CoercionError: If a value cannot be converted to its backend type
        """
        attributes: dict[str, Any] = {}

        for field_name, (column, type_name) in mappings.items():
            if not context.has_value(column):
                continue

            backend_type = BackendType.from_name(type_name)
            raw_value = context.get_value(column)
            attributes[field_name] = self._coerce(context, field_name, column, raw_value, backend_type)

        return attributes

    def _coerce(
        self,
        context: "RowContext",
        field_name: str,
        column: str,
        raw_value: Any,
        backend_type: BackendType,
    ) -> Any:
        try:
            if backend_type is BackendType.DATETIME:
                value = context.subject.format_date(raw_value)
            else:
                value = coerce_value(raw_value, backend_type)
        except (ValueError, TypeError) as e:
            metrics.type_coercion_total.labels(backend_type=backend_type.value, status="failure").inc()
            raise CoercionError(field_name, column, raw_value, backend_type.value, str(e)) from e

        metrics.type_coercion_total.labels(backend_type=backend_type.value, status="success").inc()
        return value
