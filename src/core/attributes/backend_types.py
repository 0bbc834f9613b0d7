"""
Backend types and the coercion applied to raw column values.

Each BackendType tag has exactly one coercion function. Raw values are
strings from the import file; a value that cannot be parsed raises
ValueError, which the attribute loader turns into a CoercionError.
"""

from enum import Enum
from typing import Any, Callable


class BackendType(str, Enum):
    """Declared storage type of an attribute."""

    VARCHAR = "varchar"
    TEXT = "text"
    STATIC = "static"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"

    @classmethod
    def from_name(cls, name: "str | BackendType") -> "BackendType":
        """
        Look up a backend type by its name.

        Raises:
            ValueError: If the name is not a supported backend type
        """
        if isinstance(name, BackendType):
            return name
        try:
            return cls(name.lower())
        except ValueError:
            supported = ", ".join(t.value for t in cls)
            raise ValueError(f"Unsupported backend type: {name} (supported: {supported})")


def _to_string(value: Any) -> str:
    return str(value)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"'{value}' is not an integral number")
        return int(value)
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        # Accept "5.0" from spreadsheets, reject "5.5"
        number = float(text)
        if not number.is_integer():
            raise ValueError(f"'{value}' is not an integral number")
        return int(number)


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    number = float(str(value).strip()) if isinstance(value, str) else float(value)
    if number != number or number in (float("inf"), float("-inf")):
        raise ValueError(f"'{value}' is not a finite number")
    return number


def _to_boolean(value: Any) -> int:
    # Avoid "false" -> True; flags are stored as 0/1
    if isinstance(value, bool):
        return int(value)
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "y", "on"):
        return 1
    if text in ("false", "0", "no", "n", "off"):
        return 0
    raise ValueError(f"Cannot parse '{value}' as boolean")


COERCERS: dict[BackendType, Callable[[Any], Any]] = {
    BackendType.VARCHAR: _to_string,
    BackendType.TEXT: _to_string,
    BackendType.STATIC: _to_string,
    BackendType.DATETIME: _to_string,
    BackendType.INT: _to_int,
    BackendType.FLOAT: _to_float,
    BackendType.DECIMAL: _to_float,
    BackendType.BOOLEAN: _to_boolean,
}


def coerce_value(value: Any, backend_type: BackendType) -> Any:
    """
    Coerce a raw value to the given backend type.

    Datetime values are passed through as strings here; date reformatting
    is done by the attribute loader with the subject's date formatter.

    Raises:
        ValueError: If the value cannot be parsed
        TypeError: If the value has an unusable type
    """
    return COERCERS[backend_type](value)
