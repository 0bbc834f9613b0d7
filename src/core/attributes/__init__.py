"""
Dynamic attribute loading with declared backend types.
"""

from .attribute_loader import AttributeLoader, AttributeMappings
from .backend_types import BackendType, coerce_value

__all__ = [
    "AttributeLoader",
    "AttributeMappings",
    "BackendType",
    "coerce_value",
]
