"""
Batch coordination of the product import.
"""

from .ordering import resolve_observer_order
from .product_subject import ProductImportSubject
from .row_context import RowContext

__all__ = [
    "ProductImportSubject",
    "RowContext",
    "resolve_observer_order",
]
