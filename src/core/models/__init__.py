"""
Core data models for the product import.

All models use Pydantic for runtime validation and type safety.
"""

from .attribute_set import AttributeSet
from .product import Product
from .stock_item import StockItem
from .stock_status import StockStatus

__all__ = [
    "AttributeSet",
    "Product",
    "StockItem",
    "StockStatus",
]
