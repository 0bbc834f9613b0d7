"""
Row observers of the product import.
"""

from .base_observer import AbstractObserver, AbstractProductImportObserver
from .product_inventory_observer import ProductInventoryObserver
from .product_observer import ProductObserver

__all__ = [
    "AbstractObserver",
    "AbstractProductImportObserver",
    "ProductInventoryObserver",
    "ProductObserver",
]
