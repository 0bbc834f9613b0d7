"""
Product file readers.
"""

from .product_file_reader import FORMAT_OPTIONS, ProductFileReader

__all__ = [
    "FORMAT_OPTIONS",
    "ProductFileReader",
]
