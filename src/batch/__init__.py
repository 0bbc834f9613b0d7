"""
Spark file import module.
"""

from .pipeline import ProductImportPipeline
from .readers import ProductFileReader

__all__ = [
    "ProductImportPipeline",
    "ProductFileReader",
]
