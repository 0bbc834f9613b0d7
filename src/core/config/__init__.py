"""
Import configuration management.
"""

from .import_config import DEFAULT_HEADER_STOCK_MAPPINGS, ImportConfig, ImportConfigLoader

__all__ = [
    "DEFAULT_HEADER_STOCK_MAPPINGS",
    "ImportConfig",
    "ImportConfigLoader",
]
