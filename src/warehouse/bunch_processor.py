"""
Bunch processors: load and persist the entities of a product import.

Implements INSERT ... ON CONFLICT UPDATE so repeated imports of the
same SKU update the stored rows instead of duplicating them.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from psycopg import Error as PsycopgError

from src.core.errors import PersistenceError
from src.core.models import Product, StockItem, StockStatus
from src.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .schema_mgmt import PRODUCT_TABLE, STOCK_ITEM_TABLE, STOCK_STATUS_TABLE

logger = get_logger(__name__)

# Product fields stored in their own columns; everything else goes to `attributes`
PRODUCT_COLUMNS = (
    "sku",
    "created_at",
    "updated_at",
    "has_options",
    "required_options",
    "type_id",
    "attribute_set_id",
)


class ProductBunchProcessor(ABC):
    """
    Storage interface used by the product import observers.
    """

    @abstractmethod
    def load_product(self, sku: str) -> Product | None:
        """
        Load the stored product with the passed SKU.

        Returns:
            The product, or None if no product has the SKU
        """

    @abstractmethod
    def persist_product(self, product: Product) -> int:
        """
        Insert or update the product.

        Returns:
            The product's entity_id (the same for create and update)
        """

    @abstractmethod
    def persist_stock_status(self, stock_status: StockStatus) -> None:
        """Insert or update the stock status."""

    @abstractmethod
    def persist_stock_item(self, stock_item: StockItem) -> None:
        """Insert or update the stock item."""


class PostgresProductBunchProcessor(ProductBunchProcessor):
    """
    Bunch processor backed by PostgreSQL.

    Every psycopg error is raised as PersistenceError; nothing is retried.
    """

    def __init__(self, pool: DatabaseConnectionPool, date_format: str = "%Y-%m-%d %H:%M:%S"):
        """
        Initialize the bunch processor.

        Args:
            pool: Database connection pool
            date_format: Format of the product timestamps handed back on load
        """
        self.pool = pool
        self.date_format = date_format

    def load_product(self, sku: str) -> Product | None:
        query = f"""
            SELECT entity_id, sku, created_at, updated_at, has_options,
                   required_options, type_id, attribute_set_id, attributes
            FROM {PRODUCT_TABLE}
            WHERE sku = %s
        """

        try:
            rows = self.pool.execute_query(query, (sku,))
        except PsycopgError as e:
            raise PersistenceError("load_product", str(e)) from e

        if not rows:
            return None

        row = dict(rows[0])
        attributes = row.pop("attributes") or {}
        for column in ("created_at", "updated_at"):
            if isinstance(row[column], datetime):
                row[column] = row[column].strftime(self.date_format)

        return Product(**{**attributes, **row})

    def persist_product(self, product: Product) -> int:
        query = f"""
            INSERT INTO {PRODUCT_TABLE} (
                sku, created_at, updated_at, has_options, required_options,
                type_id, attribute_set_id, attributes
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (sku) DO UPDATE SET
                created_at = EXCLUDED.created_at,
                updated_at = EXCLUDED.updated_at,
                has_options = EXCLUDED.has_options,
                required_options = EXCLUDED.required_options,
                type_id = EXCLUDED.type_id,
                attribute_set_id = EXCLUDED.attribute_set_id,
                attributes = EXCLUDED.attributes
            RETURNING entity_id
        """

        data = product.model_dump()
        params = tuple(data[column] for column in PRODUCT_COLUMNS) + (
            json.dumps(product.attributes),
        )

        try:
            row = self.pool.execute_returning(query, params)
        except PsycopgError as e:
            raise PersistenceError("persist_product", str(e)) from e

        if row is None:
            raise PersistenceError("persist_product", f"no entity_id returned for sku '{product.sku}'")

        logger.debug(
            "Persisted product",
            extra={"sku": product.sku, "entity_id": row["entity_id"]},
        )
        return row["entity_id"]

    def persist_stock_status(self, stock_status: StockStatus) -> None:
        query = f"""
            INSERT INTO {STOCK_STATUS_TABLE} (
                product_id, website_id, stock_id, qty, stock_status
            )
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (product_id, website_id, stock_id) DO UPDATE SET
                qty = EXCLUDED.qty,
                stock_status = EXCLUDED.stock_status
        """

        self._execute(
            "persist_stock_status",
            query,
            (
                stock_status.product_id,
                stock_status.website_id,
                stock_status.stock_id,
                stock_status.qty,
                stock_status.stock_status,
            ),
        )

    def persist_stock_item(self, stock_item: StockItem) -> None:
        query = f"""
            INSERT INTO {STOCK_ITEM_TABLE} (
                product_id, website_id, stock_id, data
            )
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (product_id, website_id, stock_id) DO UPDATE SET
                data = EXCLUDED.data
        """

        self._execute(
            "persist_stock_item",
            query,
            (
                stock_item.product_id,
                stock_item.website_id,
                stock_item.stock_id,
                json.dumps(stock_item.details),
            ),
        )

    def _execute(self, operation: str, query: str, params: tuple[Any, ...]) -> None:
        try:
            self.pool.execute_command(query, params)
        except PsycopgError as e:
            raise PersistenceError(operation, str(e)) from e
