"""
Schema management for the catalog tables the import writes to.

Handles DDL for the product entity and the inventory tables.
"""

from .connection import DatabaseConnectionPool

PRODUCT_TABLE = "catalog_product_entity"
STOCK_STATUS_TABLE = "cataloginventory_stock_status"
STOCK_ITEM_TABLE = "cataloginventory_stock_item"

CREATE_TABLES = [
    f"""
    CREATE TABLE IF NOT EXISTS {PRODUCT_TABLE} (
        entity_id SERIAL PRIMARY KEY,
        sku VARCHAR(64) NOT NULL UNIQUE,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        has_options SMALLINT NOT NULL DEFAULT 0,
        required_options SMALLINT NOT NULL DEFAULT 0,
        type_id VARCHAR(32),
        attribute_set_id INTEGER NOT NULL,
        attributes JSONB NOT NULL DEFAULT '{{}}'::jsonb
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {STOCK_STATUS_TABLE} (
        product_id INTEGER NOT NULL REFERENCES {PRODUCT_TABLE} (entity_id) ON DELETE CASCADE,
        website_id INTEGER NOT NULL DEFAULT 0,
        stock_id INTEGER NOT NULL DEFAULT 1,
        qty DOUBLE PRECISION,
        stock_status SMALLINT NOT NULL DEFAULT 0,
        PRIMARY KEY (product_id, website_id, stock_id)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {STOCK_ITEM_TABLE} (
        item_id SERIAL PRIMARY KEY,
        product_id INTEGER NOT NULL REFERENCES {PRODUCT_TABLE} (entity_id) ON DELETE CASCADE,
        website_id INTEGER NOT NULL DEFAULT 0,
        stock_id INTEGER NOT NULL DEFAULT 1,
        data JSONB NOT NULL DEFAULT '{{}}'::jsonb,
        UNIQUE (product_id, website_id, stock_id)
    )
    """,
]


class SchemaManager:
    """
    Creates and drops the tables written by the Postgres bunch processor.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def create_tables(self) -> None:
        """Create the product and inventory tables if they do not exist."""
        for ddl in CREATE_TABLES:
            self.pool.execute_command(ddl)

    def drop_tables(self) -> None:
        """Drop the product and inventory tables (dependents first)."""
        for table in (STOCK_ITEM_TABLE, STOCK_STATUS_TABLE, PRODUCT_TABLE):
            self.pool.execute_command(f"DROP TABLE IF EXISTS {table}")

    def table_exists(self, table_name: str) -> bool:
        result = self.pool.execute_query(
            "SELECT to_regclass(%s) IS NOT NULL AS exists",
            (table_name,)
        )
        return bool(result and result[0]["exists"])
