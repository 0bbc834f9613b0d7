"""
Pytest configuration and fixtures for catalog-import tests

This module provides shared fixtures for unit and integration tests.
"""
from datetime import datetime
from typing import Generator

import pytest

from src.core.config import ImportConfig
from src.core.models import AttributeSet, Product, StockItem, StockStatus
from src.core.subject import ProductImportSubject
from src.warehouse.bunch_processor import ProductBunchProcessor


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers or Spark"
    )


# =======================
# FAKE BUNCH PROCESSOR
# =======================

class RecordingBunchProcessor(ProductBunchProcessor):
    """
    In-memory bunch processor that records every call.

    Products are keyed by SKU; entity ids are handed out sequentially
    starting at `first_entity_id`.
    """

    def __init__(self, first_entity_id: int = 1):
        self.products: dict[str, Product] = {}
        self.stock_statuses: list[StockStatus] = []
        self.stock_items: list[StockItem] = []
        self.calls: list[tuple[str, object]] = []
        self._next_entity_id = first_entity_id

    def store(self, product: Product) -> Product:
        """Put a product into storage without recording a call."""
        if product.entity_id is None:
            product = product.model_copy(update={"entity_id": self._next_entity_id})
            self._next_entity_id += 1
        self.products[product.sku] = product
        return product

    def load_product(self, sku: str) -> Product | None:
        self.calls.append(("load_product", sku))
        return self.products.get(sku)

    def persist_product(self, product: Product) -> int:
        self.calls.append(("persist_product", product))
        return self.store(product).entity_id

    def persist_stock_status(self, stock_status: StockStatus) -> None:
        self.calls.append(("persist_stock_status", stock_status))
        self.stock_statuses.append(stock_status)

    def persist_stock_item(self, stock_item: StockItem) -> None:
        self.calls.append(("persist_stock_item", stock_item))
        self.stock_items.append(stock_item)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def persisted_products(self) -> list[Product]:
        return [arg for name, arg in self.calls if name == "persist_product"]


# =======================
# IMPORT FIXTURES
# =======================

FIXED_NOW = datetime(2016, 10, 24, 12, 36, 0)


@pytest.fixture
def processor() -> RecordingBunchProcessor:
    """Fresh recording bunch processor"""
    return RecordingBunchProcessor(first_entity_id=100)


@pytest.fixture
def import_config() -> ImportConfig:
    """Import configuration with two attribute sets and a small stock mapping"""
    return ImportConfig(
        attribute_sets={
            "Default": AttributeSet(attribute_set_id=4, attribute_set_name="Default"),
            "Bag": AttributeSet(attribute_set_id=15, attribute_set_name="Bag"),
        },
        header_stock_mappings={
            "qty": ["qty", "float"],
            "min_qty": ["out_of_stock_qty", "float"],
            "backorders": ["allow_backorders", "int"],
            "manage_stock": ["manage_stock", "int"],
        },
    )


@pytest.fixture
def clock():
    """Clock returning a fixed instant"""
    return lambda: FIXED_NOW


@pytest.fixture
def subject(processor, import_config, clock) -> ProductImportSubject:
    """Subject with the product and inventory observers"""
    return ProductImportSubject.create(processor, config=import_config, clock=clock)


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session():
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    from pyspark.sql import SparkSession

    spark = (
        SparkSession.builder
        .appName("catalog-import-test")
        .master("local[1]")
        .config("spark.sql.shuffle.partitions", "1")
        .config("spark.ui.enabled", "false")
        .config("spark.driver.memory", "1g")
        .getOrCreate()
    )
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_importer",
        password="test_password",
        dbname="test_catalog"
    ) as postgres:
        yield postgres


@pytest.fixture
def db_pool(postgres_container) -> Generator:
    """
    Open a connection pool on a freshly created catalog schema

    Yields:
        Open DatabaseConnectionPool
    """
    from src.warehouse.connection import DatabaseConnectionPool
    from src.warehouse.schema_mgmt import SchemaManager

    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_catalog",
        user="test_importer",
        password="test_password",
        min_size=1,
        max_size=2,
    )
    pool.open()

    manager = SchemaManager(pool)
    manager.drop_tables()
    manager.create_tables()

    try:
        yield pool
    finally:
        pool.close()
