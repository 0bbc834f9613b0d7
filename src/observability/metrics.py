"""
Prometheus metrics collection for the product import

This module provides metrics instrumentation for monitoring
row throughput, persistence calls and type coercion.
"""
import os
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    start_http_server,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()

# Rows processed counter
rows_processed_total = Counter(
    name="import_rows_processed_total",
    documentation="Total number of rows processed by the import",
    labelnames=["status"],  # status: imported, skipped, failed
    registry=REGISTRY,
)

# Row processing latency
row_processing_seconds = Histogram(
    name="import_row_processing_seconds",
    documentation="Time spent running all observers for one row",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
    registry=REGISTRY,
)

# Type coercion successes and failures
type_coercion_total = Counter(
    name="import_type_coercion_total",
    documentation="Total number of attribute coercion attempts",
    labelnames=["backend_type", "status"],  # status: success, failure
    registry=REGISTRY,
)

# Entities handed to the bunch processor
entities_persisted_total = Counter(
    name="import_entities_persisted_total",
    documentation="Total number of entities handed to the bunch processor",
    labelnames=["entity"],  # entity: product, stock_status, stock_item
    registry=REGISTRY,
)

# Batch size
batch_size_rows = Histogram(
    name="import_batch_size_rows",
    documentation="Number of rows in each imported file",
    buckets=[100, 500, 1000, 5000, 10000, 50000, 100000, 500000],
    registry=REGISTRY,
)

# Batches processed counter
batches_processed_total = Counter(
    name="import_batches_processed_total",
    documentation="Total number of imported files",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

def generate_metrics() -> bytes:
    """Current metric values in the Prometheus text format."""
    return generate_latest(REGISTRY)

def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Serve the import registry over HTTP for the duration of the process.

    Args:
        port: Listen port (defaults to env var METRICS_PORT or 8000)
    """
    start_http_server(port or int(os.getenv("METRICS_PORT", "8000")), registry=REGISTRY)

@contextmanager
def track_duration(histogram: Histogram, **labels: str) -> Iterator[None]:
    """
    Observe the wall time of the enclosed block, also when it raises.

    Usage:
        with track_duration(row_processing_seconds):
            ...
    """
    metric = histogram.labels(**labels) if labels else histogram
    started = time.perf_counter()
    try:
        yield
    finally:
        metric.observe(time.perf_counter() - started)

def record_batch_import(total_rows: int, success: bool = True) -> None:
    """
    Count one imported file and its size.

    Args:
        total_rows: Rows read from the file
        success: Whether every row was imported
    """
    batches_processed_total.labels(status="success" if success else "failure").inc()
    if total_rows > 0:
        batch_size_rows.observe(total_rows)
