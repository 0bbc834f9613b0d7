"""
Structured logging for the catalog import

Handlers live on one package root logger ("catalog_import"); modules get
child loggers through get_logger(__name__) and propagate to it. Output is
one JSON object per line (python-json-logger) or plain text for local runs,
chosen by LOG_FORMAT. LOG_LEVEL sets the threshold.
"""
import logging
import os
import sys
import time
from typing import Any

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "catalog_import"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(funcName)s - %(message)s"


class ImportJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, upper-cased level, logger and function to each record"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["function"] = record.funcName


def configure_logging(level: str | None = None, format_type: str | None = None) -> logging.Logger:
    """
    (Re)configure the package root logger.

    Args:
        level: Level name (defaults to env var LOG_LEVEL or INFO)
        format_type: "json" or "text" (defaults to env var LOG_FORMAT or json)

    Returns:
        The package root logger
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    if format_type == "json":
        formatter: logging.Formatter = ImportJsonFormatter(JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)
    root.propagate = False
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger below the package root, configuring the root on first use.

    Args:
        name: Module name, usually __name__; None returns the root itself
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        configure_logging()
    if not name:
        return root
    return root.getChild(name)


class RowLogAdapter(logging.LoggerAdapter):
    """Attaches the SKU and row number of the current row to every record"""

    def process(self, msg: Any, kwargs: dict) -> tuple[Any, dict]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def row_logger(logger: logging.Logger, sku: Any, row_number: int | None) -> RowLogAdapter:
    return RowLogAdapter(logger, {"sku": sku, "row_number": row_number})


class log_operation:
    """
    Logs start, completion and failure of an operation with its duration

    Usage:
        with log_operation("Importing product rows", logger=logger, file="products.csv"):
            ...
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = {"operation": operation_name, **extra_fields}
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self.extra_fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        extra = {
            **self.extra_fields,
            "duration_seconds": round(time.perf_counter() - self.start_time, 3),
        }

        if exc_type is None:
            self.logger.info(f"Completed: {self.operation_name}", extra={**extra, "status": "success"})
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={**extra, "status": "error", "error_type": exc_type.__name__},
            )
        return False
