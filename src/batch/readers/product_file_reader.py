"""
Spark reader for product import files.

Every column comes back as a string (or None for an empty cell); typing
is the attribute loader's job.
"""

from typing import Any, Iterator

from pyspark.sql import DataFrame, SparkSession

from src.observability.logger import get_logger

logger = get_logger(__name__)

# Reader options per format; caller options override these
FORMAT_OPTIONS: dict[str, dict[str, str]] = {
    "csv": {
        "header": "true",
        "delimiter": ",",
        "inferSchema": "false",
        "quote": '"',
        "escape": '"',
        "multiLine": "true",  # descriptions may contain line breaks
        "mode": "FAILFAST",
    },
    "json": {
        "primitivesAsString": "true",
        "multiLine": "false",
        "mode": "FAILFAST",
    },
    "parquet": {},
}


class ProductFileReader:
    """
    Reads CSV, JSON or Parquet product exports and iterates their rows.
    """

    SUPPORTED_FORMATS = tuple(FORMAT_OPTIONS)

    def __init__(self, spark: SparkSession):
        self.spark = spark

    def read(self, file_path: str, file_format: str = "csv", **options: Any) -> DataFrame:
        """
        Load a file into a DataFrame.

        Args:
            file_path: Path to the file
            file_format: csv, json or parquet
            **options: Spark reader options overriding the format defaults

        Raises:
            ValueError: If the format is not supported
        """
        file_format = file_format.lower()
        if file_format not in FORMAT_OPTIONS:
            raise ValueError(
                f"Unsupported file format: {file_format} "
                f"(expected one of {', '.join(self.SUPPORTED_FORMATS)})"
            )

        reader_options = {**FORMAT_OPTIONS[file_format]}
        reader_options.update({k: _option_value(v) for k, v in options.items()})

        logger.debug(
            f"Reading {file_format} file",
            extra={"file_path": file_path, "options": reader_options}
        )
        return self.spark.read.options(**reader_options).format(file_format).load(file_path)

    def iter_rows(self, df: DataFrame) -> Iterator[dict[str, Any]]:
        """Yield rows as column -> value dictionaries, in file order."""
        for row in df.toLocalIterator():
            yield {
                column: _cell_value(value)
                for column, value in row.asDict().items()
            }


def _option_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _cell_value(value: Any) -> str | None:
    # Parquet keeps its own column types; the loader expects text
    if value is None or isinstance(value, str):
        return value
    return str(value)
