"""
Product import pipeline orchestration.

Coordinates the flow: read → import rows (observers) → report
"""

from typing import Any

from pyspark.sql import SparkSession

from src.batch.readers import ProductFileReader
from src.core.subject import ProductImportSubject
from src.observability import metrics
from src.observability.logger import get_logger

logger = get_logger(__name__)


class ProductImportPipeline:
    """
    Imports a product file through a ProductImportSubject.

    Flow:
    1. Read the file (CSV/JSON/Parquet) with all columns as strings
    2. Hand every row, in file order, to the subject
    3. Report imported and skipped rows

    Processing stops at the first failing row.
    """

    def __init__(self, spark: SparkSession, subject: ProductImportSubject):
        """
        Initialize the pipeline.

        Args:
            spark: Active Spark session
            subject: Subject that runs the row observers
        """
        self.spark = spark
        self.subject = subject
        self.file_reader = ProductFileReader(spark)

    def process_file(
        self,
        file_path: str,
        file_format: str = "csv",
        **read_options
    ) -> dict[str, Any]:
        """
        Import a file as one batch.

        Args:
            file_path: Path to input file
            file_format: File format (csv, json, parquet)
            **read_options: Additional read options

        Returns:
            Dictionary with processing results:
            - total_rows: Rows read
            - imported_rows: Rows that imported a new SKU
            - skipped_rows: Rows with a SKU seen earlier in the file
            - entity_ids: SKU -> entity id
        """
        logger.info(f"Starting product import for file: {file_path}")

        df = self.file_reader.read(file_path, file_format=file_format, **read_options)

        # Every file is its own batch
        self.subject.reset()

        try:
            result = self.subject.import_rows(self.file_reader.iter_rows(df))
        except Exception:
            metrics.record_batch_import(0, success=False)
            raise

        metrics.record_batch_import(result["total_rows"])
        logger.info("Product import complete")
        return result
