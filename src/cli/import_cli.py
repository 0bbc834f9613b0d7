"""
Command-line interface for product imports.

Usage:
    python -m src.cli.import_cli process --input <file_path> [options]
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from pyspark.sql import SparkSession

from src.batch.pipeline import ProductImportPipeline
from src.core.config import ImportConfig, ImportConfigLoader
from src.core.errors import RowImportError
from src.core.subject import ProductImportSubject
from src.observability.logger import get_logger
from src.observability.metrics import start_metrics_server
from src.warehouse.bunch_processor import PostgresProductBunchProcessor
from src.warehouse.connection import close_pool, initialize_pool
from src.warehouse.schema_mgmt import SchemaManager

logger = get_logger(__name__)


def create_spark_session(app_name: str = "ProductImport") -> SparkSession:
    """
    Create Spark session for reading import files.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()

    return spark


def load_config(config_path: str | None) -> ImportConfig:
    """Load the import configuration, falling back to the defaults."""
    if config_path is None:
        return ImportConfig()
    return ImportConfigLoader(config_path).load()


def process_command(args) -> int:
    """
    Execute the import command.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid import configuration: {e}")
        return 1

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    logger.info("Initializing database connection...")
    pool = initialize_pool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password
    )

    spark = create_spark_session(f"ProductImport-{input_path.stem}")

    try:
        if args.create_schema:
            logger.info("Creating catalog tables...")
            SchemaManager(pool).create_tables()

        processor = PostgresProductBunchProcessor(pool, date_format=config.target_date_format)
        subject = ProductImportSubject.create(processor, config=config)
        pipeline = ProductImportPipeline(spark, subject)

        result = pipeline.process_file(str(input_path), file_format=args.format)

        logger.info("=" * 60)
        logger.info("IMPORT COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total rows read: {result['total_rows']}")
        logger.info(f"Products imported: {result['imported_rows']}")
        logger.info(f"Duplicate rows skipped: {result['skipped_rows']}")
        logger.info("=" * 60)
        return 0

    except RowImportError as e:
        logger.error(f"Import aborted: {e}")
        return 1
    finally:
        close_pool()
        spark.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Catalog product import",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a CSV export
  import-products process --input data/products.csv

  # Import with custom attribute sets and stock mappings
  import-products process --input data/products.csv --config config/product_import.yaml

  # Create the catalog tables first
  import-products process --input data/products.csv --create-schema
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Import a product file")
    process_parser.add_argument(
        "--input",
        required=True,
        help="Path to input file"
    )
    process_parser.add_argument(
        "--format",
        default="csv",
        choices=["csv", "json", "parquet"],
        help="Input file format (default: csv)"
    )
    process_parser.add_argument(
        "--config",
        default=None,
        help="Path to import configuration YAML file"
    )
    process_parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the catalog tables if they do not exist"
    )
    process_parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port while importing"
    )

    # Database connection arguments (fall back to DB_* environment variables)
    process_parser.add_argument("--db-host", default=None, help="Database host")
    process_parser.add_argument("--db-port", type=int, default=None, help="Database port")
    process_parser.add_argument("--db-name", default=None, help="Database name")
    process_parser.add_argument("--db-user", default=None, help="Database user")
    process_parser.add_argument("--db-password", default=None, help="Database password")

    return parser


def main():
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "process":
        sys.exit(process_command(args))


if __name__ == "__main__":
    main()
