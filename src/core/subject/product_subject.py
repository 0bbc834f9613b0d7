"""
Product import subject: runs the row observers of one import batch.

Coordinates per row: build row context → run observers in declared
order → mark the SKU as processed.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Sequence

from src.core.attributes import AttributeLoader, BackendType
from src.core.config import ImportConfig
from src.core.errors import AttributeSetNotFoundError, RowImportError
from src.core.keys import ColumnKeys
from src.core.models import AttributeSet
from src.core.observers import AbstractObserver, ProductInventoryObserver, ProductObserver
from src.observability import metrics
from src.observability.logger import get_logger, log_operation, row_logger

from .ordering import resolve_observer_order
from .row_context import RowContext

if TYPE_CHECKING:
    from src.warehouse.bunch_processor import ProductBunchProcessor


logger = get_logger(__name__)


class ProductImportSubject:
    """
    Coordinates the observers that import one batch of product rows.

    The subject owns the batch state: the SKUs processed so far and the
    entity id each of them got. Everything that only concerns a single
    row lives on the RowContext created for that row.
    """

    def __init__(
        self,
        observers: Sequence[AbstractObserver],
        config: ImportConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the subject.

        Args:
            observers: Row observers, in any order; they are sorted by their
                       declared dependencies
            config: Import configuration (defaults to ImportConfig())
            clock: Returns the current instant (defaults to datetime.now)

        Raises:
            ObserverOrderError: If the observers cannot be ordered
        """
        self.config = config or ImportConfig()
        self.clock = clock or datetime.now
        self.observers = resolve_observer_order(observers)
        self.processed_skus: dict[str, int | None] = {}

        logger.debug(
            "Resolved observer order",
            extra={"observers": [o.name for o in self.observers]},
        )

    @classmethod
    def create(
        cls,
        product_bunch_processor: "ProductBunchProcessor",
        config: ImportConfig | None = None,
        attribute_loader: AttributeLoader | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "ProductImportSubject":
        """Create a subject with the product and inventory observers."""
        attribute_loader = attribute_loader or AttributeLoader()
        observers = [
            ProductObserver(product_bunch_processor),
            ProductInventoryObserver(product_bunch_processor, attribute_loader),
        ]
        return cls(observers, config=config, clock=clock)

    # =======================
    # BATCH STATE
    # =======================

    def has_been_processed(self, sku: str) -> bool:
        """Query whether the SKU has already been imported in this batch."""
        return sku in self.processed_skus

    def add_processed_sku(self, sku: str, entity_id: int | None) -> None:
        self.processed_skus[sku] = entity_id

    def get_entity_id_by_sku(self, sku: str) -> int | None:
        """Return the entity id the SKU got in this batch, if any."""
        return self.processed_skus.get(sku)

    def reset(self) -> None:
        """Forget all processed SKUs, starting a new batch."""
        self.processed_skus.clear()

    # =======================
    # ROW SERVICES
    # =======================

    def now(self) -> str:
        """The current instant in the target date format."""
        return self.clock().strftime(self.config.target_date_format)

    def format_date(self, value: Any) -> str:
        """
        Convert a date from the source to the target date format.

        Raises:
            ValueError: If the value does not match the source date format
        """
        parsed = datetime.strptime(str(value).strip(), self.config.source_date_format)
        return parsed.strftime(self.config.target_date_format)

    def get_attribute_set(self, context: RowContext) -> AttributeSet:
        """
        Return the attribute set referenced by the row.

        Raises:
            AttributeSetNotFoundError: If the code is not configured
        """
        code = context.get_value(ColumnKeys.ATTRIBUTE_SET_CODE, self.config.default_attribute_set_code)
        attribute_set = self.config.attribute_sets.get(code)
        if attribute_set is None:
            raise AttributeSetNotFoundError(code)
        return attribute_set

    def get_header_stock_mappings(self) -> dict[str, tuple[str, BackendType]]:
        """Stock item field -> (column, backend type)."""
        return self.config.header_stock_mappings

    # =======================
    # IMPORT
    # =======================

    def import_row(self, row: Mapping[str, Any], row_number: int | None = None) -> RowContext:
        """
        Run all observers for one row.

        Args:
            row: Column name -> raw value
            row_number: Position of the row in the batch (for error reporting)

        Returns:
            The row context after all observers ran

        Raises:
            RowImportError: If an observer fails; the error carries the row's
                            SKU and number
        """
        context = RowContext(self, row, row_number)
        sku = context.get_value(ColumnKeys.SKU)
        duplicate = sku is not None and self.has_been_processed(str(sku).strip())
        log = row_logger(logger, sku, row_number)

        log.debug("Importing row", extra={"duplicate": duplicate})

        try:
            with metrics.track_duration(metrics.row_processing_seconds):
                for observer in self.observers:
                    observer.handle(context)
        except RowImportError as e:
            e.with_row(sku, row_number)
            metrics.rows_processed_total.labels(status="failed").inc()
            log.error(
                f"Failed to import row: {e}",
                extra={"error_type": type(e).__name__},
                exc_info=True,
            )
            raise
        except Exception as e:
            metrics.rows_processed_total.labels(status="failed").inc()
            log.error(
                f"Unexpected error importing row: {e}",
                extra={"error_type": type(e).__name__},
                exc_info=True,
            )
            raise

        if duplicate:
            metrics.rows_processed_total.labels(status="skipped").inc()
        else:
            self.add_processed_sku(context.sku, context.last_entity_id)
            metrics.rows_processed_total.labels(status="imported").inc()

        return context

    def import_rows(self, rows: Iterable[Mapping[str, Any]], start: int = 1) -> dict[str, Any]:
        """
        Import the rows of a batch in order.

        Processing stops at the first failing row; the error propagates.

        Args:
            rows: Rows of the batch
            start: Number of the first row

        Returns:
            Dictionary with:
            - total_rows: Rows seen
            - imported_rows: Rows that imported a new SKU
            - skipped_rows: Rows with a SKU seen earlier in the batch
            - entity_ids: SKU -> entity id
        """
        total = 0
        skipped = 0

        with log_operation("Importing product rows", logger=logger):
            for row_number, row in enumerate(rows, start=start):
                total += 1
                before = len(self.processed_skus)
                self.import_row(row, row_number)
                if len(self.processed_skus) == before:
                    skipped += 1

        result = {
            "total_rows": total,
            "imported_rows": total - skipped,
            "skipped_rows": skipped,
            "entity_ids": dict(self.processed_skus),
        }

        logger.info(
            f"Imported {result['imported_rows']} of {total} rows ({skipped} duplicates skipped)",
            extra={k: v for k, v in result.items() if k != "entity_ids"},
        )
        return result
