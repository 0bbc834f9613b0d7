"""
ProductInventoryObserver - creates or updates the product's inventory.
"""

from typing import TYPE_CHECKING, Any

from src.core.attributes import AttributeLoader, BackendType
from src.core.errors import MissingEntityIdError
from src.core.keys import ColumnKeys, MemberNames
from src.core.models import StockItem, StockStatus
from src.observability import metrics

from .base_observer import AbstractProductImportObserver

if TYPE_CHECKING:
    from src.core.subject.row_context import RowContext
    from src.warehouse.bunch_processor import ProductBunchProcessor


class ProductInventoryObserver(AbstractProductImportObserver):
    """
    Observer that writes the stock status and stock item of a product.

    Both records are keyed by the entity id the ProductObserver published
    for the same row, so this observer must run after it.
    """

    name = "product_inventory"
    requires = ("product",)

    def __init__(
        self,
        product_bunch_processor: "ProductBunchProcessor",
        attribute_loader: AttributeLoader,
    ):
        """
        Initialize the observer.

        Args:
            product_bunch_processor: Processor that persists the stock records
            attribute_loader: Loader for the mapped stock columns
        """
        self.product_bunch_processor = product_bunch_processor
        self.attribute_loader = attribute_loader

    def process(self, context: "RowContext") -> None:
        # query whether or not, we've found a new SKU => means we've found a new product
        if self.has_been_processed(context):
            return

        self.persist_stock_status(self.initialize_stock_status(self.prepare_stock_status_attributes(context)))
        self.persist_stock_item(self.initialize_stock_item(self.prepare_stock_item_attributes(context)))

    def prepare_attributes(self, context: "RowContext") -> dict[str, Any]:
        """
        Prepare the key attributes shared by the stock status and item.

        Raises:
            MissingEntityIdError: If no product id was published for the row
        """
        last_entity_id = context.last_entity_id
        if last_entity_id is None:
            raise MissingEntityIdError(self.name)

        config = context.subject.config
        website = self.attribute_loader.load(
            context, {MemberNames.WEBSITE_ID: (ColumnKeys.WEBSITE_ID, BackendType.INT)}
        )

        return {
            MemberNames.PRODUCT_ID: last_entity_id,
            MemberNames.WEBSITE_ID: website.get(MemberNames.WEBSITE_ID, config.default_website_id),
            MemberNames.STOCK_ID: config.default_stock_id,
        }

    def prepare_stock_status_attributes(self, context: "RowContext") -> dict[str, Any]:
        """
        Prepare the stock status, deriving the status flag from the quantity.

        Returns:
            The prepared stock status attributes
        """
        stock_status = {
            **self.prepare_attributes(context),
            MemberNames.STOCK_STATUS: 0,
            **self.attribute_loader.load(
                context, {MemberNames.QTY: (ColumnKeys.QTY, BackendType.FLOAT)}
            ),
        }

        qty = stock_status.get(MemberNames.QTY)
        if qty is not None and qty > 0:
            stock_status[MemberNames.STOCK_STATUS] = 1

        return stock_status

    def initialize_stock_status(self, attr: dict[str, Any]) -> StockStatus:
        return self.build_entity(StockStatus, attr)

    def prepare_stock_item_attributes(self, context: "RowContext") -> dict[str, Any]:
        """
        Prepare the stock item from the configured header stock mappings.

        Returns:
            The prepared stock item attributes
        """
        return {
            **self.prepare_attributes(context),
            **self.attribute_loader.load(context, context.subject.get_header_stock_mappings()),
        }

    def initialize_stock_item(self, attr: dict[str, Any]) -> StockItem:
        return self.build_entity(StockItem, attr)

    def persist_stock_status(self, stock_status: StockStatus) -> None:
        self.product_bunch_processor.persist_stock_status(stock_status)
        metrics.entities_persisted_total.labels(entity="stock_status").inc()

    def persist_stock_item(self, stock_item: StockItem) -> None:
        self.product_bunch_processor.persist_stock_item(stock_item)
        metrics.entities_persisted_total.labels(entity="stock_item").inc()
