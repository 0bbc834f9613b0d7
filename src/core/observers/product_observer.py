"""
ProductObserver - creates or updates the product itself.
"""

from typing import TYPE_CHECKING, Any

from src.core.keys import ColumnKeys, MemberNames
from src.core.merge import merge_entity
from src.core.models import Product
from src.observability import metrics

from .base_observer import AbstractProductImportObserver

if TYPE_CHECKING:
    from src.core.subject.row_context import RowContext
    from src.warehouse.bunch_processor import ProductBunchProcessor


class ProductObserver(AbstractProductImportObserver):
    """
    Observer that creates the product and publishes its entity id.

    Flow:
    1. Skip SKUs that have already been imported in this batch
    2. Prepare the product attributes from the row
    3. Merge them into the stored product, if there is one
    4. Persist the product
    5. Publish the entity id for the observers that run after it
    """

    name = "product"

    def __init__(self, product_bunch_processor: "ProductBunchProcessor"):
        """
        Initialize the observer.

        Args:
            product_bunch_processor: Processor that loads and persists products
        """
        self.product_bunch_processor = product_bunch_processor

    def process(self, context: "RowContext") -> None:
        # query whether or not, we've found a new SKU => means we've found a new product
        if self.has_been_processed(context):
            return

        product = self.initialize_product(self.prepare_attributes(context))

        context.last_entity_id = self.persist_product(product)

    def prepare_attributes(self, context: "RowContext") -> dict[str, Any]:
        """
        Prepare the attributes of the product that has to be persisted.

        Args:
            context: State of the row being imported

        Returns:
            The prepared product attributes
        """
        subject = context.subject
        now = subject.now()

        created_at = context.get_value(ColumnKeys.CREATED_AT, now, subject.format_date)
        updated_at = context.get_value(ColumnKeys.UPDATED_AT, now, subject.format_date)

        attribute_set = subject.get_attribute_set(context)

        return {
            MemberNames.SKU: context.sku,
            MemberNames.CREATED_AT: created_at,
            MemberNames.UPDATED_AT: updated_at,
            MemberNames.HAS_OPTIONS: 0,
            MemberNames.REQUIRED_OPTIONS: 0,
            MemberNames.TYPE_ID: context.get_value(ColumnKeys.PRODUCT_TYPE),
            MemberNames.ATTRIBUTE_SET_ID: attribute_set.attribute_set_id,
        }

    def initialize_product(self, attr: dict[str, Any]) -> Product:
        """
        Merge the attributes into the stored product with the same SKU.

        Args:
            attr: The prepared product attributes

        Returns:
            The product to persist
        """
        loaded = self.load_product(attr[MemberNames.SKU])
        if loaded is not None:
            return self.build_entity(Product, merge_entity(loaded.model_dump(), attr))

        return self.build_entity(Product, attr)

    def load_product(self, sku: str) -> Product | None:
        return self.product_bunch_processor.load_product(sku)

    def persist_product(self, product: Product) -> int:
        entity_id = self.product_bunch_processor.persist_product(product)
        metrics.entities_persisted_total.labels(entity="product").inc()
        return entity_id
