"""
Unit tests for the ProductObserver.
"""

import pytest

from src.core.errors import AttributeSetNotFoundError, CoercionError, PersistenceError
from src.core.models import Product
from src.core.observers import ProductObserver
from src.core.subject import RowContext


def make_context(subject, row, row_number=1):
    return RowContext(subject, row, row_number)


class TestProductObserverNewSku:
    """Tests for rows with a SKU that is not stored yet"""

    def test_creates_product_from_row(self, subject, processor):
        """Test the shape of a product prepared for a new SKU"""
        observer = ProductObserver(processor)
        context = make_context(subject, {"sku": "SKU1", "product_type": "simple", "attribute_set_code": "Bag"})

        observer.handle(context)

        assert processor.call_names() == ["load_product", "persist_product"]
        product = processor.persisted_products()[0]
        assert product.sku == "SKU1"
        assert product.type_id == "simple"
        assert product.attribute_set_id == 15
        assert product.has_options == 0
        assert product.required_options == 0
        assert product.entity_id is None

    def test_timestamps_default_to_now(self, subject, processor):
        observer = ProductObserver(processor)
        context = make_context(subject, {"sku": "SKU1"})

        observer.handle(context)

        product = processor.persisted_products()[0]
        assert product.created_at == "2016-10-24 12:36:00"
        assert product.updated_at == "2016-10-24 12:36:00"

    def test_timestamps_are_formatted_from_row(self, subject, processor):
        observer = ProductObserver(processor)
        context = make_context(subject, {
            "sku": "SKU1",
            "created_at": "1/5/16, 9:15 AM",
            "updated_at": "12/31/16, 11:59 PM",
        })

        observer.handle(context)

        product = processor.persisted_products()[0]
        assert product.created_at == "2016-01-05 09:15:00"
        assert product.updated_at == "2016-12-31 23:59:00"

    def test_default_attribute_set_is_used(self, subject, processor):
        observer = ProductObserver(processor)

        observer.handle(make_context(subject, {"sku": "SKU1"}))

        assert processor.persisted_products()[0].attribute_set_id == 4

    def test_publishes_entity_id(self, subject, processor):
        """Test that the persisted entity id is visible on the row context"""
        observer = ProductObserver(processor)
        context = make_context(subject, {"sku": "SKU1"})

        observer.handle(context)

        assert context.last_entity_id == 100
        assert processor.products["SKU1"].entity_id == 100


class TestProductObserverExistingSku:
    """Tests for rows whose SKU is already stored"""

    @pytest.fixture
    def stored(self, processor):
        return processor.store(Product(
            sku="SKU1",
            created_at="2015-01-01 00:00:00",
            updated_at="2015-06-01 00:00:00",
            has_options=1,
            required_options=1,
            type_id="simple",
            attribute_set_id=4,
            name="Joust Duffle Bag",
            color="red",
        ))

    def test_fresh_values_overwrite_stored_values(self, subject, processor, stored):
        observer = ProductObserver(processor)
        context = make_context(subject, {
            "sku": "SKU1",
            "product_type": "configurable",
            "attribute_set_code": "Bag",
            "updated_at": "10/24/16, 12:36 PM",
        })

        observer.handle(context)

        product = processor.persisted_products()[0]
        assert product.type_id == "configurable"
        assert product.attribute_set_id == 15
        assert product.updated_at == "2016-10-24 12:36:00"
        assert product.has_options == 0
        assert product.required_options == 0

    def test_stored_only_attributes_are_kept(self, subject, processor, stored):
        observer = ProductObserver(processor)

        observer.handle(make_context(subject, {"sku": "SKU1"}))

        product = processor.persisted_products()[0]
        assert product.attributes == {"name": "Joust Duffle Bag", "color": "red"}

    def test_entity_id_is_kept_and_published(self, subject, processor, stored):
        observer = ProductObserver(processor)
        context = make_context(subject, {"sku": "SKU1"})

        observer.handle(context)

        assert processor.persisted_products()[0].entity_id == stored.entity_id
        assert context.last_entity_id == stored.entity_id


class TestProductObserverErrors:
    """Tests for failures while preparing or persisting a product"""

    def test_unknown_attribute_set(self, subject, processor):
        observer = ProductObserver(processor)

        with pytest.raises(AttributeSetNotFoundError) as exc_info:
            observer.handle(make_context(subject, {"sku": "SKU1", "attribute_set_code": "Shoes"}))

        assert exc_info.value.code == "Shoes"
        assert processor.calls == []

    def test_invalid_date(self, subject, processor):
        observer = ProductObserver(processor)

        with pytest.raises(CoercionError):
            observer.handle(make_context(subject, {"sku": "SKU1", "created_at": "2016-13-45"}))

    def test_persistence_error_propagates_unchanged(self, subject, processor, monkeypatch):
        error = PersistenceError("persist_product", "connection lost")

        def fail(product):
            raise error

        monkeypatch.setattr(processor, "persist_product", fail)
        observer = ProductObserver(processor)
        context = make_context(subject, {"sku": "SKU1"})

        with pytest.raises(PersistenceError) as exc_info:
            observer.handle(context)

        assert exc_info.value is error
        assert context.last_entity_id is None
