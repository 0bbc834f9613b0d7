"""
Product model representing one catalog item (the primary entity of a row).
"""

from typing import Any

from pydantic import BaseModel, Field


class Product(BaseModel):
    """
    A catalog product as it is persisted by the bunch processor.

    The SKU is the natural key; entity_id is assigned by storage and is
    None until the product has been persisted once. Dynamic attributes
    supplied by the attribute loader are kept as extra fields.

    Attributes:
        entity_id: Internal identifier (None for a product not yet stored)
        sku: Natural key, unique within the store
        created_at: Creation timestamp, formatted as target date format
        updated_at: Modification timestamp, formatted as target date format
        has_options: Always 0 for products prepared by the import
        required_options: Always 0 for products prepared by the import
        type_id: Product type discriminator (simple, configurable, ...)
        attribute_set_id: Attribute set the product belongs to
    """

    entity_id: int | None = None
    sku: str = Field(..., min_length=1)
    created_at: str
    updated_at: str
    has_options: int = Field(0, ge=0, le=1)
    required_options: int = Field(0, ge=0, le=1)
    type_id: str | None = None
    attribute_set_id: int

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "entity_id": 42,
                "sku": "SKU-0001",
                "created_at": "2016-10-24 12:36:00",
                "updated_at": "2016-10-24 12:36:00",
                "has_options": 0,
                "required_options": 0,
                "type_id": "simple",
                "attribute_set_id": 4,
                "name": "Joust Duffle Bag"
            }
        }

    @property
    def attributes(self) -> dict[str, Any]:
        """Dynamic attributes that are not part of the fixed entity columns."""
        return dict(self.model_extra or {})
