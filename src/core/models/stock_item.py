"""
StockItem model: inventory detail of a product per scope.
"""

from typing import Any

from pydantic import BaseModel, Field


class StockItem(BaseModel):
    """
    Inventory detail record keyed by (product_id, website_id, stock_id).

    Apart from the key, the fields are whatever the configured header
    stock mappings yield (qty, min_qty, backorders, ...), so they are
    kept as extra fields.
    """

    product_id: int
    website_id: int = Field(0, ge=0)
    stock_id: int = Field(1, ge=1)

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "product_id": 42,
                "website_id": 0,
                "stock_id": 1,
                "qty": 100.0,
                "min_qty": 0.0,
                "backorders": 0,
                "manage_stock": 1
            }
        }

    @property
    def details(self) -> dict[str, Any]:
        """The mapped inventory fields, without the key columns."""
        return dict(self.model_extra or {})
