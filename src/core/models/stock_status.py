"""
StockStatus model: derived in/out of stock flag of a product per scope.
"""

from typing import Literal

from pydantic import BaseModel, Field


class StockStatus(BaseModel):
    """
    Stock status of a product, keyed by (product_id, website_id, stock_id).

    Attributes:
        product_id: entity_id of the owning product
        website_id: Website scope, 0 for the default scope
        stock_id: Stock partition, 1 for the default stock
        stock_status: 1 when in stock, 0 when out of stock
        qty: Quantity on hand, None if the row did not provide one
    """

    product_id: int
    website_id: int = Field(0, ge=0)
    stock_id: int = Field(1, ge=1)
    stock_status: Literal[0, 1] = 0
    qty: float | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": 42,
                "website_id": 0,
                "stock_id": 1,
                "stock_status": 1,
                "qty": 100.0
            }
        }
