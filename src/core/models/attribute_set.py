"""
AttributeSet model: the group of attributes that applies to a product type.
"""

from pydantic import BaseModel, Field


class AttributeSet(BaseModel):
    """
    Reference to a configured attribute set.

    Attributes:
        attribute_set_id: Identifier stored on the product
        attribute_set_name: Human readable name (also used as lookup code)
    """

    attribute_set_id: int = Field(..., ge=1)
    attribute_set_name: str = Field(..., min_length=1)
