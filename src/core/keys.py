"""
Column names of the import file and member names of the stored entities.
"""


class ColumnKeys:
    """Column headers of the product import file."""

    SKU = "sku"
    PRODUCT_TYPE = "product_type"
    ATTRIBUTE_SET_CODE = "attribute_set_code"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    WEBSITE_ID = "website_id"
    QTY = "qty"


class MemberNames:
    """Field names of the product, stock status and stock item entities."""

    ENTITY_ID = "entity_id"
    SKU = "sku"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    HAS_OPTIONS = "has_options"
    REQUIRED_OPTIONS = "required_options"
    TYPE_ID = "type_id"
    ATTRIBUTE_SET_ID = "attribute_set_id"

    PRODUCT_ID = "product_id"
    WEBSITE_ID = "website_id"
    STOCK_ID = "stock_id"
    STOCK_STATUS = "stock_status"
    QTY = "qty"
