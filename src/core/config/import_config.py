"""
Import configuration management.

Loads the product import settings (date formats, scope defaults,
attribute sets and stock column mappings) from YAML files.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from src.core.attributes import BackendType
from src.core.models import AttributeSet

# target field -> [column, backend type]; the stock item columns of a catalog export
DEFAULT_HEADER_STOCK_MAPPINGS: dict[str, tuple[str, BackendType]] = {
    "qty": ("qty", BackendType.FLOAT),
    "min_qty": ("out_of_stock_qty", BackendType.FLOAT),
    "use_config_min_qty": ("use_config_min_qty", BackendType.INT),
    "is_qty_decimal": ("is_qty_decimal", BackendType.INT),
    "backorders": ("allow_backorders", BackendType.INT),
    "use_config_backorders": ("use_config_backorders", BackendType.INT),
    "min_sale_qty": ("min_cart_qty", BackendType.FLOAT),
    "use_config_min_sale_qty": ("use_config_min_sale_qty", BackendType.INT),
    "max_sale_qty": ("max_cart_qty", BackendType.FLOAT),
    "use_config_max_sale_qty": ("use_config_max_sale_qty", BackendType.INT),
    "is_in_stock": ("is_in_stock", BackendType.INT),
    "notify_stock_qty": ("notify_on_stock_below", BackendType.FLOAT),
    "use_config_notify_stock_qty": ("use_config_notify_stock_qty", BackendType.INT),
    "manage_stock": ("manage_stock", BackendType.INT),
    "use_config_manage_stock": ("use_config_manage_stock", BackendType.INT),
    "use_config_qty_increments": ("use_config_qty_increments", BackendType.INT),
    "qty_increments": ("qty_increments", BackendType.FLOAT),
    "use_config_enable_qty_inc": ("use_config_enable_qty_inc", BackendType.INT),
    "enable_qty_increments": ("enable_qty_increments", BackendType.INT),
    "is_decimal_divided": ("is_decimal_divided", BackendType.INT),
}


def _default_attribute_sets() -> dict[str, AttributeSet]:
    return {"Default": AttributeSet(attribute_set_id=4, attribute_set_name="Default")}


class ImportConfig(BaseModel):
    """
    Settings of a product import run.

    Attributes:
        source_date_format: strptime format of dates in the import file
        target_date_format: strftime format of dates handed to storage
        default_website_id: Website scope used when a row has none
        default_stock_id: Stock partition every stock record is written to
        default_attribute_set_code: Attribute set used when a row has none
        attribute_sets: Attribute set code -> attribute set
        header_stock_mappings: Stock item field -> (column, backend type)
    """

    source_date_format: str = "%m/%d/%y, %I:%M %p"
    target_date_format: str = "%Y-%m-%d %H:%M:%S"
    default_website_id: int = Field(0, ge=0)
    default_stock_id: int = Field(1, ge=1)
    default_attribute_set_code: str = "Default"
    attribute_sets: dict[str, AttributeSet] = Field(default_factory=_default_attribute_sets)
    header_stock_mappings: dict[str, tuple[str, BackendType]] = Field(
        default_factory=lambda: dict(DEFAULT_HEADER_STOCK_MAPPINGS)
    )

    @field_validator("header_stock_mappings", mode="before")
    @classmethod
    def parse_stock_mappings(cls, v: Any) -> Any:
        """Accept `field: column` as shorthand for a float column."""
        if not isinstance(v, dict):
            return v

        parsed = {}
        for field_name, mapping in v.items():
            if isinstance(mapping, str):
                parsed[field_name] = (mapping, BackendType.FLOAT)
            elif isinstance(mapping, (list, tuple)) and len(mapping) == 2:
                parsed[field_name] = (mapping[0], BackendType.from_name(mapping[1]))
            else:
                raise ValueError(
                    f"Mapping for '{field_name}' must be a column name or [column, backend_type]"
                )
        return parsed


class ImportConfigLoader:
    """
    Loads the import configuration from a YAML file.

    Expected YAML format:
    ```yaml
    product_import:
      source_date_format: "%m/%d/%y, %I:%M %p"
      default_website_id: 0
      attribute_sets:
        Default:
          attribute_set_id: 4
          attribute_set_name: Default
        Bag:
          attribute_set_id: 15
          attribute_set_name: Bag
      header_stock_mappings:
        qty: [qty, float]
        backorders: [allow_backorders, int]
    ```
    """

    SECTION = "product_import"

    def __init__(self, config_path: str | Path):
        """
        Initialize the import config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Import configuration file not found: {config_path}")

    def load(self) -> ImportConfig:
        """
        Load and parse the import configuration.

        Returns:
            The parsed ImportConfig

        Raises:
            ValueError: If the YAML is invalid or the section is missing
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or self.SECTION not in config:
            raise ValueError(f"Configuration file must contain '{self.SECTION}' section")

        section = config[self.SECTION] or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{self.SECTION}' section must be a mapping")

        return ImportConfig(**section)
