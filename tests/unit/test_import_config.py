"""
Unit tests for import configuration loading.
"""

from pathlib import Path

import pytest

from src.core.attributes import BackendType
from src.core.config import DEFAULT_HEADER_STOCK_MAPPINGS, ImportConfig, ImportConfigLoader

SHIPPED_CONFIG = Path(__file__).resolve().parents[2] / "config" / "product_import.yaml"


class TestImportConfig:
    """Tests for ImportConfig defaults and parsing"""

    def test_defaults(self):
        config = ImportConfig()

        assert config.default_website_id == 0
        assert config.default_stock_id == 1
        assert config.attribute_sets["Default"].attribute_set_id == 4
        assert config.header_stock_mappings == DEFAULT_HEADER_STOCK_MAPPINGS
        assert config.header_stock_mappings["qty"] == ("qty", BackendType.FLOAT)

    def test_column_shorthand_is_float(self):
        config = ImportConfig(header_stock_mappings={"qty": "quantity"})

        assert config.header_stock_mappings == {"qty": ("quantity", BackendType.FLOAT)}

    def test_unknown_backend_type(self):
        with pytest.raises(ValueError):
            ImportConfig(header_stock_mappings={"qty": ["qty", "money"]})

    def test_malformed_mapping(self):
        with pytest.raises(ValueError):
            ImportConfig(header_stock_mappings={"qty": ["qty", "float", "extra"]})


class TestImportConfigLoader:
    """Tests for loading configuration from YAML"""

    def test_load(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text(
            "product_import:\n"
            "  default_website_id: 1\n"
            "  attribute_sets:\n"
            "    Bag:\n"
            "      attribute_set_id: 15\n"
            "      attribute_set_name: Bag\n"
            "  header_stock_mappings:\n"
            "    qty: [qty, float]\n"
            "    backorders: [allow_backorders, int]\n"
        )

        config = ImportConfigLoader(path).load()

        assert config.default_website_id == 1
        assert config.attribute_sets["Bag"].attribute_set_id == 15
        assert config.header_stock_mappings == {
            "qty": ("qty", BackendType.FLOAT),
            "backorders": ("allow_backorders", BackendType.INT),
        }

    def test_empty_section_uses_defaults(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text("product_import:\n")

        assert ImportConfigLoader(path).load() == ImportConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ImportConfigLoader(tmp_path / "missing.yaml")

    def test_missing_section(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text("rules: {}\n")

        with pytest.raises(ValueError) as exc_info:
            ImportConfigLoader(path).load()

        assert "product_import" in str(exc_info.value)

    def test_shipped_config_loads(self):
        config = ImportConfigLoader(SHIPPED_CONFIG).load()

        assert "Bag" in config.attribute_sets
        assert config.header_stock_mappings["backorders"] == ("allow_backorders", BackendType.INT)
