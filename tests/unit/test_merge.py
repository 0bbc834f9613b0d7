"""
Unit tests for merging a stored entity with freshly prepared attributes.

Includes property-based testing with hypothesis for the precedence rule.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from src.core.merge import merge_entity

FIELDS = st.sampled_from(["name", "type_id", "qty", "color", "updated_at", "weight"])
ENTITIES = st.dictionaries(FIELDS, st.one_of(st.integers(), st.text(max_size=5)))


class TestMergeEntity:
    """Tests for merge_entity"""

    def test_fresh_values_overwrite_loaded_values(self):
        """Test that a field present in both takes the fresh value"""
        loaded = {"entity_id": 7, "sku": "SKU1", "type_id": "simple", "name": "Old"}
        fresh = {"sku": "SKU1", "type_id": "configurable"}

        merged = merge_entity(loaded, fresh)

        assert merged["type_id"] == "configurable"

    def test_loaded_only_fields_are_kept(self):
        """Test that fields missing from the fresh attributes keep the stored value"""
        loaded = {"entity_id": 7, "sku": "SKU1", "name": "Old", "color": "red"}
        fresh = {"sku": "SKU1", "name": "New"}

        merged = merge_entity(loaded, fresh)

        assert merged == {"entity_id": 7, "sku": "SKU1", "name": "New", "color": "red"}

    def test_identity_fields_keep_loaded_value(self):
        """Test that entity_id and sku are never taken from the fresh attributes"""
        loaded = {"entity_id": 7, "sku": "SKU1"}
        fresh = {"entity_id": 99, "sku": "sku1", "name": "New"}

        merged = merge_entity(loaded, fresh)

        assert merged["entity_id"] == 7
        assert merged["sku"] == "SKU1"

    def test_identity_fields_missing_from_loaded_come_from_fresh(self):
        """Test that a preserved field falls back to the fresh value if not stored"""
        merged = merge_entity({"name": "Old"}, {"sku": "SKU1"})

        assert merged["sku"] == "SKU1"

    def test_custom_preserve_fields(self):
        """Test that callers can choose which fields are protected"""
        merged = merge_entity({"code": "A", "x": 1}, {"code": "B", "x": 2}, preserve=("code",))

        assert merged == {"code": "A", "x": 2}

    def test_inputs_are_not_modified(self):
        """Test that merge is pure"""
        loaded = {"entity_id": 1, "name": "Old"}
        fresh = {"name": "New"}

        merge_entity(loaded, fresh)

        assert loaded == {"entity_id": 1, "name": "Old"}
        assert fresh == {"name": "New"}

    @settings(deadline=None)
    @given(ENTITIES, ENTITIES)
    def test_fresh_wins_for_every_shared_field(self, loaded, fresh):
        """Property: fresh fields win, loaded-only fields survive, nothing else appears"""
        merged = merge_entity(loaded, fresh)

        assert set(merged) == set(loaded) | set(fresh)
        for field_name, value in fresh.items():
            assert merged[field_name] == value
        for field_name in set(loaded) - set(fresh):
            assert merged[field_name] == loaded[field_name]

    @settings(deadline=None)
    @given(ENTITIES)
    def test_merge_with_empty_fresh_is_identity(self, loaded):
        """Property: merging nothing returns the loaded entity"""
        assert merge_entity(loaded, {}) == loaded
