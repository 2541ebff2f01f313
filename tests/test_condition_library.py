"""Tests for the condition library."""

import uuid

import pytest

from scryscreen.initiative.conditions import (
    BLINDED_ID,
    BLOODIED_ID,
    DEAD_ID,
    ConditionDefinition,
    ConditionLibrary,
    default_built_ins,
)


class TestBuiltIns:
    """Test the default built-in conditions."""

    def test_count_and_stable_ids(self):
        """Test built-ins keep their well-known ids."""
        built_ins = default_built_ins()
        assert len(built_ins) == 22
        assert built_ins[0].id == BLINDED_ID
        assert str(BLINDED_ID) == "d0a70a1b-4d49-4cc8-8f4b-1e1c2a7abf01"
        assert all(d.is_built_in for d in built_ins)

    def test_manual_only(self):
        """Test that only Bloodied and Dead have no timer."""
        manual = {d.id for d in default_built_ins() if d.is_manual_only}
        assert manual == {BLOODIED_ID, DEAD_ID}

    def test_display_name(self):
        """Test custom conditions are starred."""
        library = ConditionLibrary()
        custom = library.add_custom("Hexed", "#FF000000")
        assert library.get(BLINDED_ID).display_name == "Blinded"
        assert custom.display_name == "*Hexed"
        assert custom.is_custom


class TestConditionLibrary:
    """Test library operations."""

    def setup_method(self):
        """Set up a fresh library."""
        self.library = ConditionLibrary()

    def test_get_unknown(self):
        """Test unknown ids."""
        assert self.library.get(uuid.uuid4()) is None

    def test_all_alphabetical(self):
        """Test definitions are sorted case-insensitively."""
        self.library.add_custom("aaa first", "#FF111111")
        names = [d.name for d in self.library.all_alphabetical()]
        assert names[0] == "aaa first"
        assert names == sorted(names, key=str.upper)

    def test_add_custom_trims(self):
        """Test names and colors are trimmed."""
        custom = self.library.add_custom("  Marked  ", " #FF3B82F6 ")
        assert custom.name == "Marked"
        assert custom.color_hex == "#FF3B82F6"
        assert custom.id in self.library

    @pytest.mark.parametrize("name,color", [("", "#FFFFFFFF"), ("Name", "  ")])
    def test_add_custom_rejects_blank(self, name, color):
        """Test blank names or colors are invalid."""
        with pytest.raises(ValueError):
            self.library.add_custom(name, color)

    def test_update_custom(self):
        """Test renaming a custom condition."""
        custom = self.library.add_custom("Old", "#FF000000")
        assert self.library.update_custom(custom.id, "New", "#FFFFFFFF") is True
        assert self.library.get(custom.id).name == "New"

    def test_update_rejects_built_in_and_blank(self):
        """Test built-ins and blank values cannot be updated."""
        custom = self.library.add_custom("Old", "#FF000000")
        assert self.library.update_custom(BLINDED_ID, "Nope", "#FF000000") is False
        assert self.library.update_custom(custom.id, " ", "#FF000000") is False

    def test_delete_custom(self):
        """Test deleting custom conditions only."""
        custom = self.library.add_custom("Temp", "#FF000000")
        assert self.library.delete_custom(custom.id) is True
        assert self.library.get(custom.id) is None
        assert self.library.delete_custom(BLINDED_ID) is False
        assert self.library.get(BLINDED_ID) is not None

    def test_set_color(self):
        """Test recoloring and ignoring blank colors."""
        self.library.set_color(BLINDED_ID, "#FF123456")
        self.library.set_color(BLINDED_ID, "")
        assert self.library.get(BLINDED_ID).color_hex == "#FF123456"

    def test_validate(self):
        """Test definition validation."""
        with pytest.raises(ValueError):
            ConditionDefinition(uuid.uuid4(), " ", "#FF000000").validate()


class TestLibrarySerialization:
    """Test library to_dict/from_dict."""

    def test_only_changed_colors_saved(self):
        """Test unchanged built-ins are not written as overrides."""
        library = ConditionLibrary()
        library.set_color(DEAD_ID, "#FF000000")
        data = library.to_dict()
        assert data["built_in_color_overrides"] == [{"id": str(DEAD_ID), "color_hex": "#FF000000"}]
        assert data["custom_conditions"] == []

    def test_round_trip(self):
        """Test overrides and custom conditions survive serialization."""
        library = ConditionLibrary()
        library.set_color(BLINDED_ID, "#FF010101")
        custom = library.add_custom("Hexed", "#FF00FF00")

        restored = ConditionLibrary.from_dict(library.to_dict())

        assert restored.get(BLINDED_ID).color_hex == "#FF010101"
        assert restored.get(custom.id).name == "Hexed"

    def test_skips_blank_and_reassigns_bad_ids(self):
        """Test damaged custom entries are repaired or dropped."""
        data = {
            "custom_conditions": [
                {"id": "not-a-uuid", "name": "Cursed", "color_hex": "#FF000000"},
                {"id": str(BLINDED_ID), "name": "Clash", "color_hex": "#FF000000"},
                {"id": str(uuid.uuid4()), "name": "", "color_hex": "#FF000000"},
            ]
        }

        library = ConditionLibrary.from_dict(data)

        customs = [d for d in library.all_alphabetical() if d.is_custom]
        assert sorted(d.name for d in customs) == ["Clash", "Cursed"]
        assert library.get(BLINDED_ID).name == "Blinded"

    def test_skips_records_that_are_not_mappings(self):
        """Test junk list items are ignored instead of failing the load."""
        data = {
            "built_in_color_overrides": [None, "junk", {"id": str(DEAD_ID), "color_hex": "#FF000000"}],
            "custom_conditions": ["junk", 42, None, {"name": "Marked", "color_hex": "#FF3B82F6"}],
        }

        library = ConditionLibrary.from_dict(data)

        assert library.get(DEAD_ID).color_hex == "#FF000000"
        customs = [d.name for d in library.all_alphabetical() if d.is_custom]
        assert customs == ["Marked"]

    def test_empty_data(self):
        """Test missing data gives the defaults."""
        assert len(ConditionLibrary.from_dict(None).all_alphabetical()) == 22
