"""Tests for src.changelog.diff."""

from __future__ import annotations

import copy

import pytest

from src.changelog.diff import ABSENT, FlagChanges, detect_changes, has_changes
from tests.fixtures import load_flag_data


@pytest.fixture
def old() -> dict:
    return load_flag_data()


@pytest.fixture
def new(old) -> dict:
    return copy.deepcopy(old)


class TestDetectChanges:
    """Tests for detect_changes."""

    def test_identical_documents(self, old, new):
        changes = detect_changes(old, new)
        assert not has_changes(changes)
        assert changes.total == 0

    @pytest.mark.parametrize("missing", ["old", "new"])
    def test_missing_side_yields_empty(self, old, missing):
        args = (None, old) if missing == "old" else (old, None)
        changes = detect_changes(*args)
        assert changes == FlagChanges()

    def test_toggled_flag(self, old, new):
        new["configurations"]["acme"]["sepsis"]["flags"]["bundle_tracking"] = False
        changes = detect_changes(old, new)
        assert len(changes.config_changes) == 1
        change = changes.config_changes[0]
        assert change.customer == "Acme Health"
        assert change.customer_key == "acme"
        assert change.product == "Sepsis"
        assert change.flag == "bundle_tracking"
        assert change.old_value is True
        assert change.new_value is False
        assert changes.total == 1

    def test_newly_set_flag_has_no_old_value(self, old, new):
        new["configurations"]["gamma"]["sepsis"]["flags"]["auto_note"] = True
        changes = detect_changes(old, new)
        [change] = changes.config_changes
        assert change.old_value is ABSENT
        assert change.new_value is True

    def test_unset_flag_has_no_new_value(self, old, new):
        del new["configurations"]["acme"]["rrt"]["flags"]["rrt_score"]
        [change] = detect_changes(old, new).config_changes
        assert change.product == "Rapid Response"
        assert change.old_value is True
        assert change.new_value is ABSENT

    def test_null_to_absent_is_reported(self, old, new):
        old["configurations"]["gamma"]["sepsis"]["flags"]["auto_note"] = None
        [change] = detect_changes(old, new).config_changes
        assert change.flag == "auto_note"
        assert change.old_value is None
        assert change.new_value is ABSENT

    def test_null_on_both_sides_is_unchanged(self, old, new):
        old["configurations"]["gamma"]["sepsis"]["flags"]["auto_note"] = None
        new["configurations"]["gamma"]["sepsis"]["flags"]["auto_note"] = None
        assert not has_changes(detect_changes(old, new))

    def test_value_type_change_is_reported(self, old, new):
        new["configurations"]["gamma"]["sepsis"]["flags"]["assessment_writeback"] = 1
        assert len(detect_changes(old, new).config_changes) == 1

    def test_whole_product_block_added(self, old, new):
        new["configurations"]["delta"] = {
            "rrt": {"flags": {"rrt_score": True, "assessment_writeback": False}}
        }
        changes = detect_changes(old, new)
        assert [c.flag for c in changes.config_changes] == ["rrt_score", "assessment_writeback"]
        assert all(c.customer == "Delta Medical" for c in changes.config_changes)

    def test_note_changes(self, old, new):
        notes = new["configurations"]["acme"]["sepsis"]["notes"]
        notes["auto_note"] = "Approved"
        notes["bundle_tracking"] = "Live since March"
        changes = detect_changes(old, new)
        by_flag = {n.flag: n for n in changes.note_changes}
        assert by_flag["auto_note"].old_note == "Pending physician review"
        assert by_flag["auto_note"].new_note == "Approved"
        assert by_flag["bundle_tracking"].old_note == ""
        assert changes.total == 2

    def test_customer_added_and_removed(self, old, new):
        new["customers"] = [c for c in new["customers"] if c["key"] != "beta"]
        del new["configurations"]["beta"]
        new["customers"].append(
            {"key": "omega", "name": "Omega Care", "ehr": "Epic", "products": ["sepsis"]}
        )
        new["configurations"]["omega"] = {"sepsis": {"flags": {"auto_note": True}}}
        changes = detect_changes(old, new)
        assert [c["key"] for c in changes.customers_added] == ["omega"]
        assert [c["key"] for c in changes.customers_removed] == ["beta"]
        # Flags of added or removed customers are not listed individually
        assert changes.config_changes == []
        assert changes.total == 2

    def test_customer_product_changes(self, old, new):
        new["customers"][1]["products"] = ["rrt"]
        [change] = detect_changes(old, new).customer_product_changes
        assert change.customer == "Beta Regional"
        assert change.added == ["rrt"]
        assert change.removed == ["sepsis"]

    def test_product_catalog_changes(self, old, new):
        new["products"].append({"key": "falls", "name": "Falls Risk"})
        changes = detect_changes(old, new)
        assert [p["name"] for p in changes.products_added] == ["Falls Risk"]
        assert has_changes(changes)
        # Catalog changes are not part of the total
        assert changes.total == 0

    def test_flag_definitions_added_and_removed(self, old, new):
        new["flagDefinitions"]["display"] = [
            {"key": "score_badge", "name": "Score Badge", "applicableProducts": "all"}
        ]
        changes = detect_changes(old, new)
        assert changes.flags_added == ["score_badge"]
        assert changes.flags_removed == ["patient_list_column"]
        assert changes.total == 2
