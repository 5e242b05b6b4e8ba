"""Unit tests for the list-of-values registry."""

import logging

import pytest

from ic_core_lib.exceptions import ValidationError
from ic_core_lib.models import LOVData, default_lovs, merge_with_defaults


@pytest.mark.unit
def test_should_use_last_priority_as_lowest(lovs):
    """Test lowest_priority is the last configured priority."""
    assert lovs.lowest_priority == "P4: Low"
    assert LOVData(priorities=["High", "Low"]).lowest_priority == "Low"
    assert LOVData().lowest_priority == "P4: Low"


@pytest.mark.unit
def test_should_return_defaults_for_empty_stored_data():
    """Test merging nothing yields the full default configuration."""
    assert merge_with_defaults({}) == default_lovs()


@pytest.mark.unit
def test_should_fill_missing_fields_and_keep_stored_ones():
    """Test field-by-field merge with camelCase stored keys."""
    # Arrange
    stored = {
        "categories": ["Only One"],
        "impactCategories": [],
    }

    # Act
    merged = merge_with_defaults(stored)

    # Assert
    defaults = default_lovs()
    assert merged.categories == ["Only One"]
    assert merged.impact_categories == []
    assert merged.statuses == defaults.statuses
    assert merged.kanban_columns == defaults.kanban_columns


@pytest.mark.unit
def test_should_replace_empty_kanban_columns_with_defaults():
    """Test an empty kanbanColumns list takes the default columns."""
    merged = merge_with_defaults({"kanbanColumns": []})

    assert [c.id for c in merged.kanban_columns] == ["col-new", "col-assigned", "col-progress", "col-done"]


@pytest.mark.unit
def test_should_keep_stored_kanban_columns():
    """Test configured columns survive the merge."""
    merged = merge_with_defaults({"kanbanColumns": [{"id": "c1", "title": "All", "statuses": ["New"]}]})

    assert len(merged.kanban_columns) == 1
    assert merged.kanban_columns[0].statuses == ["New"]


@pytest.mark.unit
def test_should_warn_and_default_malformed_fields(caplog):
    """Test malformed stored values fall back to defaults with a warning."""
    with caplog.at_level(logging.WARNING):
        merged = merge_with_defaults({"regions": "EMEA", "kanbanColumns": [{"title": "no id"}]})

    assert merged.regions == default_lovs().regions
    assert merged.kanban_columns == default_lovs().kanban_columns
    assert "regions" in caplog.text


@pytest.mark.unit
def test_should_add_and_remove_values_without_mutating(lovs):
    """Test add_value/remove_value return copies."""
    # Act
    added = lovs.add_value("regions", "  ANZ ")
    removed = added.remove_value("regions", "EMEA")

    # Assert
    assert added.regions[-1] == "ANZ"
    assert "EMEA" not in removed.regions
    assert "ANZ" not in lovs.regions
    assert lovs.add_value("regions", "EMEA") is lovs
    assert lovs.add_value("regions", "   ") is lovs


@pytest.mark.unit
def test_should_reject_unknown_lov_field(lovs):
    """Test editing a non-list field raises ValidationError."""
    with pytest.raises(ValidationError) as exc_info:
        lovs.add_value("kanban_columns", "x")

    assert exc_info.value.error_code == "VALIDATION_ERROR"
