"""
Tests for projecting validated inventory rows onto catalog entries.
"""

import pytest

from conftest import inventory_row
from dealerhub.models.product import DEFAULT_STOCK_ID, CatalogEntryIngestion, is_blank


def test_projects_headers_onto_columns():
    row, invalid = CatalogEntryIngestion.project(inventory_row())

    assert invalid == []
    assert row["stock_id"] == "S1"
    assert row["brand"] == "Rolex"
    assert row["case_size"] == 41.0
    assert row["total_price"] == 14500.0
    assert row["launch_year"] == 2020
    assert row["visibility"] is True
    assert "user_id" not in row


@pytest.mark.parametrize(
    "raw, expected",
    [("$12,500", 12500.0), ("12 500.50", 12500.5), ("€ 980", 980.0), (" 7000 ", 7000.0)],
)
def test_price_formats(raw, expected):
    row, _ = CatalogEntryIngestion.project(inventory_row({"Total Price ($US)": raw}))

    assert row["total_price"] == expected


def test_defaults_for_blank_optional_cells():
    record = inventory_row()
    record.update({"Stock ID": "", "Total Price ($US)": " "})

    row, invalid = CatalogEntryIngestion.project(record)

    assert invalid == []
    assert row["stock_id"] == DEFAULT_STOCK_ID
    assert row["total_price"] == 0


def test_case_size_with_unit():
    row, _ = CatalogEntryIngestion.project(inventory_row({"Case Size (MM)": "40 mm"}))

    assert row["case_size"] == 40.0


def test_year_from_spreadsheet_float():
    row, _ = CatalogEntryIngestion.project(inventory_row({"Launch Year": "2019.0"}))

    assert row["launch_year"] == 2019


def test_unreadable_numbers_are_reported_by_header():
    record = inventory_row({"Total Price ($US)": "on request", "Launch Year": "nineties"})

    row, invalid = CatalogEntryIngestion.project(record)

    assert row is None
    assert invalid == ["Total Price ($US)", "Launch Year"]


def test_fractional_year_is_invalid():
    row, invalid = CatalogEntryIngestion.project(inventory_row({"Launch Year": "2019.5"}))

    assert row is None
    assert invalid == ["Launch Year"]


def test_numeric_stock_id_becomes_string():
    row, _ = CatalogEntryIngestion.project(inventory_row({"Stock ID": 1042}))

    assert row["stock_id"] == "1042"


@pytest.mark.parametrize("value, blank", [(None, True), ("", True), ("  ", True), ("x", False), (0, False)])
def test_is_blank(value, blank):
    assert is_blank(value) is blank
