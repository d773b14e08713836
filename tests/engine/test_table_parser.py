from __future__ import annotations

import pytest

from leadgrid.engine.parser import TableTextParser, map_header


def test_parse_well_formed_table(sequential_ids) -> None:
    text = """
| Name | Address | Rating | Review Count | Phone | Website |
|---|---|---|---|---|---|
| Joe's Diner | 1 Main St | 4.5 | 120 | 555-1212 | N/A |
"""
    leads = TableTextParser(id_factory=sequential_ids).parse(text)
    assert len(leads) == 1
    assert leads[0].id == "id-1"
    assert leads[0].data == {
        "name": "Joe's Diner",
        "address": "1 Main St",
        "rating": "4.5",
        "reviews": "120",
        "phone": "555-1212",
        "website": "N/A",
    }


def test_parse_keeps_row_order_and_assigns_distinct_ids(sample_table) -> None:
    leads = TableTextParser().parse(sample_table)
    assert [lead.name for lead in leads] == ["Joe's Diner", "Ace Plumbing"]
    assert len({lead.id for lead in leads}) == 2


def test_no_pipe_lines_yield_nothing() -> None:
    parser = TableTextParser()
    assert parser.parse("Here are some great places:\n1. Joe's Diner\n2. Ace") == []
    assert parser.parse("") == []
    assert parser.parse_table("just prose").has_structure is False


def test_prose_around_table_is_ignored(sample_table) -> None:
    text = "Sure! Here is the table you asked for.\n\n" + sample_table + "\nHope this helps."
    leads = TableTextParser().parse(text)
    assert [lead.name for lead in leads] == ["Joe's Diner", "Ace Plumbing"]


def test_short_row_maps_only_present_cells() -> None:
    text = """
| Name | Address | Rating | Review Count | Phone | Website |
|---|---|---|---|---|---|
| Corner Shop | 5 High St |
"""
    leads = TableTextParser().parse(text)
    assert leads[0].data == {"name": "Corner Shop", "address": "5 High St"}


def test_long_row_ignores_extra_cells() -> None:
    text = """
| Name | Phone |
|---|---|
| Ace | 555 | surplus | more |
"""
    leads = TableTextParser().parse(text)
    assert leads[0].data == {"name": "Ace", "phone": "555"}


def test_missing_separator_row_keeps_first_data_row() -> None:
    text = "| Name | Phone |\n| Ace | 555 |\n| Bolt | 556 |"
    leads = TableTextParser().parse(text)
    assert [lead.name for lead in leads] == ["Ace", "Bolt"]


def test_separator_detected_with_alignment_markers() -> None:
    text = "| Name | Phone |\n|:---|---:|\n| Ace | 555 |"
    leads = TableTextParser().parse(text)
    assert [lead.data for lead in leads] == [{"name": "Ace", "phone": "555"}]


def test_unknown_headers_become_derived_fields() -> None:
    text = "| Name | Opening Hours | Price\tLevel |\n|---|---|---|\n| Ace | 9-5 | $$ |"
    parsed = TableTextParser().parse_table(text)
    assert parsed.columns == {0: "name", 1: "opening_hours", 2: "price_level"}
    assert parsed.leads[0].data == {"name": "Ace", "opening_hours": "9-5", "price_level": "$$"}


def test_non_pipe_lines_between_rows_are_skipped() -> None:
    text = "| Name |\n|---|\n| Ace |\nnot a row\n| Bolt |"
    assert [lead.name for lead in TableTextParser().parse(text)] == ["Ace", "Bolt"]


def test_row_with_only_outer_pipe_is_dropped() -> None:
    text = "| Name | Phone |\n|---|---|\n|\n| Ace | 555 |"
    assert [lead.name for lead in TableTextParser().parse(text)] == ["Ace"]


def test_row_without_mapped_cells_is_dropped() -> None:
    # Header with no labels: nothing can be mapped, so every row disappears.
    text = "| |\n| Ace | 555 |"
    assert TableTextParser().parse(text) == []


def test_duplicate_canonical_columns_last_wins() -> None:
    text = "| Name | Business Name |\n|---|---|\n| Ace | Ace Plumbing LLC |"
    parsed = TableTextParser().parse_table(text)
    assert parsed.columns == {0: "name", 1: "name"}
    assert parsed.leads[0].name == "Ace Plumbing LLC"


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Name", "name"),
        ("Business NAME", "name"),
        ("Street Address", "address"),
        ("Google Rating", "rating"),
        ("Review Count", "reviews"),
        ("Website", "website"),
        ("Web Page", "website"),
        ("Phone", "phone"),
        ("Phone Number", "phone"),
        ("Opening Hours", "opening_hours"),
    ],
)
def test_map_header_priority(label: str, expected: str) -> None:
    assert map_header(label) == expected
