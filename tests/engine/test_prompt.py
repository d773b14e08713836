from leadgrid.config import Category
from leadgrid.engine.prompt import SYSTEM_INSTRUCTION, TABLE_COLUMNS, build_prompt


def test_plain_prompt() -> None:
    assert build_prompt("pizza in Boston") == (
        "Find pizza in Boston. Provide a list with Name, Address, Rating, "
        "Review Count, Phone, and Website."
    )


def test_category_qualifier_skips_sentinel() -> None:
    assert "specifically within" not in build_prompt("pizza", Category.ALL)
    assert build_prompt("pizza", Category.RESTAURANTS).startswith(
        "Find pizza specifically within the Restaurants category."
    )
    assert "within the Real Estate category" in build_prompt("offices", "real estate")


def test_exclusion_clause_lists_names() -> None:
    prompt = build_prompt("pizza", None, ["Joe's Diner", "", "Ace"])
    assert "Do NOT include these businesses in the results: Joe's Diner, Ace." in prompt
    assert "Find DIFFERENT businesses not listed here. Provide a list" in prompt


def test_system_instruction_requests_fixed_columns() -> None:
    for column in TABLE_COLUMNS:
        assert column in SYSTEM_INSTRUCTION
    assert "Only the table." in SYSTEM_INSTRUCTION
