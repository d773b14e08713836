"""Prompt construction for the maps grounding model."""

from __future__ import annotations

from typing import Sequence

from ..config import Category

TABLE_COLUMNS = ("Name", "Address", "Rating", "Review Count", "Phone", "Website")

SYSTEM_INSTRUCTION = """\
You are an advanced data extraction assistant specializing in Google Maps.
Your goal is to find businesses or places based on the user's query and format the output strictly as a Markdown table.

Rules:
1. Find at least 10-20 relevant results if possible.
2. The output MUST be a Markdown table.
3. The table MUST have these columns: Name, Address, Rating, Review Count, Phone, Website.
4. If specific data is missing for a row, put "N/A".
5. Do not include any conversational text before or after the table. Only the table.
6. Ensure the data is accurate based on the Google Maps tool grounding.
"""


def build_prompt(
    query: str,
    category: Category | str | None = None,
    exclude_names: Sequence[str] = (),
) -> str:
    """Compose the user prompt: query, category qualifier and exclusion clause."""

    text = f"Find {query}"

    if isinstance(category, str) and not isinstance(category, Category):
        category = Category.parse(category)
    if category is not None and category.is_filter:
        text += f" specifically within the {category.value} category"

    names = [name for name in exclude_names if name]
    if names:
        text += (
            f". IMPORTANT: Do NOT include these businesses in the results: {', '.join(names)}."
            " Find DIFFERENT businesses not listed here"
        )

    text += ". Provide a list with Name, Address, Rating, Review Count, Phone, and Website."
    return text


__all__ = ["SYSTEM_INSTRUCTION", "TABLE_COLUMNS", "build_prompt"]
