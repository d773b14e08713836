"""Markdown-ish table parsing for model generated listings."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from typing import Callable

FIELD_NAME = "name"
FIELD_ADDRESS = "address"
FIELD_RATING = "rating"
FIELD_REVIEWS = "reviews"
FIELD_WEBSITE = "website"
FIELD_PHONE = "phone"

# Checked in order, first substring hit wins.
_HEADER_RULES: tuple[tuple[str, str], ...] = (
    ("name", FIELD_NAME),
    ("address", FIELD_ADDRESS),
    ("rating", FIELD_RATING),
    ("review", FIELD_REVIEWS),
    ("web", FIELD_WEBSITE),
    ("phone", FIELD_PHONE),
)

_DELIMITER = "|"
_SEPARATOR_PATTERN = re.compile(r"-{3,}")
_WHITESPACE = re.compile(r"\s")


def new_lead_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Lead:
    """One discovered business: an opaque id plus string fields."""

    id: str
    data: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.data.get(FIELD_NAME, "")

    @property
    def phone(self) -> str:
        return self.data.get(FIELD_PHONE, "")

    def get(self, key: str, default: str = "") -> str:
        if key in self.data:
            return self.data[key]
        if key == "id":
            return self.id
        return default

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, **self.data}


@dataclass
class ParsedTable:
    """Parser output: column index -> field name mapping and the emitted leads."""

    columns: dict[int, str]
    leads: list[Lead]

    @property
    def has_structure(self) -> bool:
        return bool(self.columns)


def map_header(label: str) -> str:
    """Return the field name for a column label."""

    lower = label.lower()
    for needle, field_name in _HEADER_RULES:
        if needle in lower:
            return field_name
    return _WHITESPACE.sub("_", lower)


class TableTextParser:
    """Turn loosely formatted pipe tables into :class:`Lead` records.

    The input is untrusted model output. Anything that does not look like a
    table row is skipped, short rows populate only the cells they have and
    surplus cells are ignored, so the parser never raises on bad rows.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._id_factory = id_factory or new_lead_id

    def parse(self, text: str) -> list[Lead]:
        return self.parse_table(text).leads

    def parse_table(self, text: str) -> ParsedTable:
        lines = [line for line in (text or "").split("\n") if line.strip()]

        header_index = self._find_header(lines)
        if header_index is None:
            return ParsedTable(columns={}, leads=[])

        labels = [cell.strip() for cell in lines[header_index].split(_DELIMITER)]
        labels = [label for label in labels if label]
        columns = {index: map_header(label) for index, label in enumerate(labels)}

        start = header_index + 1
        if start < len(lines) and _SEPARATOR_PATTERN.search(lines[start]):
            start += 1

        leads: list[Lead] = []
        for raw_line in lines[start:]:
            lead = self._parse_row(raw_line.strip(), columns)
            if lead is not None:
                leads.append(lead)
        return ParsedTable(columns=columns, leads=leads)

    @staticmethod
    def _find_header(lines: list[str]) -> int | None:
        for index, line in enumerate(lines):
            stripped = line.strip()
            if stripped.startswith(_DELIMITER) and _DELIMITER in stripped:
                return index
        return None

    def _parse_row(self, line: str, columns: dict[int, str]) -> Lead | None:
        if not line.startswith(_DELIMITER):
            return None
        # Leading and trailing fragments are artefacts of the outer pipes.
        cells = [cell.strip() for cell in line.split(_DELIMITER)[1:-1]]
        if not cells:
            return None
        data: dict[str, str] = {}
        for index, cell in enumerate(cells):
            key = columns.get(index)
            if key:
                data[key] = cell
        if not data:
            return None
        return Lead(id=self._id_factory(), data=data)


__all__ = [
    "FIELD_ADDRESS",
    "FIELD_NAME",
    "FIELD_PHONE",
    "FIELD_RATING",
    "FIELD_REVIEWS",
    "FIELD_WEBSITE",
    "Lead",
    "ParsedTable",
    "TableTextParser",
    "map_header",
    "new_lead_id",
]
