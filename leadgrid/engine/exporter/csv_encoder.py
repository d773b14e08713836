"""Quote-everything CSV encoding for lead snapshots."""

from __future__ import annotations

import csv
import io
from typing import IO, Iterable, Sequence

from ..parser import (
    FIELD_ADDRESS,
    FIELD_NAME,
    FIELD_PHONE,
    FIELD_RATING,
    FIELD_REVIEWS,
    FIELD_WEBSITE,
    Lead,
)

DEFAULT_COLUMNS = (FIELD_NAME, FIELD_PHONE)

COLUMN_LABELS = {
    FIELD_NAME: "Name",
    FIELD_ADDRESS: "Address",
    FIELD_RATING: "Rating",
    FIELD_REVIEWS: "Review Count",
    FIELD_PHONE: "Phone",
    FIELD_WEBSITE: "Website",
}

DELIMITER = ","
LINE_SEPARATOR = "\n"


def column_label(key: str) -> str:
    return COLUMN_LABELS.get(key) or key.replace("_", " ").title()


class CsvEncoder:
    """Encode a fixed projection of lead fields as delimited text.

    Every value is wrapped in double quotes with embedded quotes doubled, so
    commas and quotes inside business names survive. The header row carries
    plain column labels; rows are joined by ``\\n`` with no trailing newline.
    """

    def __init__(self, columns: Sequence[str] = DEFAULT_COLUMNS) -> None:
        if not columns:
            raise ValueError("CsvEncoder needs at least one column")
        self.columns = tuple(columns)

    def writer(self, stream: IO[str]):
        return csv.writer(
            stream,
            delimiter=DELIMITER,
            quoting=csv.QUOTE_ALL,
            lineterminator=LINE_SEPARATOR,
        )

    def encode_header(self) -> str:
        return DELIMITER.join(column_label(key) for key in self.columns)

    def row_values(self, lead: Lead) -> list[str]:
        return [lead.get(key) for key in self.columns]

    def encode_row(self, lead: Lead) -> str:
        buffer = io.StringIO()
        self.writer(buffer).writerow(self.row_values(lead))
        return buffer.getvalue()[: -len(LINE_SEPARATOR)]

    def write(self, stream: IO[str], leads: Iterable[Lead], header: bool = True) -> int:
        """Write rows (and optionally the header line) to ``stream``; every line ends with ``\\n``."""

        writer = self.writer(stream)
        count = 0
        for lead in leads:
            if header and count == 0:
                stream.write(self.encode_header() + LINE_SEPARATOR)
            writer.writerow(self.row_values(lead))
            count += 1
        return count

    def encode(self, leads: Iterable[Lead]) -> str:
        buffer = io.StringIO()
        if not self.write(buffer, leads):
            return ""
        return buffer.getvalue()[: -len(LINE_SEPARATOR)]


__all__ = ["COLUMN_LABELS", "CsvEncoder", "DEFAULT_COLUMNS", "column_label"]
