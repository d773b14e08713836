"""File based exporter supporting CSV/JSON lines."""

from __future__ import annotations

import json
import re
from datetime import date
from pathlib import Path
from typing import Sequence

from ..parser import Lead
from .base import BaseExporter
from .csv_encoder import CsvEncoder, DEFAULT_COLUMNS


class FileExporter(BaseExporter):
    """Write leads to a dated file, e.g. ``map_leads_2024-05-01.csv``."""

    def __init__(
        self,
        output_dir: Path,
        fmt: str = "csv",
        columns: Sequence[str] = DEFAULT_COLUMNS,
        prefix: str = "map_leads",
        run_date: date | None = None,
    ) -> None:
        if fmt not in ("csv", "json"):
            raise ValueError(f"Unsupported export format: {fmt}")
        self.output_dir = output_dir
        self.format = fmt
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_date = run_date or date.today()
        slug = re.sub(r"[^0-9A-Za-z_-]+", "_", prefix.strip()) or "leads"
        filename = f"{slug}_{self.run_date.isoformat()}.{self._extension}"
        self.path = self.output_dir / filename
        self._encoder = CsvEncoder(columns)
        self._file = self.path.open("w", encoding="utf-8", newline="")
        self._counter = 0

    @property
    def _extension(self) -> str:
        if self.format == "json":
            return "jsonl"
        return "csv"

    @property
    def count(self) -> int:
        return self._counter

    def export(self, lead: Lead) -> None:
        if self.format == "json":
            json.dump(lead.as_dict(), self._file, ensure_ascii=False)
            self._file.write("\n")
        else:
            self._encoder.write(self._file, [lead], header=self._counter == 0)
        self._counter += 1

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()


def export_leads(
    leads: Sequence[Lead],
    output_dir: Path,
    fmt: str = "csv",
    columns: Sequence[str] = DEFAULT_COLUMNS,
    prefix: str = "map_leads",
    run_date: date | None = None,
) -> Path | None:
    """Write ``leads`` to a dated file; nothing is written for an empty set."""

    if not leads:
        return None
    exporter = FileExporter(output_dir, fmt, columns=columns, prefix=prefix, run_date=run_date)
    try:
        exporter.export_many(leads)
        exporter.flush()
    finally:
        exporter.close()
    return exporter.path


__all__ = ["FileExporter", "export_leads"]
