"""Name based deduplication of incoming lead batches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .parser import Lead


def normalize_name(name: str) -> str:
    """Lower-cased only; surrounding whitespace stays significant."""

    return name.lower()


@dataclass
class DeduplicationResult:
    kept: list[Lead]
    dropped: list[Lead]

    @property
    def has_new(self) -> bool:
        return bool(self.kept)


class RecordDeduplicator:
    """Filter a batch against an existing lead set by normalized name.

    Only the existing set is consulted; two incoming leads sharing a name are
    both kept when neither is already known.
    """

    def split(self, existing: Iterable[Lead], incoming: Sequence[Lead]) -> DeduplicationResult:
        known = {normalize_name(lead.name) for lead in existing}
        kept: list[Lead] = []
        dropped: list[Lead] = []
        for lead in incoming:
            if normalize_name(lead.name) in known:
                dropped.append(lead)
            else:
                kept.append(lead)
        return DeduplicationResult(kept=kept, dropped=dropped)

    def filter_new(self, existing: Iterable[Lead], incoming: Sequence[Lead]) -> list[Lead]:
        return self.split(existing, incoming).kept


__all__ = ["DeduplicationResult", "RecordDeduplicator", "normalize_name"]
