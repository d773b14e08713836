"""In-memory lead storage for a single search session."""

from __future__ import annotations

from threading import Lock
from typing import Iterable, Iterator

from ..engine.parser import Lead


class LeadStore:
    """Ordered, append-only lead set that can be reset.

    Each mutation swaps in a new tuple under the lock, so a reader holding a
    snapshot never observes a half-applied batch.
    """

    def __init__(self) -> None:
        self._leads: tuple[Lead, ...] = ()
        self._session_id: str | None = None
        self._lock = Lock()

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def snapshot(self) -> tuple[Lead, ...]:
        return self._leads

    def names(self) -> list[str]:
        return [lead.name for lead in self._leads if lead.name]

    def reset(self, session_id: str | None = None) -> None:
        """Drop every lead and relink the store to ``session_id`` (or nothing)."""

        with self._lock:
            self._leads = ()
            self._session_id = session_id

    def append(self, leads: Iterable[Lead]) -> int:
        batch = tuple(leads)
        if not batch:
            return 0
        with self._lock:
            self._leads = self._leads + batch
        return len(batch)

    def is_linked_to(self, session_id: str) -> bool:
        return self._session_id == session_id

    def __len__(self) -> int:
        return len(self._leads)

    def __iter__(self) -> Iterator[Lead]:
        return iter(self._leads)


__all__ = ["LeadStore"]
