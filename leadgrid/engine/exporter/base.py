"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..parser import Lead


class BaseExporter(ABC):
    """Uniform exporter contract enabling plug-and-play outputs."""

    @abstractmethod
    def export(self, lead: Lead) -> None:
        """Write a single lead."""

    def export_many(self, leads: Iterable[Lead]) -> int:
        count = 0
        for lead in leads:
            self.export(lead)
            count += 1
        return count

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter"]
