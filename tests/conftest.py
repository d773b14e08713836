"""Pytest configuration providing shared fixtures and fake collaborators."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

import pytest

from leadgrid.config import ConfigLocator, ConfigRepository
from leadgrid.engine.parser import Lead

SAMPLE_TABLE = """\
| Name | Address | Rating | Review Count | Phone | Website |
|---|---|---|---|---|---|
| Joe's Diner | 1 Main St | 4.5 | 120 | 555-1212 | N/A |
| Ace Plumbing | 22 Elm Ave | 4.8 | 56 | 555-3434 | https://ace.example |
"""

FOLLOW_UP_TABLE = """\
| Name | Address | Rating | Review Count | Phone | Website |
|---|---|---|---|---|---|
| joe's diner | 1 Main St | 4.5 | 120 | 555-1212 | N/A |
| Blue Door Cafe | 9 Oak Rd | 4.2 | 310 | 555-9090 | N/A |
"""


class FakeRetriever:
    """Replay canned responses; the last one repeats. Exceptions are raised."""

    def __init__(self, responses: Sequence[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def retrieve(self, query, category, location, exclude_names) -> str:
        self.calls.append(
            {
                "query": query,
                "category": category,
                "location": location,
                "exclude_names": list(exclude_names),
            }
        )
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return item


class GatedRetriever(FakeRetriever):
    """Like :class:`FakeRetriever` but the first call waits for ``release``."""

    def __init__(self, responses: Sequence[Any]) -> None:
        super().__init__(responses)
        self.release = asyncio.Event()

    async def retrieve(self, query, category, location, exclude_names) -> str:
        if not self.calls:
            self.calls.append({"query": query, "gated": True})
            await self.release.wait()
            item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
            if isinstance(item, BaseException):
                raise item
            return item
        return await super().retrieve(query, category, location, exclude_names)


@pytest.fixture
def sample_table() -> str:
    return SAMPLE_TABLE


@pytest.fixture
def follow_up_table() -> str:
    return FOLLOW_UP_TABLE


@pytest.fixture
def make_lead() -> Callable[..., Lead]:
    counter = {"value": 0}

    def _builder(name: str | None = None, **fields: str) -> Lead:
        counter["value"] += 1
        data = dict(fields)
        if name is not None:
            data["name"] = name
        return Lead(id=f"lead-{counter['value']}", data=data)

    return _builder


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    counter = {"value": 0}

    def _next() -> str:
        counter["value"] += 1
        return f"id-{counter['value']}"

    return _next


@pytest.fixture
def fake_retriever() -> type[FakeRetriever]:
    return FakeRetriever


@pytest.fixture
def gated_retriever() -> type[GatedRetriever]:
    return GatedRetriever


@pytest.fixture
def run() -> Callable[[Any], Any]:
    return asyncio.run


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("LEADGRID_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository
