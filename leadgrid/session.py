"""Search session wiring together retrieval, parsing, dedup and the lead store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

from .config import Category
from .engine import (
    GeoLocation,
    Geolocator,
    Lead,
    RecordDeduplicator,
    Retriever,
    TableTextParser,
    resolve_location,
)
from .errors import (
    ConfigurationError,
    RetrievalFailure,
    SessionBusyError,
    SessionNotStartedError,
)
from .infra import LeadStore
from .logging_conf import session_logger

BATCH_SEPARATOR = "\n\n--- NEXT BATCH ---\n\n"


class FetchStatus(str, Enum):
    """How a start/load-more call ended when it did not raise."""

    ADDED = "added"
    EMPTY_RESULT = "empty_result"
    NO_NEW_RESULTS = "no_new_results"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class SearchParameters:
    """Inputs replayed verbatim on every fetch of a session."""

    query: str
    category: Category = Category.ALL
    location: GeoLocation | None = None

    def __post_init__(self) -> None:
        if not self.query or not self.query.strip():
            raise ValueError("query cannot be empty")


@dataclass(slots=True)
class FetchOutcome:
    status: FetchStatus
    parameters: SearchParameters
    added: list[Lead] = field(default_factory=list)
    parsed_count: int = 0
    duplicate_count: int = 0
    raw_text: str = ""

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def is_soft_condition(self) -> bool:
        return self.status in (FetchStatus.EMPTY_RESULT, FetchStatus.NO_NEW_RESULTS)


class SearchSession:
    """Own one search at a time: frozen parameters plus the leads it gathered.

    ``start`` opens a new session (new identity, empty store) and ``load_more``
    replays its parameters with the names already collected as exclusions.
    Calls are awaited one at a time by the caller. A ``load_more`` issued while
    a call for the same session is pending raises :class:`SessionBusyError`; a
    response that arrives after ``clear`` or a newer ``start`` is dropped and
    reported as :attr:`FetchStatus.STALE`.
    """

    def __init__(
        self,
        retriever: Retriever,
        store: LeadStore | None = None,
        parser: TableTextParser | None = None,
        deduplicator: RecordDeduplicator | None = None,
        geolocator: Geolocator | None = None,
        geolocation_timeout: float = 5.0,
    ) -> None:
        self.retriever = retriever
        self.store = store or LeadStore()
        self.parser = parser or TableTextParser()
        self.deduplicator = deduplicator or RecordDeduplicator()
        self.geolocator = geolocator
        self.geolocation_timeout = geolocation_timeout
        self._session_id: str | None = None
        self._parameters: SearchParameters | None = None
        self._pending: str | None = None
        self._raw_batches: list[str] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def parameters(self) -> SearchParameters | None:
        return self._parameters

    @property
    def is_active(self) -> bool:
        return self._session_id is not None and self._parameters is not None

    @property
    def is_busy(self) -> bool:
        return self._pending is not None and self._pending == self._session_id

    @property
    def leads(self) -> tuple[Lead, ...]:
        return self.store.snapshot()

    @property
    def raw_transcript(self) -> str:
        return BATCH_SEPARATOR.join(self._raw_batches)

    def exclusions(self) -> list[str]:
        return self.store.names()

    def clear(self) -> None:
        """Destroy the current session and everything it accumulated."""

        if self._session_id is not None:
            session_logger(self._session_id).info("session_cleared", leads=len(self.store))
        self._session_id = None
        self._parameters = None
        self._raw_batches = []
        self.store.reset()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    async def start(
        self,
        query: str,
        category: Category | str | None = Category.ALL,
        location: GeoLocation | None = None,
        use_location: bool = False,
    ) -> FetchOutcome:
        """Open a new session and store the first batch as-is."""

        if not query or not query.strip():
            raise ValueError("query cannot be empty")
        if not isinstance(category, Category):
            category = Category.parse(category)
        session_id = uuid.uuid4().hex
        self._session_id = session_id
        self._parameters = None
        self._raw_batches = []
        self.store.reset(session_id)
        self._pending = session_id
        log = session_logger(session_id)

        if location is None and use_location:
            location = await resolve_location(
                self.geolocator, self.geolocation_timeout, logger=log
            )
        params = SearchParameters(query=query, category=category, location=location)
        if not self._is_current(session_id):
            log.info("stale_response_discarded", operation="geolocation")
            return FetchOutcome(status=FetchStatus.STALE, parameters=params)
        self._parameters = params
        log.info(
            "search_started",
            query=params.query,
            category=params.category.value,
            has_location=params.location is not None,
        )
        try:
            raw = await self._retrieve(params, [])
        except (ConfigurationError, RetrievalFailure) as exc:
            if not self._is_current(session_id):
                log.info("stale_response_discarded", operation="start", error=str(exc))
                return FetchOutcome(status=FetchStatus.STALE, parameters=params)
            log.error("search_failed", error=str(exc))
            self._abandon()
            raise
        finally:
            if self._pending == session_id:
                self._pending = None

        if not self._is_current(session_id):
            log.info("stale_response_discarded", operation="start")
            return FetchOutcome(status=FetchStatus.STALE, parameters=params, raw_text=raw)

        self._raw_batches.append(raw)
        leads = self.parser.parse(raw)
        log.info("batch_parsed", operation="start", parsed=len(leads))
        if not leads:
            log.warning("no_structured_data", raw_length=len(raw))
            return FetchOutcome(
                status=FetchStatus.EMPTY_RESULT, parameters=params, raw_text=raw
            )
        self.store.append(leads)
        return FetchOutcome(
            status=FetchStatus.ADDED,
            parameters=params,
            added=leads,
            parsed_count=len(leads),
            raw_text=raw,
        )

    async def load_more(self) -> FetchOutcome:
        """Fetch another batch for the active session, keeping only unseen names."""

        session_id = self._session_id
        params = self._parameters
        if session_id is None or params is None:
            raise SessionNotStartedError("No active search; start a search first.")
        if self.is_busy:
            raise SessionBusyError("A request for this search is still in progress.")
        log = session_logger(session_id)

        exclusions = self.exclusions()
        self._pending = session_id
        try:
            raw = await self._retrieve(params, exclusions)
        except (ConfigurationError, RetrievalFailure) as exc:
            if not self._is_current(session_id):
                log.info("stale_response_discarded", operation="load_more", error=str(exc))
                return FetchOutcome(status=FetchStatus.STALE, parameters=params)
            log.error("load_more_failed", error=str(exc), kept=len(self.store))
            raise
        finally:
            if self._pending == session_id:
                self._pending = None

        if not self._is_current(session_id):
            log.info("stale_response_discarded", operation="load_more")
            return FetchOutcome(status=FetchStatus.STALE, parameters=params, raw_text=raw)

        self._raw_batches.append(raw)
        parsed = self.parser.parse(raw)
        result = self.deduplicator.split(self.store.snapshot(), parsed)
        log.info(
            "load_more_completed",
            excluded=len(exclusions),
            parsed=len(parsed),
            added=len(result.kept),
            duplicates=len(result.dropped),
        )
        if not result.has_new:
            return FetchOutcome(
                status=FetchStatus.NO_NEW_RESULTS,
                parameters=params,
                parsed_count=len(parsed),
                duplicate_count=len(result.dropped),
                raw_text=raw,
            )
        self.store.append(result.kept)
        return FetchOutcome(
            status=FetchStatus.ADDED,
            parameters=params,
            added=result.kept,
            parsed_count=len(parsed),
            duplicate_count=len(result.dropped),
            raw_text=raw,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _retrieve(self, params: SearchParameters, exclusions: list[str]) -> str:
        try:
            raw = await self.retriever.retrieve(
                params.query, params.category, params.location, exclusions
            )
        except (ConfigurationError, RetrievalFailure):
            raise
        except Exception as exc:  # noqa: BLE001
            raise RetrievalFailure(str(exc) or exc.__class__.__name__) from exc
        return raw or ""

    def _is_current(self, session_id: str) -> bool:
        return self._session_id == session_id and self.store.is_linked_to(session_id)

    def _abandon(self) -> None:
        self._session_id = None
        self._parameters = None
        self._raw_batches = []
        self.store.reset()


__all__ = ["BATCH_SEPARATOR", "FetchOutcome", "FetchStatus", "SearchParameters", "SearchSession"]
