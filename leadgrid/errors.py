"""Exception hierarchy shared by the retrieval and session layers."""

from __future__ import annotations


class LeadgridError(Exception):
    """Base class for errors surfaced to the CLI."""


class ConfigurationError(LeadgridError):
    """Required retrieval configuration (credential, model, endpoint) is missing."""


class RetrievalFailure(LeadgridError):
    """The grounding service call failed; the caller may retry."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionNotStartedError(LeadgridError):
    """An operation needs an active search session but none exists."""


class SessionBusyError(LeadgridError):
    """A retrieval call for the current session has not resolved yet."""


__all__ = [
    "ConfigurationError",
    "LeadgridError",
    "RetrievalFailure",
    "SessionBusyError",
    "SessionNotStartedError",
]
