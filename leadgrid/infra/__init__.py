"""Infrastructure helpers."""

from .storage import LeadStore

__all__ = ["LeadStore"]
