"""Engine components orchestrating retrieve → parse → dedup → export."""

from .dedup import DeduplicationResult, RecordDeduplicator
from .geolocation import GeoLocation, Geolocator, IpGeolocator, StaticGeolocator, resolve_location
from .parser import Lead, ParsedTable, TableTextParser
from .prompt import build_prompt
from .retriever import GeminiRetriever, RetrievalRequest, Retriever

__all__ = [
    "DeduplicationResult",
    "GeminiRetriever",
    "GeoLocation",
    "Geolocator",
    "IpGeolocator",
    "Lead",
    "ParsedTable",
    "RecordDeduplicator",
    "RetrievalRequest",
    "Retriever",
    "StaticGeolocator",
    "TableTextParser",
    "build_prompt",
    "resolve_location",
]
