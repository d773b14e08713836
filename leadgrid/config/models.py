"""Pydantic models used across leadgrid configuration flow."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    """Business categories understood by the search prompt."""

    ALL = "All Categories"
    RESTAURANTS = "Restaurants"
    HOTELS = "Hotels"
    RETAIL = "Retail"
    SERVICES = "Services"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    AUTOMOTIVE = "Automotive"
    REAL_ESTATE = "Real Estate"
    EDUCATION = "Education"
    TECHNOLOGY = "Technology"

    @property
    def is_filter(self) -> bool:
        return self is not Category.ALL

    @classmethod
    def parse(cls, value: str | None) -> "Category":
        """Resolve a user supplied label, case-insensitively; empty means no filter."""

        if value is None or not value.strip():
            return cls.ALL
        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted or member.name.lower() == wanted:
                return member
        raise ValueError(f"Unknown category: {value}")


class RetrievalConfig(BaseModel):
    """Settings for the grounding model endpoint."""

    model_name: str = "gemini-2.5-flash"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "GEMINI_API_KEY"
    request_timeout: float = 60.0

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be > 0")
        return value

    @field_validator("model_name", "api_base")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("value cannot be empty")
        return value.strip()


class GeolocationConfig(BaseModel):
    """IP based location lookup used by ``--near-me``."""

    lookup_url: str = "https://ipapi.co/json/"
    timeout: float = 5.0

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value


class ExportConfig(BaseModel):
    """Projection and file naming used when exporting leads."""

    columns: list[str] = Field(default_factory=lambda: ["name", "phone"])
    format: Literal["csv", "json"] = "csv"
    filename_prefix: str = "map_leads"

    @field_validator("columns", mode="before")
    @classmethod
    def _coerce_columns(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            raise ValueError("columns expects a list of field names")
        columns = [str(item).strip().lower() for item in value if str(item).strip()]
        if not columns:
            raise ValueError("columns cannot be empty")
        return columns


class AppConfig(BaseModel):
    """Global controls shared by every search."""

    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    geolocation: GeolocationConfig = Field(default_factory=GeolocationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    outputs_dir: Path = Field(default=Path("data/outputs"))

    @field_validator("outputs_dir", mode="before")
    @classmethod
    def _coerce_dirs(cls, value: Any) -> Path:
        return Path(value)

    def resolved_outputs_dir(self, base_dir: Path) -> Path:
        """Return the export directory relative to the project home."""

        if not self.outputs_dir.is_absolute():
            return (base_dir / self.outputs_dir).resolve()
        return self.outputs_dir


__all__ = [
    "AppConfig",
    "Category",
    "ExportConfig",
    "GeolocationConfig",
    "RetrievalConfig",
]
