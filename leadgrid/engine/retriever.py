"""Grounded retrieval against the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

import httpx
import structlog

from ..config import Category, RetrievalConfig
from ..errors import ConfigurationError, RetrievalFailure
from .geolocation import GeoLocation
from .prompt import SYSTEM_INSTRUCTION, build_prompt


class Retriever(Protocol):
    """Anything able to answer a listing query with raw (table-ish) text."""

    async def retrieve(
        self,
        query: str,
        category: Category | None,
        location: GeoLocation | None,
        exclude_names: Sequence[str],
    ) -> str: ...


@dataclass(slots=True)
class RetrievalRequest:
    """Fully rendered request for one grounding call."""

    prompt: str
    location: GeoLocation | None = None
    system_instruction: str = SYSTEM_INSTRUCTION
    tools: list[dict[str, Any]] = field(default_factory=lambda: [{"googleMaps": {}}])

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": self.prompt}]}],
            "tools": self.tools,
        }
        if self.location is not None:
            payload["toolConfig"] = {
                "retrievalConfig": {
                    "latLng": {
                        "latitude": self.location.latitude,
                        "longitude": self.location.longitude,
                    }
                }
            }
        return payload


class GeminiRetriever:
    """Call the grounding model and hand back its text verbatim.

    The API key is injected by the caller; it is never looked up here.
    """

    def __init__(
        self,
        settings: RetrievalConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.api_key = api_key
        self._transport = transport
        self.logger = logger or structlog.get_logger("leadgrid.retriever")

    @property
    def endpoint(self) -> str:
        base = self.settings.api_base.rstrip("/")
        return f"{base}/models/{self.settings.model_name}:generateContent"

    def build_request(
        self,
        query: str,
        category: Category | None,
        location: GeoLocation | None,
        exclude_names: Sequence[str],
    ) -> RetrievalRequest:
        return RetrievalRequest(
            prompt=build_prompt(query, category, exclude_names),
            location=location,
        )

    async def retrieve(
        self,
        query: str,
        category: Category | None,
        location: GeoLocation | None,
        exclude_names: Sequence[str],
    ) -> str:
        if not self.api_key:
            raise ConfigurationError(
                f"API key is missing. Please set the {self.settings.api_key_env} environment variable."
            )
        request = self.build_request(query, category, location, exclude_names)
        self.logger.debug(
            "retrieval_request",
            model=self.settings.model_name,
            excluded=len(exclude_names),
            has_location=location is not None,
        )
        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    json=request.to_payload(),
                    headers={"x-goog-api-key": self.api_key},
                )
            except httpx.HTTPError as exc:
                self.logger.error("retrieval_transport_error", error=str(exc))
                raise RetrievalFailure(f"Request to grounding service failed: {exc}") from exc

        if self._is_failure(response):
            message = self._error_message(response)
            self.logger.error(
                "retrieval_http_error", status=response.status_code, error=message
            )
            raise RetrievalFailure(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise RetrievalFailure("Grounding service returned invalid JSON") from exc
        return self.extract_text(payload)

    @staticmethod
    def extract_text(payload: Any) -> str:
        """Concatenate the text parts of the first candidate."""

        if not isinstance(payload, dict):
            raise RetrievalFailure("Grounding service returned an unexpected payload")
        candidates = payload.get("candidates") or []
        if not candidates:
            feedback = payload.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise RetrievalFailure(f"Request was blocked by the model: {reason}")
            return ""
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        text = response.text.strip()
        return text or f"Unexpected status {response.status_code}"

    @staticmethod
    def _is_failure(response: httpx.Response) -> bool:
        return response.status_code >= 400


__all__ = ["GeminiRetriever", "RetrievalRequest", "Retriever"]
