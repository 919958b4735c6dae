"""Client for the external AI content-safety service.

The service is a black box that answers ``{"isSafe": bool, "reason": str}``
for a piece of text. The client fails closed: if the service is not
configured, unreachable, or answers with something unexpected, the content
is treated as unsafe.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from dossier_moderation.core.settings import settings

logger = logging.getLogger(__name__)

AUDIENCE_MEMBER = "member"
AUDIENCE_GUEST = "guest"


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of a safety check."""

    is_safe: bool
    reason: str | None = None


class ContentSafetyChecker(Protocol):
    """Anything that can screen text before it is persisted."""

    async def check(self, content: str) -> SafetyVerdict: ...

    async def check_for_guest(self, content: str) -> SafetyVerdict: ...


@dataclass(frozen=True)
class SafetyConfig:
    """Immutable configuration for the safety service."""

    url: str | None
    api_key: str | None
    timeout_seconds: float


def load_safety_config() -> SafetyConfig:
    """Build configuration object from global settings."""
    return SafetyConfig(
        url=settings.safety_service_url,
        api_key=settings.safety_service_api_key,
        timeout_seconds=float(settings.safety_service_timeout_seconds),
    )


class HttpContentSafetyClient:
    """HTTP client wrapper for the content-safety service."""

    def __init__(
        self,
        config: SafetyConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_safety_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.config.url)

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                headers = {}
                if self.config.api_key:
                    headers["Authorization"] = f"Bearer {self.config.api_key}"
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    headers=headers,
                    transport=self._transport,
                )
        return self._client

    async def check(self, content: str) -> SafetyVerdict:
        """Screen content written by a signed-in member."""
        return await self._check(content, AUDIENCE_MEMBER)

    async def check_for_guest(self, content: str) -> SafetyVerdict:
        """Screen content written by a guest."""
        return await self._check(content, AUDIENCE_GUEST)

    async def _check(self, content: str, audience: str) -> SafetyVerdict:
        if not self.configured:
            logger.error("Safety service URL not set - blocking content")
            return SafetyVerdict(
                False, "Moderation system not configured - content blocked for safety"
            )

        client = await self._ensure_client()
        try:
            response = await client.post(
                self.config.url or "",
                json={"content": content, "audience": audience},
            )
        except httpx.HTTPError as exc:
            logger.error("Safety service request failed: %s", exc)
            return SafetyVerdict(False, "Moderation API error - content blocked for safety")

        if response.is_error:
            logger.error("Safety service responded with %s", response.status_code)
            return SafetyVerdict(
                False, "Moderation API did not respond - content blocked for safety"
            )

        try:
            payload = response.json()
        except ValueError:
            logger.error("Safety service returned a non-JSON body")
            return SafetyVerdict(
                False, "Failed to parse moderation response - content blocked for safety"
            )

        is_safe = payload.get("isSafe") if isinstance(payload, dict) else None
        if not isinstance(is_safe, bool):
            logger.error("Invalid safety response format: %r", payload)
            return SafetyVerdict(
                False, "Invalid moderation response - content blocked for safety"
            )

        reason = payload.get("reason")
        return SafetyVerdict(is_safe, str(reason) if reason else None)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


_client: HttpContentSafetyClient | None = None


def get_safety_client() -> HttpContentSafetyClient:
    """Return the process-wide safety client."""
    global _client
    if _client is None:
        _client = HttpContentSafetyClient()
    return _client
