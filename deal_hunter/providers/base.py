"""
Deal Hunter — Provider Adapter interface

Every LLM vendor sits behind the same capability: send a prompt, get raw
text back. Vendors differ only in request shape, model id and (for one of
them) web search. Adapters never fall back or retry; the orchestrator owns
that policy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from deal_hunter.config import ProviderName, settings
from deal_hunter.errors import MalformedResponse, ProviderCallFailure

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a shopping assistant that finds Black Friday deals. "
    "You always answer with a raw JSON array and nothing else."
)


class ProviderAdapter(ABC):
    """Abstract base for all provider adapters."""

    name: ProviderName

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS

    @property
    def model(self) -> str:
        return self._model

    @abstractmethod
    async def call(self, prompt: str) -> str:
        """
        Send a prompt to the vendor and return the raw response text.

        Raises:
            ProviderCallFailure: Network, auth or rate-limit errors.
            MalformedResponse: The vendor envelope had no text content.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} model={self._model!r}>"


class HTTPProviderAdapter(ProviderAdapter):
    """Adapter base for vendors called directly over HTTPS with httpx."""

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.warning(
                "provider_http_error",
                provider=self.name.value,
                status_code=e.response.status_code,
            )
            raise ProviderCallFailure(
                f"{self.name.value} returned HTTP {e.response.status_code}"
            ) from e

        except httpx.HTTPError as e:
            logger.warning(
                "provider_request_error",
                provider=self.name.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderCallFailure(f"{self.name.value} request failed: {e}") from e

        except ValueError as e:
            raise MalformedResponse(f"{self.name.value} returned a non-JSON body") from e
