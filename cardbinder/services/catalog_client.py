"""
Catalog store HTTP client.

Async client for the catalog store API. Every transport or status failure
surfaces as CatalogClientError; callers never see raw httpx exceptions.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from cardbinder.config import settings
from cardbinder.models.card import CardRecord
from cardbinder.models.failure import CatalogClientError
from cardbinder.models.series import SeriesRecord

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    Client for the /cards and /series endpoints.

    Args:
        base_url: API root, e.g. "http://localhost:8000/api/v1".
            Defaults to settings.api_base_url.
        timeout: Per-request timeout in seconds. Defaults to
            settings.request_timeout.
        client: Optional preconfigured httpx client (its base_url is used
            as-is and it is not closed by this object).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "%s %s failed with status %d", method, path, e.response.status_code
            )
            raise CatalogClientError(
                f"Catalog store rejected {method} {path}",
                detail=e.response.text,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise CatalogClientError(
                f"Catalog store unreachable for {method} {path}",
                detail=str(e) or type(e).__name__,
            ) from e
        return response.json()

    async def get_cards(self) -> list[CardRecord]:
        """Fetch the whole catalog."""
        data = await self._request("GET", "/cards")
        return [CardRecord.from_dict(item) for item in data]

    async def search_cards(self, name: str) -> list[CardRecord]:
        """Fetch cards whose name contains `name` (case-insensitive)."""
        data = await self._request("POST", "/cards", {"name": name})
        return [CardRecord.from_dict(item) for item in data]

    async def adjust_card(self, number: str, delta: int | None = None) -> int:
        """
        Apply a signed delta to a card's owned count.

        A delta of None means +1. Returns the store's new count.
        """
        data = await self._request("PUT", "/cards", {"id": number, "number": delta})
        return int(data["in_collection"])

    async def get_series(self) -> list[SeriesRecord]:
        """Fetch all series."""
        data = await self._request("GET", "/series")
        return [SeriesRecord.from_dict(item) for item in data]
