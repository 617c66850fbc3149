"""
Ownership synchronization.

Applies ownership deltas optimistically to the local catalog view, then
confirms them with the catalog store. A failed request restores the local
count before the error reaches the caller.

Adjustments to one card are serialized by a per-card lock, taken before
the optimistic change, so each card's requests are sent and settled in
the order they were issued. Adjustments to different cards run freely in
parallel.
"""

import asyncio
import logging

from cardbinder.models.failure import CatalogClientError, FailureKind, OwnershipSyncError
from cardbinder.services.catalog_client import CatalogClient
from cardbinder.services.catalog_view import CatalogViewModel

logger = logging.getLogger(__name__)


class OwnershipSync:
    """Optimistic owned-count updates against the catalog store."""

    def __init__(self, view: CatalogViewModel, client: CatalogClient) -> None:
        self._view = view
        self._client = client
        # card number -> (lock, adjustments holding or awaiting it)
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    def _acquire_slot(self, number: str) -> asyncio.Lock:
        lock, users = self._locks.get(number, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[number] = (lock, users + 1)
        return lock

    def _release_slot(self, number: str) -> None:
        lock, users = self._locks[number]
        if users == 1:
            del self._locks[number]
        else:
            self._locks[number] = (lock, users - 1)

    async def adjust(self, card_number: str, delta: int | None = None) -> int:
        """
        Change a card's owned count by delta (None means +1).

        Returns:
            The store's count after the change.

        Raises:
            UnknownCardError: If the card is not in the local view
            OwnershipSyncError: If the change would go below zero (nothing
                is sent) or the store request failed (the local count has
                been restored)
        """
        if delta is None:
            delta = 1

        lock = self._acquire_slot(card_number)
        try:
            async with lock:
                return await self._adjust_locked(card_number, delta)
        finally:
            self._release_slot(card_number)

    async def _adjust_locked(self, card_number: str, delta: int) -> int:
        card = self._view.get_card(card_number)
        previous = card.in_collection
        if previous + delta < 0:
            raise OwnershipSyncError(
                card_number,
                delta,
                f"Card '{card_number}' cannot go below zero copies.",
                kind=FailureKind.CONSTRAINT_VIOLATION,
                detail=f"current={previous} delta={delta}",
            )

        expected = card.in_collection = previous + delta
        try:
            new_count = await self._client.adjust_card(card_number, delta)
        except CatalogClientError as e:
            # Restore the record that took the optimistic change. A refresh
            # meanwhile put a new record in the cache holding the store's count.
            card.in_collection = previous
            logger.warning(
                "Adjusting %s by %+d failed, restored count %d: %s",
                card_number,
                delta,
                previous,
                e.message,
            )
            kind = (
                FailureKind.CONSTRAINT_VIOLATION
                if e.status_code == 409
                else FailureKind.EXTERNAL_API_ERROR
            )
            raise OwnershipSyncError(
                card_number, delta, e.message, kind=kind, detail=e.detail
            ) from e

        if new_count != expected:
            logger.info(
                "Store reports %d copies of %s, local count is %d",
                new_count,
                card_number,
                expected,
            )
        return new_count

    async def increment(self, card_number: str) -> int:
        return await self.adjust(card_number, 1)

    async def decrement(self, card_number: str) -> int:
        return await self.adjust(card_number, -1)
