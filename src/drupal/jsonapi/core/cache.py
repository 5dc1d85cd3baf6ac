# drupal/jsonapi/core/cache.py
"""
Run-scoped resolution cache with request coalescing.

Values are stored per address and never evicted. While a fetch for an
address is running it is registered as in-flight; concurrent callers for
the same address await that single task instead of starting another one.
No lock is needed: the event loop never switches between the cache check
and the in-flight registration.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterator

from drupal.jsonapi.contracts.lookup import Address

logger = logging.getLogger(__name__)


class ResolverCache:
    """Address-keyed cache plus in-flight registry, owned by one resolver."""

    def __init__(self) -> None:
        self._values: dict[Address, Any] = {}
        self._pending: dict[Address, asyncio.Task[Any]] = {}

    def get(self, address: Address) -> Any | None:
        return self._values.get(address)

    def set(self, address: Address, value: Any) -> None:
        self._values[address] = value

    def has(self, address: Address) -> bool:
        return address in self._values

    def is_pending(self, address: Address) -> bool:
        return address in self._pending

    def was_traversed(self, address: Address) -> bool:
        """True when the address is cached or currently being fetched."""
        return address in self._values or address in self._pending

    async def fetch_or_join(
        self,
        address: Address,
        producer: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached value, join the in-flight fetch, or start one.

        The producer is invoked at most once concurrently per address. A
        failing producer leaves nothing in the cache; every joined caller
        sees the same exception.
        """
        if address in self._values:
            logger.debug("Cache hit: %s", address)
            return self._values[address]

        task = self._pending.get(address)
        if task is not None:
            logger.debug("Joining in-flight fetch: %s", address)
            return await task

        async def run() -> Any:
            try:
                value = await producer()
                self._values[address] = value
                return value
            finally:
                self._pending.pop(address, None)

        task = asyncio.ensure_future(run())
        self._pending[address] = task
        logger.debug("Fetching: %s", address)
        return await task

    def items(self) -> Iterator[tuple[Address, Any]]:
        return iter(list(self._values.items()))

    def __contains__(self, address: object) -> bool:
        return address in self._values

    def __len__(self) -> int:
        return len(self._values)
