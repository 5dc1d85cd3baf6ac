# drupal/jsonapi/core/strict.py
"""
Strict-mode controller.

During exhaustive generation runs a page rendered from partial data is
worse than no page at all. In strict mode an error resource whose id is
the ``missing`` placeholder (the shape every normalized transport failure
takes) is treated as possibly transient and re-fetched up to
``max_attempts`` times in total; any other error resource aborts at once.
Retries are awaited, so the caller only resumes once the whole chain has
finished.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from drupal.jsonapi.contracts.lookup import Address
from drupal.jsonapi.core.entity import MISSING_ID, Entity
from drupal.jsonapi.core.errors import UNKNOWN_STATUS, UNKNOWN_TITLE, StrictAbortError
from drupal.jsonapi.core.options import DEFAULT_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


class StrictModeController:
    """Wraps a single-attempt fetch with the strict retry policy."""

    def __init__(self, *, enabled: bool = False, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.enabled = enabled
        self.max_attempts = max_attempts

    async def run(
        self,
        address: Address,
        fetch_once: Callable[[Address], Awaitable[Any]],
    ) -> Any:
        if not self.enabled:
            return await fetch_once(address)

        attempt = 0
        while True:
            attempt += 1
            value = await fetch_once(address)
            if not (isinstance(value, Entity) and value.is_error):
                if attempt > 1:
                    logger.info("'%s' resolved after %d attempts", address, attempt)
                return value

            status = value.status or UNKNOWN_STATUS
            title = value.title or UNKNOWN_TITLE
            if value.uuid != MISSING_ID:
                logger.error("Strict generation aborted on '%s': %s %s", address, status, title)
                raise StrictAbortError(address, status, title, attempts=attempt)

            if attempt >= self.max_attempts:
                logger.error(
                    "Strict generation aborted on '%s' after %d attempts: %s %s",
                    address, attempt, status, title,
                )
                raise StrictAbortError(address, status, title, attempts=attempt)

            logger.warning(
                "Attempt %d/%d for '%s' returned %s %s, retrying",
                attempt, self.max_attempts, address, status, title,
            )
