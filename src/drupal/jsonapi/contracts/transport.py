# drupal/jsonapi/contracts/transport.py
"""
Transport contract.

The resolver never performs I/O itself. A transport receives an address
(a path relative to its own base) and returns the decoded JSON payload,
or raises ``TransportError`` carrying the response status (``None`` when
no response was received at all).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from drupal.jsonapi.contracts.lookup import Address


class Transport(ABC):
    """Fetches raw payloads by address. Must be idempotent."""

    @abstractmethod
    async def get(self, address: Address) -> Any: ...

    async def aclose(self) -> None:
        return None
