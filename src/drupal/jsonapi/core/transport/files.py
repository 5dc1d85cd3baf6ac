# drupal/jsonapi/core/transport/files.py
"""
Filesystem transport for statically exported resources.

Addresses map onto paths under ``root`` (``/_resources/node/page/<uuid>.json``
-> ``<root>/_resources/node/page/<uuid>.json``).
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from drupal.jsonapi.contracts.lookup import Address
from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.core.errors import TransportError

logger = logging.getLogger(__name__)


class FileTransport(Transport):
    def __init__(self, *, root: str | Path) -> None:
        self._root = Path(root).resolve()

    def path_for(self, address: Address) -> Path:
        path = (self._root / address.split("?", 1)[0].lstrip("/")).resolve()
        if self._root not in path.parents:
            raise TransportError(address, 403, "address escapes the resources root")
        return path

    async def get(self, address: Address) -> Any:
        path = self.path_for(address)
        if not await asyncio.to_thread(path.is_file):
            logger.debug("No exported resource at %s", path)
            raise TransportError(address, 404)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(text)
        except (OSError, ValueError) as ex:
            logger.warning("Failed to read exported resource %s: %s", path, ex)
            raise TransportError(address, None, str(ex)) from ex

    def write(self, address: Address, payload: Any) -> Path:
        """Export a payload so that ``get(address)`` returns it."""
        path = self.path_for(address)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path
