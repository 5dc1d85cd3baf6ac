# drupal/jsonapi/core/transport/http.py
"""
Async HTTP transport for a live Drupal site.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from drupal.jsonapi.contracts.lookup import Address
from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.core.errors import TransportError

logger = logging.getLogger(__name__)

JSONAPI_HEADERS = {"Accept": "application/vnd.api+json, application/json"}


class HttpxTransport(Transport):
    """Fetches addresses relative to the site base URL.

    Contract::

        GET <base_url><address>
        200 -> decoded JSON body
        4xx/5xx -> TransportError(status)
        no response / undecodable body -> TransportError(status=None)
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base,
                timeout=self._timeout,
                headers=JSONAPI_HEADERS,
                follow_redirects=True,
            )
        return self._client

    async def get(self, address: Address) -> Any:
        client = self._get_client()
        try:
            resp = await client.get(address)
            resp.raise_for_status()
        except httpx.HTTPStatusError as ex:
            logger.warning(
                "Request failed address=%s status=%s", address, ex.response.status_code
            )
            raise TransportError(address, ex.response.status_code) from ex
        except httpx.RequestError as ex:
            logger.warning("Request failed address=%s: %s", address, ex)
            raise TransportError(address, None, str(ex)) from ex

        try:
            return resp.json()
        except ValueError as ex:
            raise TransportError(address, None, "response is not JSON") from ex

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
