# tests/core/test_transport_http.py
from __future__ import annotations

import httpx
import pytest

from drupal.jsonapi.core.errors import TransportError
from drupal.jsonapi.core.transport.http import HttpxTransport

BASE_URL = "http://drupal.test"


def make_transport(handler) -> HttpxTransport:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpxTransport(base_url=BASE_URL, client=client)


@pytest.mark.asyncio
async def test_get_returns_decoded_body():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"data": {"type": "node--page", "id": "p1"}})

    transport = make_transport(handler)

    payload = await transport.get("/jsonapi/node/page/p1")

    assert payload == {"data": {"type": "node--page", "id": "p1"}}
    assert seen == ["http://drupal.test/jsonapi/node/page/p1"]


@pytest.mark.asyncio
async def test_slug_address_keeps_query_string():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    await make_transport(handler).get("/about?_format=json")

    assert seen[0].url.path == "/about"
    assert seen[0].url.params["_format"] == "json"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [403, 404, 500])
async def test_http_errors_carry_status(status):
    transport = make_transport(lambda request: httpx.Response(status, json={"errors": []}))

    with pytest.raises(TransportError) as exc_info:
        await transport.get("/jsonapi/node/page/p1")

    assert exc_info.value.status == status
    assert exc_info.value.address == "/jsonapi/node/page/p1"


@pytest.mark.asyncio
async def test_connection_error_has_no_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await make_transport(handler).get("/jsonapi/node/page/p1")

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_invalid_json_has_no_status():
    transport = make_transport(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(TransportError) as exc_info:
        await transport.get("/jsonapi/node/page/p1")

    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_injected_client_is_not_closed():
    client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    )
    transport = HttpxTransport(base_url=BASE_URL, client=client)

    await transport.aclose()

    assert client.is_closed is False
    await client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    transport = HttpxTransport(base_url=BASE_URL + "/")
    client = transport._get_client()

    assert str(client.base_url) == BASE_URL + "/"

    await transport.aclose()

    assert client.is_closed is True
