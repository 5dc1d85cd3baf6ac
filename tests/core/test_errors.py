# tests/core/test_errors.py
from __future__ import annotations

import pytest

from drupal.jsonapi.contracts.lookup import Lookup
from drupal.jsonapi.core.errors import (
    NotAuthorized,
    NotFound,
    TransportError,
    UnknownError,
    is_error_document,
    normalize_transport_error,
)
from tests.helpers.fakes import FakeTransport, address

ADDR = address("node--page", "p1")
LOOKUP = Lookup(entity_type="node", bundle="page", uuid="p1")


class TestNormalizeTransportError:
    @pytest.mark.parametrize(
        "status, expected_status, title",
        [
            (404, "404", "Not Found"),
            (403, "403", "Not Authorized"),
            (500, "520", "Unknown Error"),
            (None, "520", "Unknown Error"),
        ],
    )
    def test_classification(self, status, expected_status, title):
        doc = normalize_transport_error(TransportError("/x", status))

        assert doc["errors"] == [{"title": title, "status": expected_status}]
        assert is_error_document(doc)

    def test_factories(self):
        assert NotAuthorized()["errors"][0]["status"] == "403"
        assert NotFound()["errors"][0]["title"] == "Not Found"
        assert UnknownError()["errors"][0] == {"title": "Unknown Error", "status": "520"}

    def test_is_error_document(self):
        assert not is_error_document({"errors": [], "data": None})
        assert not is_error_document({"errors": [{"status": "1"}], "data": {"type": "x"}})
        assert not is_error_document(["errors"])


class TestErrorEntities:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure, bundle, title",
        [
            (TransportError(ADDR, 404), "404", "Not Found"),
            (TransportError(ADDR, 403), "403", "Not Authorized"),
            (TransportError(ADDR, None, "connection refused"), "520", "Unknown Error"),
        ],
    )
    async def test_transport_failures_become_error_entities(self, api, transport, failure, bundle, title):
        transport.routes[ADDR] = failure

        entity = await api.get_entity(LOOKUP)

        assert entity.is_error
        assert entity.bundle == bundle
        assert entity.title == title
        assert entity.uuid == "missing"

    @pytest.mark.asyncio
    async def test_error_document_with_ok_status(self, api, transport):
        transport.routes[ADDR] = {"errors": [{"status": "403", "title": "Not Authorized"}]}

        entity = await api.get_entity(LOOKUP)

        assert entity.is_error
        assert entity.page_error() == {"status_code": "403", "message": "Not Authorized"}

    @pytest.mark.asyncio
    async def test_error_entities_are_cached(self, api, transport):
        transport.routes[ADDR] = TransportError(ADDR, 404)

        first = await api.get_entity(LOOKUP)
        second = await api.get_entity(LOOKUP)

        assert first is second
        assert transport.count(ADDR) == 1
