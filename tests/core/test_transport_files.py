# tests/core/test_transport_files.py
from __future__ import annotations

import asyncio

import pytest

from drupal.jsonapi.contracts.lookup import Lookup
from drupal.jsonapi.core.errors import TransportError
from drupal.jsonapi.core.options import ResolverOptions
from drupal.jsonapi.core.resolver import DrupalJsonApi
from drupal.jsonapi.core.transport.files import FileTransport
from tests.helpers.fakes import rel, resource

PAGE = "/_resources/node/page/p1.json"


@pytest.mark.asyncio
async def test_write_then_get(tmp_path):
    transport = FileTransport(root=tmp_path)
    payload = resource("node--page", "p1", {"title": "P"})

    path = transport.write(PAGE, payload)

    assert path == tmp_path.resolve() / "_resources" / "node" / "page" / "p1.json"
    assert await transport.get(PAGE) == payload


@pytest.mark.asyncio
async def test_file_access_runs_off_the_event_loop(tmp_path, monkeypatch):
    transport = FileTransport(root=tmp_path)
    transport.write(PAGE, resource("node--page", "p1"))
    offloaded = []
    to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return await to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)

    await transport.get(PAGE)

    assert offloaded == ["is_file", "read_text"]


@pytest.mark.asyncio
async def test_missing_file_is_404(tmp_path):
    with pytest.raises(TransportError) as exc_info:
        await FileTransport(root=tmp_path).get(PAGE)

    assert exc_info.value.status == 404


@pytest.mark.asyncio
async def test_undecodable_file_has_no_status(tmp_path):
    target = tmp_path / "_resources" / "node" / "page"
    target.mkdir(parents=True)
    (target / "p1.json").write_text("{not json")

    with pytest.raises(TransportError) as exc_info:
        await FileTransport(root=tmp_path).get(PAGE)

    assert exc_info.value.status is None


def test_address_outside_root_is_rejected(tmp_path):
    with pytest.raises(TransportError) as exc_info:
        FileTransport(root=tmp_path / "dist").path_for("/../secrets.json")

    assert exc_info.value.status == 403


@pytest.mark.asyncio
async def test_static_resolution(tmp_path):
    transport = FileTransport(root=tmp_path)
    transport.write(
        "/_resources/_slugs/about.json",
        {"type": [{"target_id": "page"}], "uuid": [{"value": "p1"}]},
    )
    transport.write(
        PAGE, resource("node--page", "p1", relationships={"field_image": rel("media--image", "m1")})
    )
    transport.write("/_resources/media/image/m1.json", resource("media--image", "m1"))
    api = DrupalJsonApi(transport, ResolverOptions(static=True))

    page = await api.slug("/about")

    assert page.uuid == "p1"
    assert page.value("image").uuid == "m1"
    assert api.is_cached(Lookup(entity_type="node", bundle="page", uuid="p1"))
