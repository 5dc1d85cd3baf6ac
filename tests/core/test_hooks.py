# tests/core/test_hooks.py
from __future__ import annotations

import pytest

from drupal.jsonapi.contracts.values import RelationshipRef
from drupal.jsonapi.core.entity import Entity
from drupal.jsonapi.core.hooks import LIBRARY_PARAGRAPH_TYPE, HookRegistry, default_hooks
from tests.helpers.fakes import rel, resource


class TestHookRegistry:
    def test_register_and_get(self):
        registry = HookRegistry()
        hook = lambda entity: entity.uuid  # noqa: E731

        registry.register("media--image", hook)

        assert registry.has("media--image")
        assert registry.get("media--image") is hook
        assert registry.list() == ["media--image"]
        assert len(registry) == 1

    def test_register_duplicate_raises(self):
        registry = HookRegistry()
        registry.register("media--image", lambda e: e)

        with pytest.raises(ValueError, match="already registered"):
            registry.register("media--image", lambda e: e)

    def test_get_missing_raises(self):
        with pytest.raises(KeyError, match="not found"):
            HookRegistry().get("media--image")

    def test_default_hooks(self):
        assert default_hooks().list() == [LIBRARY_PARAGRAPH_TYPE]


class TestApply:
    def test_apply_by_reference_type(self, api):
        api.hooks.register("media--image", lambda entity: entity.value("alt"))
        target = Entity(api, resource("media--image", "m1", {"field_alt": "A cat"}))
        ref = RelationshipRef(entity_type="media", bundle="image", uuid="m1")

        assert api.hooks.apply(ref, target) == "A cat"

    def test_apply_without_hook_returns_target(self, api):
        target = Entity(api, resource("media--image", "m1"))
        ref = RelationshipRef(entity_type="media", bundle="image", uuid="m1")

        assert api.hooks.apply(ref, target) is target

    def test_custom_hook_through_field_access(self, api):
        api.hooks.register("media--image", lambda entity: entity.uuid)
        api.set_cache("/jsonapi/media/image/m1", Entity(api, resource("media--image", "m1")))
        page = Entity(api, resource("node--page", "p1", relationships={"field_image": rel("media--image", "m1")}))

        assert page.value("image") == "m1"
