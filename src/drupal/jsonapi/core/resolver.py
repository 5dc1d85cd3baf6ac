# drupal/jsonapi/core/resolver.py
"""
Resolver facade.

``DrupalJsonApi`` owns the run-scoped cache and wires the endpoint
resolver, strict-mode controller and traversal engine around one
transport. One instance per generation run (or per request); instances
must not share a cache.

Example::

    api = create_resolver()
    page = await api.slug("/about-us")
    if page.is_error:
        return page.page_error()
    hero = page.value("hero")
"""
from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from drupal.jsonapi.contracts.lookup import Address, Lookup
from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.contracts.values import RelationshipRef
from drupal.jsonapi.core.cache import ResolverCache
from drupal.jsonapi.core.config import Settings
from drupal.jsonapi.core.endpoint import EndpointResolver
from drupal.jsonapi.core.entity import SERIALIZED_KEY, Entity
from drupal.jsonapi.core.errors import (
    EntifyError,
    IncompleteLookupError,
    TransportError,
    is_error_document,
    normalize_transport_error,
)
from drupal.jsonapi.core.hooks import HookRegistry, default_hooks
from drupal.jsonapi.core.options import ResolverOptions, load_resolver_options
from drupal.jsonapi.core.strict import StrictModeController
from drupal.jsonapi.core.transport import create_transport
from drupal.jsonapi.core.traversal import RelationshipLoader

logger = logging.getLogger(__name__)


class DrupalJsonApi:
    """Resolves lookups into cached, relationship-expanded entities."""

    def __init__(
        self,
        transport: Transport,
        options: ResolverOptions | None = None,
        *,
        hooks: HookRegistry | None = None,
    ) -> None:
        self.transport = transport
        self.options = options or ResolverOptions()
        self.hooks = hooks or default_hooks()
        self.cache = ResolverCache()
        self.endpoints = EndpointResolver(
            fetch=self.fetch,
            alias_prefix=self.options.alias_prefix,
            static=self.options.static,
        )
        self.strict = StrictModeController(
            enabled=self.options.strict,
            max_attempts=self.options.max_attempts,
        )
        self.traversal = RelationshipLoader(self)

    async def __aenter__(self) -> DrupalJsonApi:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    # -- Fetching ------------------------------------------------------------

    def endpoint(self, lookup: Lookup) -> Address:
        return self.endpoints.resolve_address(lookup)

    async def fetch(self, address: Address) -> Any:
        """Cached, coalesced, strict-aware fetch of one address."""
        return await self.cache.fetch_or_join(
            address, lambda: self.strict.run(address, self._fetch_once)
        )

    async def _fetch_once(self, address: Address) -> Any:
        try:
            payload = await self.transport.get(address)
        except TransportError as exc:
            payload = normalize_transport_error(exc)
        if self.is_entity(payload):
            return Entity(self, payload)
        return payload

    @staticmethod
    def is_entity(payload: Any) -> bool:
        """True for payloads shaped like a JSON:API document."""
        if not isinstance(payload, dict):
            return False
        if is_error_document(payload):
            return True
        jsonapi = payload.get("jsonapi")
        if isinstance(jsonapi, dict) and jsonapi.get("version"):
            return True
        data = payload.get("data")
        return isinstance(data, list) or (isinstance(data, dict) and bool(data.get("type")))

    async def resolve(self, lookup: Lookup) -> Any:
        """Fetch a lookup without expanding relationships.

        Raises:
            IncompleteLookupError: The lookup can be completed neither
                directly nor through its slug.
        """
        lookup = self.endpoints.expand_identifier(lookup)
        if not self.endpoints.can_resolve_directly(lookup):
            if not lookup.slug:
                raise IncompleteLookupError(
                    "Requesting entities requires the entity type, bundle and uuid, "
                    "or a slug to resolve them from.",
                    lookup=lookup,
                )
            try:
                lookup = await self.endpoints.resolve_by_slug(lookup)
            except IncompleteLookupError as exc:
                if isinstance(exc.response, Entity) and exc.response.is_error:
                    return exc.response
                raise
        return await self.fetch(self.endpoint(lookup))

    async def get_entity(self, lookup: Lookup, depth: float = math.inf) -> Any:
        """Resolve a lookup and expand its relationships ``depth`` hops deep."""
        result = await self.resolve(lookup)
        if isinstance(result, Entity):
            await self.traversal.load_relationships(result, depth)
        return result

    async def get_relationship(self, ref: RelationshipRef) -> Any:
        lookup = ref.to_lookup()
        cached = self.get_cached(lookup)
        if cached is not None:
            return cached
        return await self.get_entity(lookup)

    # -- Convenience lookups ---------------------------------------------------

    async def node(self, identifier: str | int, depth: float = math.inf) -> Any:
        """Find a node by json:api uuid (with bundle) or by node id."""
        return await self.get_entity(Lookup(entity_type="node", identifier=identifier), depth)

    async def slug(self, slug: str, depth: float = math.inf) -> Any:
        """Find a node by its path alias."""
        return await self.get_entity(Lookup(entity_type="node", slug=slug), depth)

    alias = slug

    async def term(self, identifier: str | int, depth: float = math.inf) -> Any:
        return await self.get_entity(
            Lookup(entity_type="taxonomy_term", identifier=identifier), depth
        )

    async def file(self, identifier: str | int, depth: float = math.inf) -> Any:
        return await self.get_entity(Lookup(entity_type="file", identifier=identifier), depth)

    async def media(self, identifier: str | int, depth: float = math.inf) -> Any:
        return await self.get_entity(Lookup(entity_type="media", identifier=identifier), depth)

    async def paragraph(self, identifier: str | int, depth: float = math.inf) -> Any:
        return await self.get_entity(
            Lookup(entity_type="paragraph", identifier=identifier), depth
        )

    async def collection(self, entity_type: str, bundle: str) -> Any:
        """Every resource of a bundle, as one collection entity."""
        return await self.get_entity(
            Lookup(entity_type=entity_type, bundle=bundle, is_bundle_query=True)
        )

    # -- Cache -----------------------------------------------------------------

    def _key(self, key: Address | Lookup) -> Address:
        return self.endpoint(key) if isinstance(key, Lookup) else key

    def is_cached(self, key: Address | Lookup) -> bool:
        return self.cache.has(self._key(key))

    def get_cached(self, key: Address | Lookup) -> Any | None:
        return self.cache.get(self._key(key))

    def set_cache(self, key: Address, value: Any) -> DrupalJsonApi:
        self.cache.set(key, value)
        return self

    def has_been_traversed(self, lookup: Lookup) -> bool:
        return self.cache.was_traversed(self.endpoint(lookup))

    def cache_to_object(self) -> dict[Address, Any]:
        """The cache as plain, JSON-serializable payloads."""
        return {
            address: value.to_object() if isinstance(value, Entity) else value
            for address, value in self.cache.items()
        }

    def restore_cache(self, cache: dict[Address, Any]) -> None:
        """Merge a snapshot produced by ``cache_to_object`` into the cache."""
        for address, raw in cache.items():
            try:
                value = self.entify(raw)
            except EntifyError:
                value = raw
            self.cache.set(address, value)
        logger.debug("Restored %d cache entries", len(cache))

    def save_snapshot(self, path: str | Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self.cache_to_object(), indent=2), encoding="utf-8")
        logger.info("Wrote cache snapshot with %d entries to %s", len(self.cache), target)
        return target

    def load_snapshot(self, path: str | Path) -> None:
        self.restore_cache(json.loads(Path(path).read_text(encoding="utf-8")))

    # -- Re-constitution -------------------------------------------------------

    def entify(self, data: Any) -> Entity:
        """Re-constitute an entity from serialized or raw data.

        Raises:
            EntifyError: ``data`` is not a recognizable resource.
        """
        if isinstance(data, Entity):
            return data
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError as exc:
                raise EntifyError("Unable to decode entity JSON") from exc
        if isinstance(data, dict) and isinstance(data.get(SERIALIZED_KEY), dict):
            wrapper = data[SERIALIZED_KEY]
            if not isinstance(wrapper.get("res"), dict):
                raise EntifyError("Serialized entity has no resource payload")
            if isinstance(wrapper.get("cache"), dict):
                self.restore_cache(wrapper["cache"])
            return Entity(self, wrapper["res"])
        if self.is_entity(data):
            return Entity(self, data)
        raise EntifyError("Unable to create an entity from the given data")

    to_entity = entify


def create_resolver(
    settings: Settings | None = None,
    *,
    transport: Transport | None = None,
    options: ResolverOptions | None = None,
) -> DrupalJsonApi:
    """Build a resolver from settings and the hooks YAML files."""
    settings = settings or Settings()
    if options is None:
        options = load_resolver_options(settings.hooks_config_paths, settings=settings)
    return DrupalJsonApi(transport or create_transport(settings), options)
