# drupal/jsonapi/core/endpoint.py
"""
Endpoint resolution.

Turns lookups into canonical addresses, the only key used for caching and
de-duplication. Lookups that only carry a human path (or a numeric id)
are completed by asking Drupal's REST layer who lives at that path.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable

from drupal.jsonapi.contracts.lookup import Address, Lookup
from drupal.jsonapi.core.entity import Entity
from drupal.jsonapi.core.errors import IncompleteLookupError

logger = logging.getLogger(__name__)

DEFAULT_ENTITY_TYPE = "node"

# Paths that address an entity directly and must never receive the alias prefix.
DIRECT_PATH_PATTERN = re.compile(r"^/(node|taxonomy/term|media|user)/\d+$")

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

# entity type -> canonical path prefix for numeric ids
CANONICAL_PATHS: dict[str, str] = {
    "node": "/node",
    "taxonomy_term": "/taxonomy/term",
    "media": "/media",
    "user": "/user",
}


def trim_slug(path: str) -> str:
    """Ensure exactly one leading slash and no trailing slash."""
    path = path.strip()
    path = "/" + path.lstrip("/")
    if len(path) > 1:
        path = path.rstrip("/")
    return path


class EndpointResolver:
    """Maps lookups to addresses and completes slug lookups."""

    def __init__(
        self,
        *,
        fetch: Callable[[Address], Awaitable[Any]],
        alias_prefix: str = "",
        static: bool = False,
    ) -> None:
        self._fetch = fetch
        self._alias_prefix = trim_slug(alias_prefix) if alias_prefix.strip("/ ") else ""
        self._static = static

    @property
    def static(self) -> bool:
        return self._static

    def can_resolve_directly(self, lookup: Lookup) -> bool:
        return lookup.is_complete

    def resolve_address(self, lookup: Lookup) -> Address:
        """Canonical address of a complete lookup."""
        if not lookup.is_complete:
            raise IncompleteLookupError(
                "Requesting entities requires the entity type, bundle and uuid "
                "(or a bundle query).",
                lookup=lookup,
            )
        parts = [lookup.entity_type, lookup.bundle]
        if not lookup.is_bundle_query:
            parts.append(lookup.uuid)
        if self._static:
            return "/_resources/" + "/".join(parts) + ".json"
        return "/jsonapi/" + "/".join(parts)

    def normalize_slug(self, slug: str) -> str:
        path = trim_slug(slug)
        if not self._alias_prefix or DIRECT_PATH_PATTERN.match(path):
            return path
        if path == self._alias_prefix or path.startswith(self._alias_prefix + "/"):
            return path
        return trim_slug(self._alias_prefix + path)

    def slug_address(self, slug: str) -> Address:
        path = self.normalize_slug(slug)
        if self._static:
            return f"/_resources/_slugs{path}.json"
        return f"{path}?_format=json"

    def expand_identifier(self, lookup: Lookup) -> Lookup:
        """Turn a pre-resolution identifier into a uuid or slug lookup."""
        identifier = lookup.identifier
        if identifier is None or lookup.uuid or lookup.slug:
            return lookup
        text = str(identifier).strip()
        if UUID_PATTERN.match(text) and lookup.entity_type and lookup.bundle:
            return Lookup(
                entity_type=lookup.entity_type,
                bundle=lookup.bundle,
                uuid=text,
            )
        prefix = CANONICAL_PATHS.get(lookup.entity_type or "")
        if text.isdigit() and prefix:
            return Lookup(
                entity_type=lookup.entity_type,
                bundle=lookup.bundle,
                slug=f"{prefix}/{text}",
            )
        raise IncompleteLookupError(
            f"Cannot resolve identifier '{text}' for entity type "
            f"'{lookup.entity_type}' without a bundle.",
            lookup=lookup,
        )

    async def resolve_by_slug(self, lookup: Lookup) -> Lookup:
        """Complete a slug lookup by fetching what lives at that path."""
        if not lookup.slug:
            raise IncompleteLookupError("Lookup has neither identity nor slug.", lookup=lookup)

        address = self.slug_address(lookup.slug)
        response = await self._fetch(address)

        if isinstance(response, Entity):
            if response.is_error:
                raise IncompleteLookupError(
                    f"Slug '{lookup.slug}' could not be resolved: {response.title}",
                    lookup=lookup,
                    response=response,
                )
            response = response.to_object()

        bundle = _first(response, "type", "target_id")
        uuid = _first(response, "uuid", "value")
        entity_type = lookup.entity_type or DEFAULT_ENTITY_TYPE
        if not (bundle and uuid):
            raise IncompleteLookupError(
                f"Response for slug '{lookup.slug}' did not include a bundle and uuid.",
                lookup=lookup,
                response=response,
            )
        logger.debug("Slug '%s' resolved to %s--%s %s", lookup.slug, entity_type, bundle, uuid)
        return lookup.completed(entity_type=entity_type, bundle=bundle, uuid=uuid)


def _first(payload: Any, key: str, attr: str) -> Any:
    """Read ``payload[key][0][attr]`` from a Drupal REST response."""
    if not isinstance(payload, dict):
        return None
    items = payload.get(key)
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get(attr)
    return None
