# drupal/jsonapi/contracts/lookup.py
"""
Lookup contracts.

A lookup is a possibly-partial address for a remote resource. Only a
complete lookup (entity type, bundle and either a uuid or a bundle query)
can be turned into an address and fetched; anything else must first be
completed through slug resolution.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

Address = str


@dataclass(frozen=True)
class Lookup:
    """Partial or complete address of a resource.

    Attributes:
        entity_type: Entity type, e.g. ``node`` or ``taxonomy_term``.
        bundle: Bundle of the entity type, e.g. ``article``.
        uuid: JSON:API resource id.
        slug: Human path alias such as ``/about-us``.
        identifier: Numeric id or uuid known before resolution.
        is_bundle_query: Request the whole bundle collection instead of
            one item.
    """

    entity_type: str | None = None
    bundle: str | None = None
    uuid: str | None = None
    slug: str | None = None
    identifier: str | int | None = None
    is_bundle_query: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(
            self.entity_type
            and self.bundle
            and (self.uuid or self.is_bundle_query)
        )

    def completed(self, *, entity_type: str, bundle: str, uuid: str) -> Lookup:
        """Return a copy carrying a full identity."""
        return replace(self, entity_type=entity_type, bundle=bundle, uuid=uuid)

    @classmethod
    def from_type(cls, resource_type: str, uuid: str) -> Lookup:
        """Build a lookup from a JSON:API ``entity--bundle`` type string."""
        entity_type, _, bundle = resource_type.partition("--")
        return cls(entity_type=entity_type, bundle=bundle, uuid=uuid)
