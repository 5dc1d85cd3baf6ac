# drupal/jsonapi/core/traversal.py
"""
Relationship traversal engine.

Expands an entity's relationship fields into resolved entities, hop by
hop, as a task graph: every reference gets one resolution task and a node
completes only once all of its child tasks have settled. Fetches are
shared through the resolver cache, so concurrent walks over the same
graph never fetch an address twice, but every walk follows the graph
itself and only returns once everything within its own depth is attached.

Each walk records the largest remaining depth it has expanded per
address. A node is expanded again only when reached with a larger budget,
which ends cycles and makes the result independent of fetch order.
"""
from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING, Any

from drupal.jsonapi.contracts.lookup import Address, Lookup
from drupal.jsonapi.contracts.values import Collection, RelationshipRef, ScalarValue, classify_value
from drupal.jsonapi.core.entity import Entity

if TYPE_CHECKING:
    from drupal.jsonapi.core.resolver import DrupalJsonApi

logger = logging.getLogger(__name__)


class RelationshipLoader:
    """Loads relationship targets for entities of one resolver."""

    def __init__(self, api: DrupalJsonApi) -> None:
        self.api = api

    async def load_relationships(self, entity: Entity, depth: float = math.inf) -> None:
        """Resolve and attach every relationship target up to ``depth`` hops.

        ``depth`` counts hops from ``entity``: with depth ``k`` the targets
        ``k`` hops away are fetched and attached, but their own
        relationships stay unresolved.
        """
        if depth <= 0 or entity.is_collection() or not entity.uuid:
            return
        address = self.api.endpoint(Lookup.from_type(entity.type, entity.uuid))
        await self._expand(entity, address, depth, {})

    def collect_references(self, entity: Entity) -> dict[Address, RelationshipRef]:
        """Every distinct relationship reference across all groups."""
        references: dict[Address, RelationshipRef] = {}
        if not isinstance(entity.data, dict):
            return references
        for group in entity.relationship_groups:
            members = entity.data.get(group) or {}
            for name in entity.relationship_field_names(group):
                self._collect(members[name], references)
        return references

    def _collect(self, raw: Any, references: dict[Address, RelationshipRef]) -> None:
        tagged = classify_value(raw)
        if isinstance(tagged, RelationshipRef):
            address = self.api.endpoint(tagged.to_lookup())
            references.setdefault(address, tagged)
        elif isinstance(tagged, Collection):
            for item in tagged.items:
                self._collect(item, references)
        elif isinstance(tagged, ScalarValue) and isinstance(tagged.value, dict):
            for item in tagged.value.values():
                self._collect(item, references)

    async def _expand(
        self,
        entity: Entity,
        address: Address,
        depth: float,
        expanded: dict[Address, float],
    ) -> None:
        if depth <= 0 or expanded.get(address, -1) >= depth:
            return
        # Claimed before awaiting so that siblings reaching the same node
        # within this walk do not expand it twice.
        expanded[address] = depth

        references = self.collect_references(entity)
        if not references:
            return

        logger.debug(
            "Loading %d relationship(s) of %r (depth=%s)", len(references), entity, depth
        )
        await asyncio.gather(
            *(
                self._resolve_child(entity, child, ref, depth - 1, expanded)
                for child, ref in references.items()
            )
        )

    async def _resolve_child(
        self,
        parent: Entity,
        address: Address,
        ref: RelationshipRef,
        depth: float,
        expanded: dict[Address, float],
    ) -> None:
        target = await self.api.fetch(address)

        if not isinstance(target, Entity):
            logger.warning("Relationship %s on %r did not resolve to an entity", ref.type, parent)
            return

        parent.attach(address, target)
        if not target.is_error:
            await self._expand(target, address, depth, expanded)
