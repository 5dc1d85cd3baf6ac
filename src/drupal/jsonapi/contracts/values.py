# drupal/jsonapi/contracts/values.py
"""
Tagged field values.

Raw JSON:API field content is classified once, at the parsing boundary,
into one of three shapes. Everything downstream (value resolution,
relationship discovery) dispatches on the tag instead of probing dicts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from drupal.jsonapi.contracts.lookup import Lookup

TYPE_SEPARATOR = "--"


@dataclass(frozen=True)
class RelationshipRef:
    """Reference to another resource (``{"type": "node--page", "id": ...}``)."""

    entity_type: str
    bundle: str
    uuid: str
    meta: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def type(self) -> str:
        return f"{self.entity_type}{TYPE_SEPARATOR}{self.bundle}"

    def to_lookup(self) -> Lookup:
        return Lookup(entity_type=self.entity_type, bundle=self.bundle, uuid=self.uuid)


@dataclass(frozen=True)
class ScalarValue:
    """Any non-relationship, non-sequence value (strings, numbers, plain mappings)."""

    value: Any


@dataclass(frozen=True)
class Collection:
    """An ordered sequence of raw items."""

    items: tuple[Any, ...]


FieldValue = Union[RelationshipRef, ScalarValue, Collection]


def is_relationship(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    resource_type = raw.get("type")
    return (
        isinstance(resource_type, str)
        and bool(raw.get("id"))
        and resource_type.find(TYPE_SEPARATOR) > 1
    )


def classify_value(raw: Any) -> FieldValue:
    """Classify a raw field value into its tagged shape."""
    if isinstance(raw, (list, tuple)):
        return Collection(items=tuple(raw))
    if is_relationship(raw):
        entity_type, _, bundle = raw["type"].partition(TYPE_SEPARATOR)
        return RelationshipRef(
            entity_type=entity_type,
            bundle=bundle,
            uuid=str(raw["id"]),
            meta=dict(raw.get("meta") or {}),
        )
    return ScalarValue(value=raw)
