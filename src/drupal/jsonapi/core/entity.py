# drupal/jsonapi/core/entity.py
"""
Entity projection model.

An ``Entity`` wraps one JSON:API document and exposes its attributes and
relationship fields by logical name. Payloads are cleaned on construction
(envelope metadata and non-allow-listed fields dropped) and error
documents are given a placeholder ``data`` block so that failures can be
consumed like any other resource.

Relationship values are dereferenced through the owning resolver's cache
and through the entities attached by the traversal engine. The entity
never owns the cache.
"""
from __future__ import annotations

import copy
import json
import logging
import re
from typing import TYPE_CHECKING, Any

from drupal.jsonapi.contracts.lookup import Address
from drupal.jsonapi.contracts.values import RelationshipRef, classify_value
from drupal.jsonapi.core.errors import UNKNOWN_STATUS, UNKNOWN_TITLE, is_error_document
from drupal.jsonapi.core.options import EntityOptions

if TYPE_CHECKING:
    from drupal.jsonapi.core.resolver import DrupalJsonApi

logger = logging.getLogger(__name__)

SERIALIZED_KEY = "__serialized__"
MISSING_ID = "missing"
INTERNAL_ID_PATTERN = re.compile(r"^drupal_internal__[a-z]?id$")

FieldPath = tuple[str, ...]


class Entity:
    """Field-accessible projection of a JSON:API resource or collection."""

    def __init__(
        self,
        api: DrupalJsonApi,
        payload: dict[str, Any],
        options: EntityOptions | None = None,
    ) -> None:
        self.api = api
        self.config = options or api.options.entity
        if is_error_document(payload):
            payload = shape_error(payload)
        self.res: dict[str, Any] = (
            self.transform(copy.deepcopy(payload)) if self.config.transform else payload
        )
        self.data: dict[str, Any] | list[Any] = get_data(self.res)
        self.attrs: dict[str, Any] = (
            self.data.get("attributes") or {} if isinstance(self.data, dict) else {}
        )
        self.relationship_groups: tuple[str, ...] = ("relationships",)
        self._field_map: dict[str, FieldPath] | None = None
        self._attached: dict[Address, Entity] = {}

    # -- Identity ------------------------------------------------------------

    @property
    def type(self) -> str:
        if isinstance(self.data, dict):
            return str(self.data.get("type") or "")
        return ""

    @property
    def entity_type(self) -> str:
        return self.type.split("--")[0]

    @property
    def bundle(self) -> str:
        parts = self.type.split("--")
        return parts[1] if len(parts) > 1 else ""

    @property
    def uuid(self) -> str | None:
        return self.data.get("id") if isinstance(self.data, dict) else None

    @property
    def id(self) -> str | None:
        return self.uuid

    @property
    def internal_id(self) -> int | str | None:
        """Drupal's own id (nid, tid, mid...), if the payload exposes it."""
        for key, value in self.attrs.items():
            if INTERNAL_ID_PATTERN.match(key):
                return value
        return None

    @property
    def is_error(self) -> bool:
        return self.entity_type == "error"

    @property
    def status(self) -> str | None:
        return str(self._first_error.get("status", UNKNOWN_STATUS)) if self.is_error else None

    @property
    def title(self) -> str | None:
        if not self.is_error:
            return None
        return self._first_error.get("title") or UNKNOWN_TITLE

    @property
    def _first_error(self) -> dict[str, Any]:
        errors = self.res.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return errors[0]
        return {}

    def page_error(self) -> dict[str, Any]:
        """Arguments for a host-level error page, or ``{}`` when not an error."""
        if not self.is_error:
            return {}
        return {"status_code": self.bundle, "message": self.title}

    def is_collection(self) -> bool:
        return isinstance(self.data, list)

    # -- Field access --------------------------------------------------------

    @property
    def field_map(self) -> dict[str, FieldPath]:
        """Logical field name -> path into ``res``. Built once."""
        if self._field_map is None:
            fields: dict[str, FieldPath] = {}
            if not self.is_collection():
                for name in self.attrs:
                    fields[name] = ("data", "attributes", name)
                for group in self.relationship_groups:
                    for name in self.relationship_field_names(group):
                        fields[name] = ("data", group, name)
            self._field_map = fields
        return self._field_map

    def relationship_field_names(self, group: str) -> list[str]:
        if not isinstance(self.data, dict):
            return []
        members = self.data.get(group) or {}
        return [
            k for k in members
            if any(test.search(k) for test in self.config.relationship_tests)
        ]

    def has_field(self, name: str, prefix: str = "field_") -> bool:
        return prefix + name in self.field_map

    def field(self, name: str, prefix: str = "field_") -> Any:
        path = self.field_map.get(prefix + name)
        if path is None:
            return None
        return self.get_path(path)

    def get_path(self, path: FieldPath) -> Any:
        value: Any = self.res
        for key in path:
            value = value[key]
        return value

    def value(self, name: str, prefix: str = "field_") -> Any:
        """First value of a field, with relationships dereferenced."""
        raw = self.field(name, prefix)
        processor = self.config.value_processors.get(prefix + name)
        if processor is not None:
            return processor(raw)
        return self.get_field_value(raw)

    def all_values(self, name: str, prefix: str = "field_") -> list[Any]:
        """Every value of a field, dereferenced, with falsy results dropped."""
        raw = self.field(name, prefix)
        processor = self.config.value_processors.get(prefix + name)
        if processor is not None:
            return processor(raw)
        items = raw
        if isinstance(items, dict) and isinstance(items.get("data"), list):
            items = items["data"]
        if not isinstance(items, list):
            single = self.get_field_value(items)
            return [single] if single else []
        resolved = (self.get_field_value(item) for item in items)
        return [v for v in resolved if v]

    def get_field_value(self, structure: Any, index: int = 0) -> Any:
        """Pick the value at ``index`` out of a raw field structure."""
        value = structure
        if isinstance(structure, dict):
            data = structure.get("data")
            if isinstance(data, list):
                value = data[index] if index < len(data) else None
            elif data:
                value = data
        if isinstance(value, list) and index < len(value) and value[index]:
            value = value[index]

        tagged = classify_value(value)
        if isinstance(tagged, RelationshipRef):
            return self.resolve_relationship(tagged)
        return value

    def resolve_relationship(self, ref: RelationshipRef) -> Any:
        """Attached or cached target of ``ref``; the ref itself if unresolved."""
        address = self.api.endpoint(ref.to_lookup())
        target = self._attached.get(address)
        if target is None:
            target = self.api.get_cached(address)
        if target is None:
            return ref
        if isinstance(target, Entity):
            if target.is_error:
                return None
            return self.api.hooks.apply(ref, target)
        return target

    def attach(self, address: Address, entity: Entity) -> None:
        """Record a resolved relationship target (set by the traversal engine)."""
        self._attached[address] = entity

    @property
    def attached(self) -> dict[Address, Entity]:
        return dict(self._attached)

    # -- Traversal -----------------------------------------------------------

    async def load_relationships(self, depth: float = float("inf")) -> None:
        await self.api.traversal.load_relationships(self, depth)

    # -- Serialization -------------------------------------------------------

    def to_object(self) -> dict[str, Any]:
        """Plain payload that can re-constitute this entity."""
        return self.res

    def serialize(self) -> dict[str, Any]:
        return {SERIALIZED_KEY: {"res": self.res}}

    def to_json(self) -> str:
        return json.dumps(self.serialize())

    def to_props(self, payload: Any = None) -> Any:
        """Run the transformer registered for this bundle, if any."""
        transformer = self.api.options.transformers.get(self.bundle)
        if transformer is None:
            return self
        return transformer(self, payload)

    def __str__(self) -> str:
        return (
            f"Drupal '{self.entity_type}' entity of bundle '{self.bundle}'. "
            f"Has fields: {', '.join(self.field_map)}."
        )

    def __repr__(self) -> str:
        return f"<Entity {self.type or 'collection'} id={self.uuid}>"

    # -- Cleaning ------------------------------------------------------------

    def transform(self, res: dict[str, Any]) -> dict[str, Any]:
        """Strip envelope metadata and non-allow-listed fields."""
        res.pop("jsonapi", None)
        res.pop("links", None)
        if not res.get("data") and res.get("type"):
            res = {"data": res}

        data = res.get("data")
        resources = data if isinstance(data, list) else [data]
        for resource in resources:
            if not isinstance(resource, dict):
                continue
            resource.pop("links", None)
            for field_set in ("attributes", "relationships"):
                resource[field_set] = self.clean_fields(resource.get(field_set))
        return res

    def clean_fields(self, fields: dict[str, Any] | None) -> dict[str, Any]:
        if not fields:
            return {}
        return {
            name: clean_field(value)
            for name, value in fields.items()
            if any(test.search(name) for test in self.config.field_tests)
        }


def clean_field(value: Any) -> Any:
    """Drop ``links.self`` blocks from nested mappings and sequences."""
    if isinstance(value, list):
        return [clean_field(v) for v in value]
    if isinstance(value, dict):
        links = value.get("links")
        return {
            k: clean_field(v)
            for k, v in value.items()
            if not (k == "links" and isinstance(links, dict) and "self" in links)
        }
    return value


def get_data(res: dict[str, Any]) -> dict[str, Any] | list[Any]:
    data = res.get("data")
    if isinstance(data, dict) and data.get("type") and data.get("id"):
        return data
    if res.get("type") and res.get("id"):
        return res
    if isinstance(data, list):
        return data
    return {}


def shape_error(res: dict[str, Any]) -> dict[str, Any]:
    """Give an error document a placeholder resource."""
    errors = res.get("errors")
    status = UNKNOWN_STATUS
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        status = str(errors[0].get("status") or UNKNOWN_STATUS)
    return {
        **res,
        "data": {
            "type": f"error--{status}",
            "id": MISSING_ID,
            "attributes": {},
        },
    }
