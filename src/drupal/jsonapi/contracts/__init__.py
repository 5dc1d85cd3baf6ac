"""Public contracts for the JSON:API graph resolver."""
from drupal.jsonapi.contracts.lookup import Address, Lookup
from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.contracts.values import (
    Collection,
    FieldValue,
    RelationshipRef,
    ScalarValue,
    classify_value,
    is_relationship,
)

__all__ = [
    "Address", "Lookup",
    "Transport",
    "Collection", "FieldValue", "RelationshipRef", "ScalarValue",
    "classify_value", "is_relationship",
]
