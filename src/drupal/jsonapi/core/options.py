# drupal/jsonapi/core/options.py
"""
Resolver and entity options, and loading them from YAML.

Expected YAML::

    transformers:
      article: my_site.props:article
    value_processors:
      field_body: my_site.fields:render_body
    relationship_tests:
      - "^field_"
      - "^paragraphs$"
    transform: true

Files are merged in sorted order; later files override earlier keys.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from drupal.jsonapi.core.config import Settings
from drupal.jsonapi.core.loader import import_callables, load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)

DEFAULT_RELATIONSHIP_TESTS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^field_"),
    re.compile(r"^paragraphs$"),
)

# Fields kept by the cleaning transform; everything else is dropped.
DEFAULT_FIELD_TESTS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^field_"),
    re.compile(r"^drupal_internal__[a-z]?id$"),
    re.compile(
        r"^(label|title|status|path|paragraphs|thumbnail|meta|uri|filemime|filesize|filename)$"
    ),
)

DEFAULT_MAX_ATTEMPTS = 20


@dataclass(frozen=True)
class EntityOptions:
    """How raw payloads are projected into entities.

    Attributes:
        relationship_tests: Patterns a relationship field name must match
            to be exposed and traversed.
        field_tests: Allow-list applied by the cleaning transform.
        transform: Whether to clean payloads on construction.
        value_processors: Field name -> callable receiving the raw field
            value; overrides the default value resolution.
    """

    relationship_tests: tuple[re.Pattern[str], ...] = DEFAULT_RELATIONSHIP_TESTS
    field_tests: tuple[re.Pattern[str], ...] = DEFAULT_FIELD_TESTS
    transform: bool = True
    value_processors: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolverOptions:
    """Everything a resolver instance needs besides its transport."""

    alias_prefix: str = ""
    static: bool = False
    strict: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    transformers: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    entity: EntityOptions = field(default_factory=EntityOptions)


def load_resolver_options(
    patterns: Iterable[str],
    *,
    settings: Settings | None = None,
) -> ResolverOptions:
    """Build resolver options from settings plus hook YAML files."""
    merged: dict[str, Any] = {}
    for data in load_yaml_files(patterns):
        for key, value in data.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
    merged = substitute_env_vars(merged)

    entity_kwargs: dict[str, Any] = {
        "value_processors": import_callables(merged.get("value_processors"), "Value processor"),
    }
    if "relationship_tests" in merged:
        try:
            entity_kwargs["relationship_tests"] = tuple(
                re.compile(p) for p in merged["relationship_tests"]
            )
        except re.error as exc:
            raise ValueError(f"Invalid relationship test pattern: {exc}") from exc
    if "transform" in merged:
        entity_kwargs["transform"] = _as_bool(merged["transform"])

    transformers = import_callables(merged.get("transformers"), "Transformer")
    logger.info(
        "Loaded %d transformer(s) and %d value processor(s)",
        len(transformers),
        len(entity_kwargs["value_processors"]),
    )

    kwargs: dict[str, Any] = {}
    if settings is not None:
        kwargs = {
            "alias_prefix": settings.alias_prefix,
            "static": settings.static,
            "strict": settings.strict_generation,
            "max_attempts": settings.max_attempts,
        }
    return ResolverOptions(
        transformers=transformers,
        entity=EntityOptions(**entity_kwargs),
        **kwargs,
    )


def _as_bool(value: Any) -> bool:
    # Env-substituted values arrive as strings.
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
