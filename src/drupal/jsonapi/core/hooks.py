# drupal/jsonapi/core/hooks.py
"""
Post-resolution hooks.

A hook replaces a resolved relationship target with another value before
it reaches the caller. Hooks are keyed by ``entity--bundle`` so the
generic value resolution stays free of site-specific knowledge.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from drupal.jsonapi.contracts.values import RelationshipRef

if TYPE_CHECKING:
    from drupal.jsonapi.core.entity import Entity

logger = logging.getLogger(__name__)

PostResolveHook = Callable[["Entity"], Any]

LIBRARY_PARAGRAPH_TYPE = "paragraph--from_library"


def unwrap_library_paragraph(wrapper: Entity) -> Any:
    """Substitute a library wrapper paragraph with the paragraphs it reuses.

    ``paragraph--from_library`` only points at a reusable library item whose
    ``paragraphs`` field holds the content; templates want the content.
    """
    inner = wrapper.value("reusable_paragraph")
    if inner is None or isinstance(inner, RelationshipRef):
        return inner
    return inner.value("paragraphs", prefix="")


class HookRegistry:
    """Named registry of post-resolution hooks."""

    def __init__(self) -> None:
        self._hooks: dict[str, PostResolveHook] = {}

    def register(self, resource_type: str, hook: PostResolveHook) -> None:
        if resource_type in self._hooks:
            raise ValueError(f"Hook for '{resource_type}' already registered")
        self._hooks[resource_type] = hook
        logger.debug("Registered post-resolution hook for %s", resource_type)

    def get(self, resource_type: str) -> PostResolveHook:
        try:
            return self._hooks[resource_type]
        except KeyError:
            raise KeyError(
                f"Hook '{resource_type}' not found. Available: {list(self._hooks)}"
            )

    def has(self, resource_type: str) -> bool:
        return resource_type in self._hooks

    def apply(self, ref: RelationshipRef, target: Entity) -> Any:
        hook = self._hooks.get(ref.type)
        if hook is None:
            return target
        return hook(target)

    def list(self) -> list[str]:
        return list(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)


def default_hooks() -> HookRegistry:
    registry = HookRegistry()
    registry.register(LIBRARY_PARAGRAPH_TYPE, unwrap_library_paragraph)
    return registry
