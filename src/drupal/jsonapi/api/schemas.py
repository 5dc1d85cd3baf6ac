# drupal/jsonapi/api/schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EntityResponse(BaseModel):
    """A resolved resource plus every payload resolved alongside it."""

    type: str = Field(description="JSON:API type, e.g. 'node--article'")
    id: str | None = None
    data: dict[str, Any] = Field(description="Projected payload of the resource")
    cache: dict[str, Any] = Field(
        default_factory=dict,
        description="Address -> payload snapshot, restorable with restore_cache()",
    )


class ErrorResponse(BaseModel):
    error: str
    message: str
