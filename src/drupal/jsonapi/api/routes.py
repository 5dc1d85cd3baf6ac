# drupal/jsonapi/api/routes.py
"""
Resource endpoints for page rendering hosts.
"""
from __future__ import annotations

import logging
import math
from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from drupal.jsonapi.api.deps import get_resolver
from drupal.jsonapi.api.exceptions import PageError
from drupal.jsonapi.api.schemas import EntityResponse, ErrorResponse
from drupal.jsonapi.contracts.lookup import Lookup
from drupal.jsonapi.core.entity import Entity
from drupal.jsonapi.core.resolver import DrupalJsonApi

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Lookup cannot be completed"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    502: {"model": ErrorResponse, "description": "Upstream failure or strict abort"},
}


def _depth(depth: int | None) -> float:
    return math.inf if depth is None else depth


def _render(api: DrupalJsonApi, result: Any) -> EntityResponse:
    if not isinstance(result, Entity):
        raise PageError(502, "Upstream did not return a JSON:API resource")
    if result.is_error:
        raise PageError.from_entity(result)
    return EntityResponse(
        type=result.type or "collection",
        id=result.uuid,
        data=result.to_object(),
        cache=api.cache_to_object(),
    )


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    transport = getattr(request.app.state, "transport", None)
    return {
        "status": "healthy",
        "transport": type(transport).__name__ if transport else "not configured",
    }


@router.get(
    "/entities/{entity_type}/{bundle}/{uuid}",
    response_model=EntityResponse,
    responses=ERROR_RESPONSES,
)
async def get_entity(
    entity_type: str,
    bundle: str,
    uuid: str,
    depth: int | None = Query(default=None, ge=0),
    api: DrupalJsonApi = Depends(get_resolver),
) -> EntityResponse:
    lookup = Lookup(entity_type=entity_type, bundle=bundle, uuid=uuid)
    return _render(api, await api.get_entity(lookup, _depth(depth)))


@router.get(
    "/entities/{entity_type}/{bundle}",
    response_model=EntityResponse,
    responses=ERROR_RESPONSES,
)
async def get_collection(
    entity_type: str,
    bundle: str,
    api: DrupalJsonApi = Depends(get_resolver),
) -> EntityResponse:
    return _render(api, await api.collection(entity_type, bundle))


@router.get(
    "/resolve",
    response_model=EntityResponse,
    responses=ERROR_RESPONSES,
)
async def resolve_slug(
    slug: str = Query(..., min_length=1),
    depth: int | None = Query(default=None, ge=0),
    api: DrupalJsonApi = Depends(get_resolver),
) -> EntityResponse:
    return _render(api, await api.slug(slug, _depth(depth)))
