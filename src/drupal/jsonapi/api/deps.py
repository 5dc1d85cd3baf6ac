# drupal/jsonapi/api/deps.py
from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from drupal.jsonapi.core.resolver import DrupalJsonApi

logger = logging.getLogger(__name__)


def get_resolver(request: Request) -> DrupalJsonApi:
    """A fresh resolver per request; the transport is shared."""
    transport = getattr(request.app.state, "transport", None)
    options = getattr(request.app.state, "resolver_options", None)

    if transport is None:
        logger.error("Transport not initialized")
        raise HTTPException(status_code=500, detail="Transport not initialized")

    return DrupalJsonApi(transport, options)
