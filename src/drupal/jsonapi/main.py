# drupal/jsonapi/main.py
"""
Application factory for the HTTP adapter.

Serves resolved, relationship-expanded resources to page rendering hosts.
Each request gets its own resolver (and therefore its own cache); the
transport and hook options are built once at startup.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from drupal.jsonapi.api.exceptions import register_exception_handlers
from drupal.jsonapi.api.routes import router
from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.core.config import Settings, settings
from drupal.jsonapi.core.logging import configure_logging
from drupal.jsonapi.core.options import ResolverOptions, load_resolver_options
from drupal.jsonapi.core.transport import create_transport

logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    *,
    transport: Transport | None = None,
    options: ResolverOptions | None = None,
) -> FastAPI:
    """Build and wire the FastAPI application."""
    config = config or settings
    configure_logging(config.log_level)

    transport = transport or create_transport(config)
    if options is None:
        options = load_resolver_options(config.hooks_config_paths, settings=config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await transport.aclose()

    app = FastAPI(title="Drupal JSON:API graph", lifespan=lifespan)
    app.state.transport = transport
    app.state.resolver_options = options
    register_exception_handlers(app)
    app.include_router(router)

    logger.info(
        "Created app (transport=%s, strict=%s, static=%s)",
        type(transport).__name__,
        options.strict,
        options.static,
    )
    return app
