"""Transport implementations."""
from __future__ import annotations

from drupal.jsonapi.contracts.transport import Transport
from drupal.jsonapi.core.config import Settings
from drupal.jsonapi.core.transport.files import FileTransport
from drupal.jsonapi.core.transport.http import HttpxTransport


def create_transport(settings: Settings) -> Transport:
    """Pick the transport for the configured mode.

    Raises:
        ValueError: Live mode without a ``drupal_url``.
    """
    if settings.static:
        return FileTransport(root=settings.resources_dir)
    if not settings.drupal_url:
        raise ValueError("Live mode requires the DRUPAL_JSONAPI_DRUPAL_URL setting")
    return HttpxTransport(base_url=settings.drupal_url, timeout=settings.timeout)


__all__ = ["FileTransport", "HttpxTransport", "create_transport"]
