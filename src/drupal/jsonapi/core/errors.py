# drupal/jsonapi/core/errors.py
"""
Error taxonomy and transport failure normalization.

Transport failures never escape the resolver as exceptions: they are
converted into JSON:API error documents which the entity model projects
into error entities (``type = "error--<status>"``, ``id = "missing"``).
Only lookup and strict-mode failures are raised.
"""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_STATUS = "520"
UNKNOWN_TITLE = "Unknown Error"

# status -> title
KNOWN_ERRORS: dict[str, str] = {
    "403": "Not Authorized",
    "404": "Not Found",
}


class JsonApiError(Exception):
    pass


class TransportError(JsonApiError):
    """Raised by transports. ``status`` is ``None`` when no response arrived."""

    def __init__(self, address: str, status: int | None = None, reason: str = ""):
        self.address = address
        self.status = status
        self.reason = reason
        msg = f"Request for '{address}' failed"
        if status is not None:
            msg += f" with status {status}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class IncompleteLookupError(JsonApiError):
    """A lookup lacks the fields required to build an address."""

    def __init__(self, message: str, *, lookup: Any = None, response: Any = None):
        self.lookup = lookup
        self.response = response
        super().__init__(message)


class EntifyError(JsonApiError):
    """A payload could not be recognized as any known resource shape."""


class StrictAbortError(JsonApiError):
    """Strict generation hit an unrecoverable error resource."""

    def __init__(self, address: str, status: str, title: str, attempts: int = 1):
        self.address = address
        self.status = status
        self.title = title
        self.attempts = attempts
        super().__init__(
            f"Strict generation aborted: '{address}' returned {status} "
            f"({title}) after {attempts} attempt(s)"
        )


def error_payload(status: str = UNKNOWN_STATUS, title: str = UNKNOWN_TITLE) -> dict[str, Any]:
    """Build a JSON:API error document."""
    return {
        "jsonapi": {
            "version": "1.0",
            "meta": {"links": {"self": {"href": "http://jsonapi.org/format/1.0/"}}},
        },
        "errors": [{"title": title, "status": status}],
    }


def NotAuthorized() -> dict[str, Any]:
    return error_payload("403", KNOWN_ERRORS["403"])


def NotFound() -> dict[str, Any]:
    return error_payload("404", KNOWN_ERRORS["404"])


def UnknownError() -> dict[str, Any]:
    return error_payload()


def normalize_transport_error(exc: TransportError) -> dict[str, Any]:
    """Classify a transport failure into an error document."""
    status = str(exc.status) if exc.status is not None else None
    if status in KNOWN_ERRORS:
        logger.debug("Normalized %s for '%s'", status, exc.address)
        return error_payload(status, KNOWN_ERRORS[status])
    logger.warning("Unknown failure for '%s': %s", exc.address, exc)
    return UnknownError()


def is_error_document(payload: Any) -> bool:
    """True for a JSON:API document carrying ``errors`` and no ``data``."""
    return (
        isinstance(payload, dict)
        and isinstance(payload.get("errors"), list)
        and len(payload["errors"]) > 0
        and not payload.get("data")
    )
