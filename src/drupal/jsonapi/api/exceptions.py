# drupal/jsonapi/api/exceptions.py
"""
Conversion of resolver outcomes into HTTP errors.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from drupal.jsonapi.core.entity import Entity
from drupal.jsonapi.core.errors import IncompleteLookupError, StrictAbortError

logger = logging.getLogger(__name__)


class PageError(Exception):
    """A top-level resolution ended in an error entity."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)

    @classmethod
    def from_entity(cls, entity: Entity) -> PageError:
        page = entity.page_error()
        try:
            status_code = int(page["status_code"])
        except (TypeError, ValueError):
            status_code = 520
        return cls(status_code, page["message"])


def _body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message}


async def _page_error(request: Request, exc: PageError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_body("page_error", exc.message))


async def _incomplete_lookup(request: Request, exc: IncompleteLookupError) -> JSONResponse:
    return JSONResponse(status_code=400, content=_body("incomplete_lookup", str(exc)))


async def _strict_abort(request: Request, exc: StrictAbortError) -> JSONResponse:
    logger.error("Strict abort while serving %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content=_body("strict_abort", str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PageError, _page_error)
    app.add_exception_handler(IncompleteLookupError, _incomplete_lookup)
    app.add_exception_handler(StrictAbortError, _strict_abort)
