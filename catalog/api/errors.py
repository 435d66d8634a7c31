"""
Error handlers: errors go back to the client as plain text, verbatim.

Malformed or incomplete request bodies are a 400; store failures are a 500
and leave the process serving.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from dynamo_toolkit.db import StoreError
from catalog.exceptions import CatalogError


logger = logging.getLogger(__name__)


def describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error['loc'])
        messages.append(f"{location}: {error['msg']}")
    return '; '.join(messages)


def setup_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        return PlainTextResponse(describe_validation_error(exc), status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StoreError)
    @app.exception_handler(CatalogError)
    async def store_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
