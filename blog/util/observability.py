"""Logfire setup and instrumentation.

Services emit their own spans and events directly through ``logfire``:

    with logfire.span("comment_service.delete", comment_id=str(comment_id)):
        logfire.info("Comment deleted", mode=mode.value)

This module only configures the exporter and wires the FastAPI and
SQLAlchemy integrations.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.requests import HTTPConnection

from blog.config import Settings

SERVICE_NAME = "blog-comments"
SERVICE_VERSION = "0.1.0"


def _should_send(settings: Settings) -> bool:
    # Explicit setting wins, otherwise send whenever a token is configured
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for this process.

    Development runs console-only unless OBSERVABILITY__LOGFIRE_TOKEN is set.
    OBSERVABILITY__SEND_TO_LOGFIRE forces cloud export on or off.

    Args:
        settings: Application settings
    """
    send_to_logfire = _should_send(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
    )


def _request_attributes(
    request: HTTPConnection, attributes: dict[str, Any]
) -> dict[str, Any]:
    """Add path and client host to the request span."""
    result = {**attributes, "path": request.url.path}
    if request.client:
        result["client_host"] = request.client.host
    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by ``app``.

    Cookies are captured with the headers; Logfire's default scrubbing
    redacts the auth token.
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=True,
        request_attributes_mapper=_request_attributes,
    )
    logfire.debug("FastAPI instrumented", title=app.title)


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL statements issued through ``engine``."""
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.debug("SQLAlchemy instrumented", dialect=engine.dialect.name)
