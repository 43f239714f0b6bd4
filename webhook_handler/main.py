"""
Webhook Handler - signed webhook trigger service

Entry point for the FastAPI application.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from dotenv import load_dotenv

from webhook_handler.logging import get_logger
from webhook_handler.state import app_state
from webhook_handler.routers import internal, webhook
from webhook_handler.services.actions import ActionLauncher
from webhook_handler.config import ConfigurationError, get_config, resolve_webhook_settings

load_dotenv()

logger = get_logger(__name__)


def _init_settings() -> None:
    """Resolve the webhook secret and script path."""
    try:
        settings = resolve_webhook_settings(get_config())
    except ConfigurationError as e:
        # Keep serving so every delivery reports a server error instead of a refused connection
        logger.error(f"Webhook configuration incomplete: {e}")
        app_state.settings = None
        app_state.launcher = None
        return

    app_state.settings = settings
    app_state.launcher = ActionLauncher(settings.script, settings.interpreter)
    logger.info(f"Webhook secret loaded, script: {settings.script}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    _init_settings()

    yield

    if app_state.launcher is not None:
        still_running = app_state.launcher.reap()
        if still_running:
            logger.warning(f"Shutting down with {still_running} script(s) still running")
    app_state.settings = None
    app_state.launcher = None


app = FastAPI(
    title="Webhook Handler",
    description="Runs a local script when a signed webhook arrives",
    lifespan=lifespan
)

app.include_router(webhook.router)
app.include_router(internal.router)


def serve() -> None:
    """Run the service under uvicorn."""
    config = get_config()
    uvicorn.run(app, host=config.webhook_host, port=config.webhook_port)
