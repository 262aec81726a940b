"""
FastAPI application factory and server setup.

This module creates and configures the FastAPI application with:
- Provider table and wire adapters
- The chat router
- Error handling
- Route registration
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response

from chatrelay import __version__
from chatrelay.providers import ProviderRegistry, create_default_registry
from chatrelay.router import ChatRouter, RouterConfig, build_router_config
from chatrelay.server.config import Settings, get_settings
from chatrelay.server.responses import json_response
from chatrelay.server.routes import chat, homepage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Logs provider availability on startup and closes upstream
    connections on shutdown.
    """
    config: RouterConfig = app.state.chat_router.config
    for name, profile in config.profiles.items():
        if profile.is_configured:
            logger.info(f"Provider {name} available (model={profile.default_model})")
        else:
            logger.warning(f"Provider {name} unavailable: API key missing")

    yield

    logger.info("Shutting down...")
    await app.state.chat_router.registry.close()


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Last-resort handler: every uncaught error becomes a 500 envelope."""
    logger.exception(f"[CATCH ERROR] {request.method} {request.url.path}: {exc}")
    return json_response(500, {"error": str(exc)})


def create_app(
    settings: Settings | None = None,
    config: RouterConfig | None = None,
    registry: ProviderRegistry | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (cached settings when None)
        config: Provider table (built from settings when None)
        registry: Wire adapters (default adapters when None)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    if config is None:
        config = build_router_config(settings)

    if registry is None:
        registry = create_default_registry(
            gemini_base_url=settings.providers.gemini_base_url,
            openrouter_base_url=settings.providers.openrouter_base_url,
            timeout=settings.server.upstream_timeout,
        )

    # Every non-API path belongs to the homepage, so no docs routes
    app = FastAPI(
        title="chatrelay",
        description="Chat relay with provider failover",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.chat_router = ChatRouter(config, registry)
    app.state.homepage = homepage.load_homepage(settings.server.homepage_path)

    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Plain routes with no method list accept every HTTP method; the
    # homepage catch-all must come last
    app.add_route(chat.CHAT_PATH, chat.chat, include_in_schema=False)
    app.add_route(homepage.CATCH_ALL_PATH, homepage.homepage, include_in_schema=False)

    return app


# Create default app instance
app = create_app()
