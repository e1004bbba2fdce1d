from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers,
shared state) so tests can build isolated apps with their own limiter,
clock and LLM client.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.api.routes import chat_router, health_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.core.rate_limit import build_rate_limiter
from app.services.chat_service import ChatService
from app.services.persona import load_system_prompt

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    await app.state.chat_service.llm.aclose()


def create_app(
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    llm_client: AbstractLLMClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Limiter to use; built from settings when omitted.
        llm_client: Upstream chat client; built by the provider factory when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.

    Raises:
        ValidationAppError: If the LLM provider is misconfigured or the
            system prompt file cannot be loaded.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Persona Chat Proxy",
        description=(
            "Relays visitor questions to a hosted LLM with a fixed persona "
            "system prompt, limited per client IP with a fixed hourly window."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=_lifespan,
    )

    app.state.rate_limiter = rate_limiter or build_rate_limiter(settings.app)
    app.state.chat_service = ChatService(
        llm=llm_client or create_llm_client(),
        system_prompt=load_system_prompt(settings.app.system_prompt_file),
    )

    # Middleware (last added runs first)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["X-RateLimit-Remaining", settings.log.request_id_header],
    )

    setup_exception_handlers(app)

    app.include_router(chat_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "llm_provider": settings.llm.provider,
            "llm_model": settings.llm.model,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
            "rate_limit_requests": settings.app.rate_limit_requests,
            "rate_limit_window_s": settings.app.rate_limit_window_seconds,
        },
    )

    return app
