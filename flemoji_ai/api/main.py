"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..agents.llm import ChatModel
from ..agents.memory import ConversationMemory, PreferenceTracker
from ..agents.router import RouterAgent
from ..catalog.base import MusicCatalog
from ..catalog.memory import InMemoryCatalog
from ..config import AI_PROVIDER, CATALOG_PATH, LOG_LEVEL, has_model_key
from ..errors import AssistantError
from ..logging_config import setup_logging

logger = logging.getLogger(__name__)


def _error_body(error: str, code: str, details=None) -> dict:
    body = {"error": error, "code": code}
    if details is not None:
        body["details"] = details
    return body


def create_app(
    *,
    catalog: Optional[MusicCatalog] = None,
    model: Optional[ChatModel] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``catalog`` and ``model`` override the snapshot on disk and the OpenAI
    binding; tests pass in-memory fixtures here.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the catalog, router and memory stores once per process."""
        setup_logging(LOG_LEVEL)

        app.state.catalog = catalog if catalog is not None else InMemoryCatalog.from_json(CATALOG_PATH)
        app.state.router = RouterAgent(app.state.catalog, model=model, provider=AI_PROVIDER)
        app.state.memory = ConversationMemory()
        app.state.preferences = PreferenceTracker()

        if model is None and not has_model_key(AI_PROVIDER):
            logger.warning("No API key for provider %s; chat requests will return apology responses", AI_PROVIDER)
        logger.info("Flemoji AI assistant ready (%d tools)", len(app.state.router.registry))

        yield

        logger.info("Shutting down Flemoji AI assistant.")

    app = FastAPI(
        title="Flemoji AI Assistant",
        description="Conversational music discovery, playback and recommendations.",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS - allow the web client in development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "Invalid request: message is required",
                "INVALID_REQUEST",
                [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()],
            ),
        )

    @app.exception_handler(AssistantError)
    async def assistant_error(request: Request, exc: AssistantError):
        logger.error("Assistant error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content=_error_body("Internal server error", "INTERNAL_ERROR", str(exc)))

    from .routes import chat
    app.include_router(chat.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Flemoji AI Assistant",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "health": "/api/health",
            "endpoints": {
                "chat": "/api/ai/chat",
                "route": "/api/ai/route?q=",
                "websocket": "/api/chat (WebSocket)",
            },
        }

    @app.get("/api/health")
    async def health():
        return {
            "status": "ok",
            "provider": AI_PROVIDER,
            "model_configured": model is not None or has_model_key(AI_PROVIDER),
            "tools": app.state.router.registry.list_tools(),
        }

    return app


# For uvicorn direct run
app = create_app()
