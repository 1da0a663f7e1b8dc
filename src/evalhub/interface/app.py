"""FastAPI application factory for the EvalHub HTTP API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from evalhub.infrastructure.config import get_settings
from evalhub.interface.dependencies import shutdown, startup
from evalhub.interface.error_handlers import register_error_handlers
from evalhub.interface.routes import router

_DESCRIPTION = (
    "Scores public GitHub repositories on a seven-dimension quality rubric, "
    "writes interview commentary and skill scorecards, and matches developer "
    "stacks against project requirements."
)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup()
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    """Build the EvalHub application with routes and error envelopes wired in."""
    app = FastAPI(title="EvalHub", version="1.0.0", description=_DESCRIPTION, lifespan=_lifespan)

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, object]:
        settings = get_settings()
        return {
            "status": "ok",
            "model": settings.openai_model,
            "llmCredentials": len(settings.api_keys()),
        }

    return app
