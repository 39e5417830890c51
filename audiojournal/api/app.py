"""
The AudioJournal HTTP and WebSocket surface.

``create_app()`` wires the recording controller and entry store into a
FastAPI app. Run it with
``uvicorn audiojournal.api.app:create_app --factory`` or ``python -m audiojournal``.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from audiojournal import __version__
from audiojournal.api import websocket
from audiojournal.api.dependencies import build_components, shutdown_components
from audiojournal.api.middleware.error_handler import register_error_handlers
from audiojournal.api.routes import entries, onboarding, prompts, recording
from audiojournal.core.config import Settings, get_settings
from audiojournal.core.models import HealthResponse


def create_app(settings: Settings | None = None, **overrides) -> FastAPI:
    """Create the app around one controller and one entry store.

    Args:
        settings: Configuration; ``get_settings()`` when omitted.
        **overrides: Collaborators passed through to ``build_components``
            (``storage``, ``capture``, ``backend``, ``authorizer``, ``annotator``).

    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build services on startup; stop recording and close storage on shutdown.

        The permission request runs in the background: the host may take
        arbitrarily long to answer, and startup must not wait for it.
        """
        components = await build_components(settings, **overrides)
        app.state.components = components
        task = asyncio.create_task(components.controller.request_authorization())
        components.background.add(task)
        task.add_done_callback(components.background.discard)
        yield
        await shutdown_components(components)

    app = FastAPI(
        title="AudioJournal",
        description="Speech-driven personal journal with live on-device transcription.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Liveness --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(entries.router, prefix="/api/v1")
    app.include_router(recording.router, prefix="/api/v1")
    app.include_router(prompts.router, prefix="/api/v1")
    app.include_router(onboarding.router, prefix="/api/v1")

    # -- WebSocket --
    app.include_router(websocket.router)

    return app
