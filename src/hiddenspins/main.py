"""FastAPI application entry point.

Run locally with:

    hiddenspins                                  # console script, see pyproject.toml
    uvicorn hiddenspins.main:app --reload
"""

import uvicorn
from fastapi import FastAPI

from hiddenspins import __version__
from hiddenspins.api import api_router
from hiddenspins.api.exception_handlers import register_exception_handlers
from hiddenspins.config import Settings, get_settings
from hiddenspins.infrastructure.lifecycle import lifespan
from hiddenspins.infrastructure.observability import RequestLoggingMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: explicit settings (tests); defaults to the cached environment settings
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Hidden Spins",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


def run() -> None:
    """Console script entry point."""
    uvicorn.run("hiddenspins.main:app", host="0.0.0.0", port=8000)
