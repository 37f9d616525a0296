"""FastAPI application factory for the mypa server."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mypa.config.schema import MypaConfig
    from mypa.page import Page


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler: start the page on startup, stop it on shutdown."""
    page: Page = app.state.page
    page.start()

    yield

    page.stop()


def create_app(config: MypaConfig | None = None, page: Page | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    from mypa import __version__
    from mypa.config.loader import load_config
    from mypa.page import Page, set_page

    if config is None:
        config = page.config if page is not None else load_config()
    if page is None:
        page = Page(config)
    set_page(page)

    app = FastAPI(
        title="mypa",
        description="Multi-screen page driven over a cross-context tool bridge",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.page = page

    from mypa.api.health import router as health_router
    from mypa.api.routes.bridge import router as bridge_router
    from mypa.api.routes.ws import router as ws_router

    app.include_router(health_router)
    app.include_router(bridge_router)
    app.include_router(ws_router)

    return app
