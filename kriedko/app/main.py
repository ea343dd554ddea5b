import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kriedko import __version__
from kriedko.app.startup import configure_startup_logging, run_startup_checks
from kriedko.core.config import Settings, get_settings
from kriedko.core.exceptions import register_exception_handlers
from kriedko.modules.auth.routes.auth_routes import router as auth_router
from kriedko.modules.feedback.routers.admin_router import router as admin_router
from kriedko.modules.feedback.routers.feedback_router import router as feedback_router
from kriedko.modules.feedback.storage import create_store
from kriedko.modules.feedback.storage.base import SubmissionStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SubmissionStore] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Defaults to the cached environment settings.
        store: Injected store handle; built from settings at startup when
            omitted. An injected store is left open on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        run_startup_checks(settings)
        owns_store = store is None
        app.state.store = store if store is not None else create_store(settings)
        try:
            yield
        finally:
            if owns_store:
                app.state.store.close()
                logger.info("Submission store closed")

    app = FastAPI(
        title="Kriedko Feedback API",
        description="""
        Customer feedback collection with live aggregate statistics.

        * **Feedback** - public submission endpoint with rating normalization and sentiment scoring
        * **Aggregates** - summary statistics and a Server-Sent Events stream for the dashboard
        * **Admin** - list, search, export, import and delete submissions
        """,
        version=__version__,
        lifespan=lifespan,
    )

    # Register exception handlers for consistent error responses
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(feedback_router)
    app.include_router(admin_router)
    app.include_router(auth_router)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    return app


def build_default_app() -> FastAPI:
    settings = get_settings()
    configure_startup_logging(settings.log_level)
    return create_app(settings)


app = build_default_app()
