from contextlib import asynccontextmanager
from fastapi import FastAPI

from bookreview.core.config import settings
from bookreview.core.exception_handler import register_exception_handlers
from bookreview.core.logging import setup_logging
from bookreview.core.middleware import register_middlewares
from bookreview.db.session import init_db, dispose_engine

# Routers
from bookreview.api.v1.endpoints import book, review, search


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    await init_db()

    yield

    await dispose_engine()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    # Register all middleware
    register_middlewares(app)

    # Register all exception handlers
    register_exception_handlers(app)

    app.include_router(book.router)
    app.include_router(review.router)
    app.include_router(search.router)

    return app


app = create_application()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
