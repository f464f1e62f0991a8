# src/chatline/main.py
"""Main entry point for the Chatline application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from chatline.api import auth_router, messages_router, system_router
from chatline.api.middleware import BodySizeLimitMiddleware
from chatline.core.errors import ChatlineError, ConfigError, DependencyError
from chatline.core.security import get_token_codec
from chatline.core.settings import settings
from chatline.db.session import database

logger = logging.getLogger(__name__)


def configure_logging(level: str | int = settings.log_level) -> None:
    """Set up root logging for the service process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    # Build the codec now so a bad secret stops startup instead of failing requests.
    get_token_codec()
    database.connect(create_tables=settings.auto_create_tables)
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    try:
        yield
    finally:
        database.dispose()
        logger.info("%s stopped", settings.app_name)


async def handle_chatline_error(request: Request, exc: ChatlineError) -> JSONResponse:
    """Turn service errors into JSON responses with stable messages."""
    if isinstance(exc, (DependencyError, ConfigError)):
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": ChatlineError.default_message},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": ChatlineError.default_message},
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


def mount_frontend(app: FastAPI, dist_dir: Path) -> bool:
    """Serve the built single-page frontend from ``dist_dir``.

    Existing files are returned as-is; every other GET path falls back to
    ``index.html`` so client-side routing works. Returns False if there is
    nothing to serve.
    """
    index_file = dist_dir / "index.html"
    if not index_file.is_file():
        logger.warning("Frontend build not found at %s; static files disabled", dist_dir)
        return False

    root = dist_dir.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str) -> FileResponse:
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        return FileResponse(index_file)

    return True


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Chat backend with cookie sessions and direct messages",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Registered first so CORS wraps the 413 responses.
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChatlineError, handle_chatline_error)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, handle_database_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, handle_request_validation_error  # type: ignore[arg-type]
    )

    # Include API routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(messages_router, prefix="/api")
    app.include_router(system_router)

    # The catch-all frontend route must be registered last.
    if settings.environment == "production":
        mount_frontend(app, Path(settings.frontend_dist))

    return app


app = create_app()


def run() -> None:
    """Start the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "chatline.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
