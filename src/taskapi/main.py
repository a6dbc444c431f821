"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Settings, get_settings
from .exception_handlers import register_exception_handlers
from .logging_setup import setup_logging
from .routers import tasks
from .services import TaskStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around a TaskStore for ``settings.db_path``."""
    settings = settings or get_settings()
    started = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Task API started db=%s prefix=%r docs=%s",
            settings.db_path,
            settings.api_prefix,
            app.docs_url,
        )
        yield
        logger.info("Task API stopped")

    app = FastAPI(
        title="Task API",
        description="Task management with soft delete, restore and status lifecycle",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.task_store = TaskStore(settings.db_path, timeout=settings.db_timeout)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    app.include_router(tasks.router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        """Liveness check."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started, 3),
        }

    return app


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    uvicorn.run(
        "taskapi.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
