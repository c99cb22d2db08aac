"""
FastAPI application factory
"""
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from budgethub.config import get_settings
from budgethub.infrastructure.db.session import Database
from budgethub.application.scheduler import start_scheduler, shutdown_scheduler
from budgethub.api.v1 import jobs

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Log every unhandled exception with its traceback and answer 500"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


def create_app(database: Database | None = None) -> FastAPI:
    """
    Application factory - creates and configures the FastAPI app

    Args:
        database: store handle to use; built from settings at startup when omitted

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_handle = database or Database.from_settings(settings)
        app.state.database = db_handle
        scheduler = start_scheduler(db_handle) if settings.SCHEDULER_ENABLED else None
        try:
            yield
        finally:
            if scheduler is not None:
                shutdown_scheduler(scheduler)
            if database is None:
                db_handle.dispose()

    app = FastAPI(
        title="Budget Hub",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(ErrorLoggingMiddleware)

    app.include_router(jobs.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready(request: Request):
        """Readiness check endpoint (database reachable)"""
        request.app.state.database.check_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "budgethub.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
