"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Runs startup logic (build the orchestrator + history clients and the resolver)
3. Registers all routers (health, job attempts)
4. Maps UpstreamError to a 5xx response
5. Runs shutdown logic (close the HTTP clients)

To run:  uvicorn api.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from api.routers import attempts, health
from resolver.errors import UpstreamError
from resolver.factory import build_resolver

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Runs on startup (before yield) and shutdown (after yield).

    Startup:
    - Builds the orchestrator client and, if ELASTICSEARCH_URI is set, the history client
    - Wires both into the AttemptResolver stored on app.state

    Shutdown:
    - Closes both HTTP clients (connection pools)
    """
    # ── Startup ─────────────────────────────────────────────────
    bundle = build_resolver(settings)
    app.state.resolver = bundle.resolver
    logger.info(
        f"API ready — launcher: {settings.LAUNCHER_TYPE}, "
        f"history index: {'configured' if bundle.history else 'not configured'}"
    )

    yield  # app is running and serving requests between startup and shutdown

    # ── Shutdown ────────────────────────────────────────────────
    await bundle.close()
    logger.info("API shut down")


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """
    An upstream 5xx is passed through as is; anything else (unexpected 4xx,
    no response at all) becomes 502 Bad Gateway.
    """
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    status_code = exc.status if exc.status is not None and exc.status >= 500 else 502
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "source": exc.source,
            "upstream_status": exc.status,
        },
    )


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Job Attempt History",
        description="Reconciles live orchestrator state with indexed snapshots into per-job attempt history",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(attempts.router)
    app.add_exception_handler(UpstreamError, upstream_error_handler)

    return app


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()
