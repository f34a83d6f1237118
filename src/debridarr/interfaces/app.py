"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from debridarr.infrastructure.config import AppConfig
from debridarr.interfaces.app_state import AppState
from debridarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, sources) are created in lifespan().
    """
    app = FastAPI(
        title="Debridarr",
        description="Stremio addon: torrent search + Real-Debrid instant availability",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from debridarr.interfaces.api.stremio.router import router as stremio_router

    @app.get("/healthz")
    async def healthz() -> dict[str, str | list[str]]:
        """Liveness probe: 200 as long as the process is running."""
        sources = getattr(app.state, "sources", None) or []
        return {
            "status": "ok",
            "sources": [s.name for s in sources if s.enabled],
        }

    # Registered after /healthz so "/{config}/..." never shadows it.
    app.include_router(stremio_router)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                # Config segments carry API keys; log the route shape only.
                path=_redact_path(request.url.path),
                status_code=response.status_code if response is not None else 500,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app


def _redact_path(path: str) -> str:
    parts = path.split("/")
    if len(parts) > 2 and parts[1] not in ("", "stream"):
        parts[1] = "<config>"
    return "/".join(parts)
