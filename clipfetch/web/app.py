"""
app — FastAPI application factory.
"""
from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ..config import Config, load_config

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Config = app.state.config
    log.info("web_started", host=cfg.web_host, port=cfg.web_port, download_dir=cfg.download_dir)
    yield
    log.info("web_stopped")


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(cfg: Config | None = None) -> FastAPI:
    cfg = cfg or load_config()
    app = FastAPI(title="clipfetch", lifespan=lifespan)
    app.state.config = cfg

    # API routers
    from .routers import download, system
    app.include_router(download.router)
    app.include_router(system.router)

    # Finished files are served straight from the download directory
    download_dir = Path(cfg.download_dir)
    download_dir.mkdir(parents=True, exist_ok=True)
    app.mount(cfg.public_prefix.rstrip("/"), StaticFiles(directory=str(download_dir)), name="downloads")

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        log.info("invalid_request", path=request.url.path, error=message)
        return JSONResponse(status_code=400, content={"error": message})

    # JSON error handler for API routes
    @app.exception_handler(Exception)
    async def _api_error_handler(request: Request, exc: Exception):
        if request.url.path.startswith("/api/"):
            log.error("api_error", path=request.url.path, error=str(exc))
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )
        raise exc

    return app
