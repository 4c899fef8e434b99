"""Optional local HTTP surface over :class:`ConversionService`."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, HTTPException

from .. import __version__
from ..config import AppConfig
from ..core import ConversionService
from ..settings import resolve_config
from .routers import convert, health

TITLE = "Component Markdown Converter"
DISABLED_DETAIL = "Local API disabled. Enable by setting enable_local_api = true in config.toml"


def create_app(
    config_path: Path | None = None,
    *,
    config: AppConfig | None = None,
    require_enabled: bool = True,
) -> FastAPI:
    config = config or resolve_config(config_path)
    if require_enabled and not config.runtime.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via config.runtime.enable_local_api")

    app = FastAPI(title=TITLE, version=__version__)
    app.state.service = ConversionService(config)
    app.include_router(health.router)
    app.include_router(convert.router)
    return app


def disabled_app() -> FastAPI:
    """An app that answers every request with 503 while the API is switched off."""

    app = FastAPI(title=TITLE, version=__version__)

    @app.api_route("/{path:path}", methods=["GET", "POST"], include_in_schema=False)
    async def api_disabled(path: str) -> None:
        raise HTTPException(status_code=503, detail=DISABLED_DETAIL)

    return app


__all__ = ["create_app", "disabled_app"]
