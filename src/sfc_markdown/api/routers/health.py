from __future__ import annotations

from fastapi import APIRouter, Depends

from ... import __version__
from ...config import AppConfig
from ..dependencies import get_config

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
def health(config: AppConfig = Depends(get_config)) -> dict[str, str | bool]:
    return {
        "status": "ok",
        "version": __version__,
        "source_dir_ready": config.runtime.source_dir.is_dir(),
    }


__all__ = ["router"]
