"""ASGI entry point, e.g. ``uvicorn main:app``."""

from sfc_markdown.api import create_app, disabled_app
from sfc_markdown.settings import resolve_config

config = resolve_config()
app = create_app(config=config) if config.runtime.enable_local_api else disabled_app()
