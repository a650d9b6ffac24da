"""ASGI entrypoint: ``uvicorn credkeeper.main:app``."""

from .core.app_factory import create_application
from .core.config import Settings

app = create_application(Settings())

__all__ = ("app",)
