"""FastAPI integration for formula-commons."""

from .exception_handlers import register_exception_handlers

__all__ = [
    "register_exception_handlers",
]
