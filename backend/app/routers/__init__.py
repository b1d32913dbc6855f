"""Routers module."""

from .boletos import router as boletos_router

__all__ = ["boletos_router"]
