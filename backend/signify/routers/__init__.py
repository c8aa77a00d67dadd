"""Signify - API Routers"""
from .people import router as people_router
from .signal_log import router as signal_log_router
from .catalog import router as catalog_router
from .data import router as data_router
from .ai import router as ai_router

__all__ = [
    "people_router",
    "signal_log_router",
    "catalog_router",
    "data_router",
    "ai_router",
]
