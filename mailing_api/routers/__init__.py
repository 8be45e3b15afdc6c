# mailing_api/routers/__init__.py
"""
API routers.
"""

from mailing_api.routers.entries import router as entries_router

__all__ = [
    "entries_router",
]
