# src/dossier_moderation/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .content import router as content_router
from .flags import router as flags_router
from .moderation import router as moderation_router

__all__ = [
    "admin_router",
    "content_router",
    "flags_router",
    "moderation_router",
]
