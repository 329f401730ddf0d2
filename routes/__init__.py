"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.machines import router as machines_router
from routes.plans import router as plans_router
from routes.recommendations import router as recommendations_router
from routes.settings import router as settings_router

__all__ = [
    "machines_router",
    "plans_router",
    "recommendations_router",
    "settings_router",
]
