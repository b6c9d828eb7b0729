"""
app/api/routers package marker.
"""

from app.api.routers.accounts import router as accounts_router

__all__ = [
    "accounts_router",
]
