"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .health import router as health_router
from .inquiries import router as inquiries_router
from .orders import router as orders_router
from .products import router as products_router
from .upload_history import router as upload_history_router
from .users import router as users_router

__all__ = [
    "health_router",
    "inquiries_router",
    "orders_router",
    "products_router",
    "upload_history_router",
    "users_router",
]
