from .auth import router as auth_router
from .users import router as users_router
from .stores import router as stores_router
from .orders import router as orders_router
from .supply import router as supply_router
from .reports import router as reports_router

__all__ = [
    "auth_router",
    "users_router",
    "stores_router",
    "orders_router",
    "supply_router",
    "reports_router",
]
