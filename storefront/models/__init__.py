from .user import User, Role
from .store import Store, Warehouse
from .product import Product
from .order import Order
from .supply import SupplyRequest
from .audit import ProductUpdate

__all__ = [
    "User",
    "Role",
    "Store",
    "Warehouse",
    "Product",
    "Order",
    "SupplyRequest",
    "ProductUpdate",
]
