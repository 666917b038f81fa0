from storefront.services.catalog import list_products, nearby_stores, update_product
from storefront.services.orders import OrderService, place_order
from storefront.services.reports import (
    popular_customers,
    popular_products,
    recent_orders,
    recent_updates,
)
from storefront.services.supply import SupplyReplenishmentService, request_supply
from storefront.services.users import (
    get_user,
    list_users,
    register_customer,
    update_user,
)

__all__ = [
    "OrderService",
    "SupplyReplenishmentService",
    "get_user",
    "list_products",
    "list_users",
    "nearby_stores",
    "place_order",
    "popular_customers",
    "popular_products",
    "recent_orders",
    "recent_updates",
    "register_customer",
    "request_supply",
    "update_product",
    "update_user",
]
