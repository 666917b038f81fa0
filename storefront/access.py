"""Role gating for every privileged operation.

One table maps (role, operation) to the scope that role is allowed to act in.
A missing entry means the role is denied.
"""
from enum import Enum
from typing import Dict, Optional

from storefront.core.errors import Forbidden, NotStoreOwner
from storefront.models import Role, Store


class Operation(str, Enum):
    BROWSE = "browse"
    PLACE_ORDER = "place_order"
    VIEW_RECENT_ORDERS = "view_recent_orders"
    UPDATE_PRODUCT = "update_product"
    VIEW_PRODUCT_UPDATES = "view_product_updates"
    VIEW_POPULAR = "view_popular"
    REQUEST_SUPPLY = "request_supply"
    MANAGE_USERS = "manage_users"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class Scope(str, Enum):
    OWN = "own"          # rows belonging to the principal
    STORE = "store"      # rows of stores the principal manages
    GLOBAL = "global"


_PERMISSIONS: Dict[Operation, Dict[Role, Scope]] = {
    Operation.BROWSE: {
        Role.CUSTOMER: Scope.GLOBAL,
        Role.MANAGER: Scope.GLOBAL,
        Role.ADMIN: Scope.GLOBAL,
    },
    Operation.PLACE_ORDER: {Role.CUSTOMER: Scope.OWN},
    Operation.VIEW_RECENT_ORDERS: {
        Role.CUSTOMER: Scope.OWN,
        Role.MANAGER: Scope.STORE,
        Role.ADMIN: Scope.GLOBAL,
    },
    Operation.UPDATE_PRODUCT: {Role.MANAGER: Scope.STORE},
    Operation.VIEW_PRODUCT_UPDATES: {
        Role.MANAGER: Scope.OWN,
        Role.ADMIN: Scope.GLOBAL,
    },
    Operation.VIEW_POPULAR: {
        Role.MANAGER: Scope.STORE,
        Role.ADMIN: Scope.GLOBAL,
    },
    Operation.REQUEST_SUPPLY: {Role.MANAGER: Scope.STORE},
    Operation.MANAGE_USERS: {Role.ADMIN: Scope.GLOBAL},
}


def scope_for(role: Role, operation: Operation) -> Optional[Scope]:
    return _PERMISSIONS[operation].get(Role(role))


def authorize(role: Role, operation: Operation) -> Decision:
    if scope_for(role, operation) is None:
        return Decision.DENY
    return Decision.ALLOW


def require(principal, operation: Operation) -> Scope:
    """Raise Forbidden unless the principal's role may invoke ``operation``; return its scope."""
    scope = scope_for(principal.role, operation)
    if scope is None:
        raise Forbidden(Role(principal.role).value, operation.value)
    return scope


def ensure_store_owner(store: Store, principal) -> None:
    if store.manager_id != principal.user_id:
        raise NotStoreOwner(store.id, principal.user_id)
