"""Outcomes the core reports back to its caller.

Business-rule violations are expected results meant for display. Only
``PersistenceFailure`` signals a fault in a lower layer.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    code = "error"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        payload = {"error": self.code, "detail": self.message}
        payload.update(self.extra)
        return payload


class AuthFailed(StorefrontError):
    code = "auth_failed"

    def __init__(self, message: str = "Incorrect name or password"):
        super().__init__(message)


class Forbidden(StorefrontError):
    code = "forbidden"

    def __init__(self, role: str, operation: str):
        super().__init__(f"Role '{role}' may not {operation.replace('_', ' ')}",
                         role=role, operation=operation)
        self.role = role
        self.operation = operation


class NotStoreOwner(StorefrontError):
    code = "not_store_owner"

    def __init__(self, store_id: int, user_id: int):
        super().__init__(f"User {user_id} does not manage store {store_id}",
                         store_id=store_id)
        self.store_id = store_id
        self.user_id = user_id


class LocationUnavailable(StorefrontError):
    code = "location_unavailable"

    def __init__(self, message: str = "No location recorded for this user"):
        super().__init__(message)


class StoreTooFar(StorefrontError):
    code = "store_too_far"

    def __init__(self, store_id: int, distance: float, radius: float):
        super().__init__(
            f"Store {store_id} is {distance:.2f} away, outside the {radius:g} radius",
            store_id=store_id, distance=distance, radius=radius,
        )
        self.store_id = store_id
        self.distance = distance
        self.radius = radius


class StoreNotFound(StorefrontError):
    code = "store_not_found"

    def __init__(self, store_id: int):
        super().__init__(f"Store {store_id} not found", store_id=store_id)
        self.store_id = store_id


class WarehouseNotFound(StorefrontError):
    code = "warehouse_not_found"

    def __init__(self, warehouse_id: int):
        super().__init__(f"Warehouse {warehouse_id} not found", warehouse_id=warehouse_id)
        self.warehouse_id = warehouse_id


class UserNotFound(StorefrontError):
    code = "user_not_found"

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found", user_id=user_id)
        self.user_id = user_id


class ProductNotFound(StorefrontError):
    code = "product_not_found"

    def __init__(self, store_id: int, product_name: str):
        super().__init__(f"Product '{product_name}' not found in store {store_id}",
                         store_id=store_id, product_name=product_name)
        self.store_id = store_id
        self.product_name = product_name


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"

    def __init__(self, store_id: int, product_name: str, requested: int, available: int):
        super().__init__(
            f"Only {available} units of '{product_name}' available, {requested} requested",
            store_id=store_id, product_name=product_name,
            requested=requested, available=available,
        )
        self.store_id = store_id
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InvalidValue(StorefrontError):
    code = "invalid_value"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}", field=field)
        self.field = field


class NameTaken(StorefrontError):
    code = "name_taken"

    def __init__(self, name: str):
        super().__init__(f"User name '{name}' is already registered")
        self.name = name


class PersistenceFailure(StorefrontError):
    code = "persistence_failure"

    def __init__(self, operation: str, cause: Optional[BaseException] = None,
                 needs_reconciliation: bool = False):
        message = f"Could not complete {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, needs_reconciliation=needs_reconciliation)
        self.operation = operation
        self.cause = cause
        self.needs_reconciliation = needs_reconciliation


@contextmanager
def persistence_errors(operation: str) -> Iterator[None]:
    """Re-raise database errors from the wrapped block or function as ``PersistenceFailure``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error during %s: %s", operation, exc)
        raise PersistenceFailure(operation, exc) from exc
