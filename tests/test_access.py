import pytest

from storefront.access import (
    Decision,
    Operation,
    Scope,
    authorize,
    ensure_store_owner,
    require,
    scope_for,
)
from storefront.auth import Principal
from storefront.core.errors import Forbidden, NotStoreOwner
from storefront.models import Role, Store

ALLOWED = {
    Operation.BROWSE: {Role.CUSTOMER, Role.MANAGER, Role.ADMIN},
    Operation.PLACE_ORDER: {Role.CUSTOMER},
    Operation.VIEW_RECENT_ORDERS: {Role.CUSTOMER, Role.MANAGER, Role.ADMIN},
    Operation.UPDATE_PRODUCT: {Role.MANAGER},
    Operation.VIEW_PRODUCT_UPDATES: {Role.MANAGER, Role.ADMIN},
    Operation.VIEW_POPULAR: {Role.MANAGER, Role.ADMIN},
    Operation.REQUEST_SUPPLY: {Role.MANAGER},
    Operation.MANAGE_USERS: {Role.ADMIN},
}


@pytest.mark.parametrize("operation", list(Operation))
@pytest.mark.parametrize("role", list(Role))
def test_authorization_table(role, operation):
    expected = Decision.ALLOW if role in ALLOWED[operation] else Decision.DENY
    assert authorize(role, operation) == expected


def test_recent_orders_scope_depends_on_role():
    assert scope_for(Role.CUSTOMER, Operation.VIEW_RECENT_ORDERS) == Scope.OWN
    assert scope_for(Role.MANAGER, Operation.VIEW_RECENT_ORDERS) == Scope.STORE
    assert scope_for(Role.ADMIN, Operation.VIEW_RECENT_ORDERS) == Scope.GLOBAL
    assert scope_for(Role.CUSTOMER, Operation.VIEW_POPULAR) is None


def test_customer_supply_request_denied_even_for_own_store():
    customer = Principal(user_id=7, name="c", role=Role.CUSTOMER)
    store = Store(id=1, name="s", latitude=0, longitude=0, manager_id=7)

    # Store ownership alone grants nothing
    ensure_store_owner(store, customer)
    with pytest.raises(Forbidden) as excinfo:
        require(customer, Operation.REQUEST_SUPPLY)
    assert excinfo.value.role == "customer"
    assert excinfo.value.operation == "request_supply"


def test_store_owner_check_is_distinct_from_role_check():
    manager = Principal(user_id=2, name="m", role=Role.MANAGER)
    store = Store(id=9, name="s", latitude=0, longitude=0, manager_id=3)

    assert require(manager, Operation.REQUEST_SUPPLY) == Scope.STORE
    with pytest.raises(NotStoreOwner) as excinfo:
        ensure_store_owner(store, manager)
    assert not isinstance(excinfo.value, Forbidden)
    assert excinfo.value.store_id == 9
