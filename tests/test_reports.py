import pytest
from sqlalchemy.exc import OperationalError

from storefront.core.errors import Forbidden, PersistenceFailure
from storefront.ledger import ProductChanges
from storefront.services import reports
from storefront.services.catalog import update_product
from storefront.services.orders import place_order
from storefront.services.supply import request_supply


@pytest.fixture
def trading(session, world):
    """alice buys 3 Widgets and a Gadget on Main Street and a Widget at Harbour; bob buys at Outpost"""
    for _ in range(3):
        place_order(session, world.alice, world.main_street, "Widget", 1)
    place_order(session, world.alice, world.main_street, "Gadget", 1)
    place_order(session, world.alice, world.harbour, "Widget", 1)
    place_order(session, world.bob, world.outpost, "Widget", 2)
    return world


def test_recent_orders_are_limited_and_newest_first(session, world):
    ids = [place_order(session, world.alice, world.main_street, "Widget", 1).id for _ in range(7)]

    views = reports.recent_orders(session, world.alice)

    assert [view.order_id for view in views] == list(reversed(ids))[:5]
    assert all(view.customer_name == "alice" for view in views)


def test_recent_orders_scoped_by_role(session, trading):
    world = trading

    assert {view.customer_id for view in reports.recent_orders(session, world.bob)} == {world.bob.user_id}
    assert reports.recent_orders(session, world.carol) == []

    max_view = reports.recent_orders(session, world.max)
    assert [(view.store_id, view.product_name) for view in max_view] == [(world.harbour, "Widget")]

    mia_stores = {view.store_id for view in reports.recent_orders(session, world.mia)}
    assert mia_stores == {world.main_street, world.outpost}

    assert len(reports.recent_orders(session, world.ada)) == 5


def test_popular_products(session, trading):
    world = trading

    assert reports.popular_products(session, world.mia) == [
        reports.ProductPopularity("Widget", 4),
        reports.ProductPopularity("Gadget", 1),
    ]
    assert reports.popular_products(session, world.max) == [reports.ProductPopularity("Widget", 1)]
    assert reports.popular_products(session, world.ada) == [
        reports.ProductPopularity("Widget", 5),
        reports.ProductPopularity("Gadget", 1),
    ]


def test_popular_customers(session, trading):
    world = trading

    assert reports.popular_customers(session, world.ada) == [
        reports.CustomerPopularity(world.alice.user_id, "alice", 5),
        reports.CustomerPopularity(world.bob.user_id, "bob", 1),
    ]
    assert reports.popular_customers(session, world.mia) == [
        reports.CustomerPopularity(world.alice.user_id, "alice", 4),
        reports.CustomerPopularity(world.bob.user_id, "bob", 1),
    ]
    assert reports.popular_customers(session, world.max) == [
        reports.CustomerPopularity(world.alice.user_id, "alice", 1),
    ]


def test_popular_ties_broken_by_descending_identity(session, world):
    place_order(session, world.alice, world.main_street, "Gadget", 1)
    place_order(session, world.bob, world.outpost, "Widget", 1)

    names = [row.product_name for row in reports.popular_products(session, world.mia)]
    assert names == ["Widget", "Gadget"]

    customers = [row.customer_id for row in reports.popular_customers(session, world.mia)]
    assert customers == [world.bob.user_id, world.alice.user_id]


def test_recent_updates_scoped_to_manager(session, world):
    update_product(session, world.mia, world.main_street, "Widget", ProductChanges(units=12))
    update_product(session, world.max, world.harbour, "Widget", ProductChanges(price_per_unit=3.5))
    receipt = request_supply(session, world.mia, world.main_street, world.warehouse, "Gadget", 5)

    mine = reports.recent_updates(session, world.mia)
    assert [view.manager_id for view in mine] == [world.mia.user_id] * 2
    assert mine[0].supply_request_id == receipt.request.id
    assert mine[1].supply_request_id is None

    everyone = reports.recent_updates(session, world.ada)
    assert len(everyone) == 3
    assert everyone[0].update_id == receipt.update.id


def test_recent_updates_limited(session, world):
    for units in range(1, 8):
        update_product(session, world.mia, world.main_street, "Widget", ProductChanges(units=units))

    views = reports.recent_updates(session, world.mia)
    assert len(views) == 5
    assert [view.update_id for view in views] == sorted((view.update_id for view in views), reverse=True)


@pytest.mark.parametrize("report", [
    reports.recent_updates,
    reports.popular_products,
    reports.popular_customers,
])
def test_customers_cannot_see_store_reports(session, world, report):
    with pytest.raises(Forbidden):
        report(session, world.alice)


@pytest.mark.parametrize("report", [
    reports.recent_orders,
    reports.recent_updates,
    reports.popular_products,
    reports.popular_customers,
])
def test_database_errors_surface_as_persistence_failure(session, world, monkeypatch, report):
    def broken_exec(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(session, "exec", broken_exec)

    with pytest.raises(PersistenceFailure) as excinfo:
        report(session, world.ada)
    assert isinstance(excinfo.value.cause, OperationalError)
