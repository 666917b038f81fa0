import math

import pytest
from sqlmodel import Session, select

from storefront.core.errors import (
    Forbidden,
    InvalidValue,
    LocationUnavailable,
    NotStoreOwner,
    ProductNotFound,
    StoreNotFound,
)
from storefront.ledger import ProductChanges
from storefront.models import Product, ProductUpdate
from storefront.services.catalog import list_products, nearby_stores, update_product


def updates(engine):
    with Session(engine) as session:
        return session.exec(select(ProductUpdate)).all()


def test_nearby_stores(session, world):
    assert [store.name for store in nearby_stores(session, world.alice)] == ["Main Street", "Harbour"]
    assert [store.name for store in nearby_stores(session, world.bob)] == ["Outpost"]
    assert [store.name for store in nearby_stores(session, world.mia)] == ["Main Street", "Harbour"]


def test_nearby_stores_radius_is_inclusive(session, world):
    # Harbour sits exactly on the boundary
    names = [store.name for store in nearby_stores(session, world.alice, radius=math.hypot(2, 2))]
    assert names == ["Main Street", "Harbour"]
    assert [store.name for store in nearby_stores(session, world.alice, radius=2.8)] == ["Main Street"]


def test_nearby_stores_needs_location(session, world):
    with pytest.raises(LocationUnavailable):
        nearby_stores(session, world.carol)


def test_list_products_sorted_by_name(session, world):
    products = list_products(session, world.alice, world.main_street)
    assert [(p.name, p.units, p.price_per_unit) for p in products] == [
        ("Gadget", 5, 10.0),
        ("Widget", 10, 2.5),
    ]
    with pytest.raises(StoreNotFound):
        list_products(session, world.alice, 999)


def test_manager_updates_own_product(session, engine, world):
    product = update_product(session, world.mia, world.main_street, "Widget", ProductChanges(units=0))
    assert (product.units, product.price_per_unit) == (0, 2.5)

    product = update_product(session, world.mia, world.main_street, "Widget",
                             ProductChanges(price_per_unit=3.25))
    assert (product.units, product.price_per_unit) == (0, 3.25)

    with Session(engine) as other:
        stored = other.get(Product, (world.main_street, "Widget"))
        assert (stored.units, stored.price_per_unit) == (0, 3.25)

    entries = updates(engine)
    assert len(entries) == 2
    assert all(entry.manager_id == world.mia.user_id for entry in entries)
    assert all(entry.supply_request_id is None for entry in entries)


def test_update_of_another_managers_store_rejected(session, engine, world):
    with pytest.raises(NotStoreOwner):
        update_product(session, world.mia, world.harbour, "Widget", ProductChanges(units=99))
    assert updates(engine) == []


@pytest.mark.parametrize("who", ["alice", "ada"])
def test_only_managers_update_products(session, world, who):
    with pytest.raises(Forbidden):
        update_product(session, getattr(world, who), world.main_street, "Widget", ProductChanges(units=1))


def test_update_rejects_bad_values_without_logging(session, engine, world):
    with pytest.raises(InvalidValue):
        update_product(session, world.mia, world.main_street, "Widget", ProductChanges(units=-5))
    with pytest.raises(ProductNotFound):
        update_product(session, world.mia, world.main_street, "Sprocket", ProductChanges(units=5))
    assert updates(engine) == []
