import os
from types import SimpleNamespace

import pytest

# Settings are read at import time; keep tests off Redis, rate limits and any local database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"

from sqlmodel import Session  # noqa: E402

from storefront.auth import Principal  # noqa: E402
from storefront.database import build_engine, create_db_and_tables  # noqa: E402
from storefront.models import Product, Role, Store, User, Warehouse  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    # File-backed so worker threads each get their own connection to the same data
    engine = build_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def world(session):
    """Customers, managers, an admin, three stores, a warehouse and their stock."""
    users = {
        "alice": User(name="alice", secret="alice-pw", latitude=10, longitude=10, role=Role.CUSTOMER),
        "bob": User(name="bob", secret="bob-pw", latitude=100, longitude=100, role=Role.CUSTOMER),
        "carol": User(name="carol", secret="carol-pw", role=Role.CUSTOMER),
        "mia": User(name="mia", secret="mia-pw", latitude=10, longitude=10, role=Role.MANAGER),
        "max": User(name="max", secret="max-pw", latitude=12, longitude=12, role=Role.MANAGER),
        "ada": User(name="ada", secret="ada-pw", latitude=0, longitude=0, role=Role.ADMIN),
    }
    session.add_all(users.values())
    session.commit()

    main_street = Store(name="Main Street", latitude=10, longitude=10, manager_id=users["mia"].id)
    harbour = Store(name="Harbour", latitude=12, longitude=12, manager_id=users["max"].id)
    outpost = Store(name="Outpost", latitude=80, longitude=80, manager_id=users["mia"].id)
    warehouse = Warehouse(area="North", latitude=20, longitude=20)
    session.add_all([main_street, harbour, outpost, warehouse])
    session.commit()

    session.add_all([
        Product(store_id=main_street.id, name="Widget", units=10, price_per_unit=2.5),
        Product(store_id=main_street.id, name="Gadget", units=5, price_per_unit=10.0),
        Product(store_id=harbour.id, name="Widget", units=4, price_per_unit=3.0),
        Product(store_id=outpost.id, name="Widget", units=50, price_per_unit=1.0),
    ])
    session.commit()

    principals = {name: Principal.from_user(user) for name, user in users.items()}
    return SimpleNamespace(
        main_street=main_street.id,
        harbour=harbour.id,
        outpost=outpost.id,
        warehouse=warehouse.id,
        **principals,
    )
