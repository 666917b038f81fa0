import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from storefront import geo
from storefront.access import Operation, ensure_store_owner, require
from storefront.auth import Principal
from storefront.cache import invalidate
from storefront.core.errors import PersistenceFailure, StoreNotFound, persistence_errors
from storefront.ledger import InventoryLedger, ProductChanges
from storefront.models import Product, Store
from storefront.services.reports import append_update

logger = logging.getLogger(__name__)


@persistence_errors("store lookup")
def get_store(session: Session, store_id: int) -> Store:
    store = session.get(Store, store_id)
    if not store:
        raise StoreNotFound(store_id)
    return store


@persistence_errors("store search")
def nearby_stores(session: Session, principal: Principal, radius: float = geo.STORE_RADIUS) -> List[Store]:
    """Stores within ``radius`` of the principal, in store id order"""
    require(principal, Operation.BROWSE)
    origin = geo.require_location(principal.location)
    stores = session.exec(select(Store).order_by(Store.id)).all()
    return geo.within_radius(origin, stores, radius)


@persistence_errors("product listing")
def list_products(session: Session, principal: Principal, store_id: int) -> List[Product]:
    require(principal, Operation.BROWSE)
    get_store(session, store_id)
    return session.exec(
        select(Product).where(Product.store_id == store_id).order_by(Product.name)
    ).all()


def update_product(
    session: Session,
    principal: Principal,
    store_id: int,
    product_name: str,
    changes: ProductChanges,
) -> Product:
    """Manager edit of stock level and/or price, logged as one product update."""
    require(principal, Operation.UPDATE_PRODUCT)
    ensure_store_owner(get_store(session, store_id), principal)

    ledger = InventoryLedger(session)
    try:
        product = ledger.set_levels(store_id, product_name, changes)
        append_update(session, principal.user_id, store_id, product_name)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Product update failed for %r at store %s", product_name, store_id)
        raise PersistenceFailure("product update", exc) from exc
    except Exception:
        session.rollback()
        raise

    invalidate("report")
    logger.info(
        "Manager %s updated %r at store %s (units=%s, price=%s)",
        principal.user_id, product_name, store_id, product.units, product.price_per_unit,
    )
    return product
