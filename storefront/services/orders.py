"""Order placement.

The stock decrement and the order row share one transaction. If anything
fails after the decrement, rolling that transaction back is the compensating
action that returns the reserved units to stock.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront import geo
from storefront.access import Operation, require
from storefront.auth import Principal
from storefront.cache import invalidate
from storefront.core.errors import PersistenceFailure, StoreTooFar
from storefront.ledger import InventoryLedger, check_units
from storefront.models import Order
from storefront.services.catalog import get_store

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, session: Session, radius: float = geo.STORE_RADIUS):
        self.session = session
        self.radius = radius
        self.ledger = InventoryLedger(session)

    def _record_order(self, customer_id: int, store_id: int, product_name: str, units: int) -> Order:
        order = Order(
            customer_id=customer_id,
            store_id=store_id,
            product_name=product_name,
            units=units,
            ordered_at=datetime.now(),
        )
        self.session.add(order)
        self.session.flush()
        return order

    def place_order(self, principal: Principal, store_id: int, product_name: str, units: int) -> Order:
        require(principal, Operation.PLACE_ORDER)
        check_units(units)

        customer_location = geo.require_location(principal.location)
        store = get_store(self.session, store_id)
        distance = geo.distance(customer_location, geo.require_location(store))
        if distance > self.radius:
            raise StoreTooFar(store_id, distance, self.radius)

        try:
            remaining = self.ledger.reserve_and_decrement(store_id, product_name, units)
            order = self._record_order(principal.user_id, store_id, product_name, units)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception(
                "Order for %s x %r at store %s failed; stock decrement rolled back",
                units, product_name, store_id,
            )
            raise PersistenceFailure("order placement", exc) from exc
        except Exception:
            # Ends the transaction opened by the conditional update
            self.session.rollback()
            raise

        invalidate("report")
        logger.info(
            "Order %s: customer %s bought %s x %r at store %s (%s left)",
            order.id, principal.user_id, units, product_name, store_id, remaining,
            extra={"store_id": store_id, "product_name": product_name, "user_id": principal.user_id, "units": units},
        )
        return order


def place_order(session: Session, principal: Principal, store_id: int, product_name: str, units: int) -> Order:
    return OrderService(session).place_order(principal, store_id, product_name, units)
