"""Warehouse resupply requested by a store's manager.

The supply request, the stock increment and its product update are written in
one transaction, in that order and with the same timestamp. This is
sequencing within a single database, not a distributed transaction: if the
rollback itself fails, the request is reported as needing manual
reconciliation.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.access import Operation, ensure_store_owner, require
from storefront.auth import Principal
from storefront.cache import invalidate
from storefront.core.errors import (
    PersistenceFailure,
    ProductNotFound,
    WarehouseNotFound,
    persistence_errors,
)
from storefront.ledger import InventoryLedger, check_units
from storefront.models import ProductUpdate, SupplyRequest, Warehouse
from storefront.services.catalog import get_store
from storefront.services.reports import append_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplyReceipt:
    request: SupplyRequest
    update: ProductUpdate
    units_on_hand: int


class SupplyReplenishmentService:
    def __init__(self, session: Session):
        self.session = session
        self.ledger = InventoryLedger(session)

    def _record_request(self, manager_id: int, warehouse_id: int, store_id: int,
                        product_name: str, units: int, requested_at: datetime) -> SupplyRequest:
        request = SupplyRequest(
            manager_id=manager_id,
            warehouse_id=warehouse_id,
            store_id=store_id,
            product_name=product_name,
            units=units,
            requested_at=requested_at,
        )
        self.session.add(request)
        self.session.flush()
        return request

    def request_supply(self, principal: Principal, store_id: int, warehouse_id: int,
                       product_name: str, units: int) -> SupplyReceipt:
        require(principal, Operation.REQUEST_SUPPLY)
        ensure_store_owner(get_store(self.session, store_id), principal)
        check_units(units)
        with persistence_errors("supply request"):
            if self.session.get(Warehouse, warehouse_id) is None:
                raise WarehouseNotFound(warehouse_id)
            if self.ledger.available(store_id, product_name) is None:
                raise ProductNotFound(store_id, product_name)

        now = datetime.now()
        try:
            request = self._record_request(principal.user_id, warehouse_id, store_id,
                                           product_name, units, now)
            on_hand = self.ledger.increment(store_id, product_name, units)
            update = append_update(self.session, principal.user_id, store_id, product_name,
                                   updated_at=now, supply_request_id=request.id)
            self.session.commit()
        except SQLAlchemyError as exc:
            self._abort(exc, store_id, warehouse_id, product_name, units)
        except Exception:
            self.session.rollback()
            raise

        invalidate("report")
        logger.info(
            "Supply request %s: manager %s moved %s x %r from warehouse %s to store %s (%s on hand)",
            request.id, principal.user_id, units, product_name, warehouse_id, store_id, on_hand,
            extra={"store_id": store_id, "product_name": product_name, "user_id": principal.user_id, "units": units},
        )
        return SupplyReceipt(request=request, update=update, units_on_hand=on_hand)

    def _abort(self, exc: SQLAlchemyError, store_id: int, warehouse_id: int,
               product_name: str, units: int) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception(
                "Supply of %s x %r from warehouse %s to store %s may be partially applied; "
                "manual reconciliation needed",
                units, product_name, warehouse_id, store_id,
            )
            raise PersistenceFailure("supply request", exc, needs_reconciliation=True) from exc
        logger.exception(
            "Supply of %s x %r from warehouse %s to store %s failed and was rolled back",
            units, product_name, warehouse_id, store_id,
        )
        raise PersistenceFailure("supply request", exc) from exc


def request_supply(session: Session, principal: Principal, store_id: int, warehouse_id: int,
                   product_name: str, units: int) -> SupplyReceipt:
    return SupplyReplenishmentService(session).request_supply(
        principal, store_id, warehouse_id, product_name, units
    )
