"""Authoritative stock counts for (store, product) pairs.

Every mutation is a single UPDATE evaluated by the database, so concurrent
callers on the same key are serialized there and never observe a torn
check-then-write. The ledger flushes but never commits: callers own the
transaction so a decrement and the order it pays for land together.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from storefront.core.errors import InsufficientStock, InvalidValue, ProductNotFound
from storefront.models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductChanges:
    """Partial product edit; a field left as None keeps its stored value."""
    units: Optional[int] = None
    price_per_unit: Optional[float] = None

    def is_empty(self) -> bool:
        return self.units is None and self.price_per_unit is None


def check_units(units: int) -> None:
    if isinstance(units, bool) or not isinstance(units, int) or units <= 0:
        raise InvalidValue("units", "must be a positive integer")


class InventoryLedger:
    def __init__(self, session: Session):
        self.session = session

    def _key(self, store_id: int, product_name: str):
        return (Product.store_id == store_id) & (Product.name == product_name)

    def available(self, store_id: int, product_name: str) -> Optional[int]:
        """Current unit count, or None when the product does not exist"""
        return self.session.exec(
            select(Product.units).where(self._key(store_id, product_name))
        ).first()

    def reserve_and_decrement(self, store_id: int, product_name: str, units: int) -> int:
        """
        Take ``units`` out of stock if, and only if, that many are on hand

        Args:
            store_id: Store holding the product
            product_name: Product name within the store
            units: Positive number of units to take

        Returns:
            Units remaining after the decrement

        Raises:
            InsufficientStock: fewer than ``units`` on hand, carries the available count
            ProductNotFound: no such product at this store
        """
        check_units(units)
        statement = (
            update(Product)
            .where(self._key(store_id, product_name), Product.units >= units)
            .values(units=Product.units - units, updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        on_hand = self.available(store_id, product_name)
        if result.rowcount == 1:
            logger.debug("Reserved %s x %r at store %s, %s left", units, product_name, store_id, on_hand)
            return on_hand

        if on_hand is None:
            raise ProductNotFound(store_id, product_name)
        logger.info(
            "Insufficient stock for %r at store %s: %s requested, %s available",
            product_name, store_id, units, on_hand,
        )
        raise InsufficientStock(store_id, product_name, requested=units, available=on_hand)

    def increment(self, store_id: int, product_name: str, units: int) -> int:
        check_units(units)
        statement = (
            update(Product)
            .where(self._key(store_id, product_name))
            .values(units=Product.units + units, updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        if result.rowcount != 1:
            raise ProductNotFound(store_id, product_name)
        return self.available(store_id, product_name)

    def set_levels(self, store_id: int, product_name: str, changes: ProductChanges) -> Product:
        values = {}
        if changes.units is not None:
            if changes.units < 0:
                raise InvalidValue("units", "cannot be negative")
            values["units"] = changes.units
        if changes.price_per_unit is not None:
            if changes.price_per_unit < 0:
                raise InvalidValue("price_per_unit", "cannot be negative")
            values["price_per_unit"] = changes.price_per_unit

        if values:
            values["updated_at"] = datetime.now()
            result = self.session.exec(
                update(Product)
                .where(self._key(store_id, product_name))
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise ProductNotFound(store_id, product_name)

        product = self.session.get(Product, (store_id, product_name), populate_existing=True)
        if product is None:
            raise ProductNotFound(store_id, product_name)
        return product
