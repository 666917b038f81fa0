"""Audit appends and the bounded top-N reports built on orders and updates.

Reports are read-only and may interleave with writers; they see whatever
each statement reads at read-committed consistency. Equal timestamps or
counts are ordered by descending identity (row id, product name, user id).
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, func, select

from storefront.access import Operation, Scope, require
from storefront.auth import Principal
from storefront.cache import cache
from storefront.core.config import settings
from storefront.core.errors import persistence_errors
from storefront.models import Order, ProductUpdate, Store, User

REPORT_LIMIT = settings.REPORT_LIMIT


@dataclass(frozen=True)
class OrderView:
    order_id: int
    customer_id: int
    customer_name: str
    store_id: int
    product_name: str
    units: int
    ordered_at: datetime


@dataclass(frozen=True)
class UpdateView:
    update_id: int
    manager_id: int
    store_id: int
    product_name: str
    updated_at: datetime
    supply_request_id: Optional[int] = None


@dataclass(frozen=True)
class ProductPopularity:
    product_name: str
    order_count: int


@dataclass(frozen=True)
class CustomerPopularity:
    customer_id: int
    customer_name: str
    order_count: int


def append_update(
    session: Session,
    manager_id: int,
    store_id: int,
    product_name: str,
    updated_at: Optional[datetime] = None,
    supply_request_id: Optional[int] = None,
) -> ProductUpdate:
    """Add one audit entry to the caller's transaction"""
    entry = ProductUpdate(
        manager_id=manager_id,
        store_id=store_id,
        product_name=product_name,
        updated_at=updated_at or datetime.now(),
        supply_request_id=supply_request_id,
    )
    session.add(entry)
    session.flush()
    return entry


def _managed_by(query, principal: Principal):
    return query.join(Store, Order.store_id == Store.id).where(Store.manager_id == principal.user_id)


@cache("report")
@persistence_errors("recent orders report")
def recent_orders(session: Session, principal: Principal) -> List[OrderView]:
    scope = require(principal, Operation.VIEW_RECENT_ORDERS)

    query = select(Order, User.name).join(User, Order.customer_id == User.id)
    if scope == Scope.OWN:
        query = query.where(Order.customer_id == principal.user_id)
    elif scope == Scope.STORE:
        query = _managed_by(query, principal)
    query = query.order_by(Order.ordered_at.desc(), Order.id.desc()).limit(REPORT_LIMIT)

    return [
        OrderView(
            order_id=order.id,
            customer_id=order.customer_id,
            customer_name=customer_name,
            store_id=order.store_id,
            product_name=order.product_name,
            units=order.units,
            ordered_at=order.ordered_at,
        )
        for order, customer_name in session.exec(query).all()
    ]


@cache("report")
@persistence_errors("recent updates report")
def recent_updates(session: Session, principal: Principal) -> List[UpdateView]:
    scope = require(principal, Operation.VIEW_PRODUCT_UPDATES)

    query = select(ProductUpdate)
    if scope == Scope.OWN:
        query = query.where(ProductUpdate.manager_id == principal.user_id)
    query = query.order_by(ProductUpdate.updated_at.desc(), ProductUpdate.id.desc()).limit(REPORT_LIMIT)

    return [
        UpdateView(
            update_id=entry.id,
            manager_id=entry.manager_id,
            store_id=entry.store_id,
            product_name=entry.product_name,
            updated_at=entry.updated_at,
            supply_request_id=entry.supply_request_id,
        )
        for entry in session.exec(query).all()
    ]


@cache("report")
@persistence_errors("popular products report")
def popular_products(session: Session, principal: Principal) -> List[ProductPopularity]:
    scope = require(principal, Operation.VIEW_POPULAR)

    order_count = func.count(Order.id).label("order_count")
    query = select(Order.product_name, order_count)
    if scope == Scope.STORE:
        query = _managed_by(query, principal)
    query = (
        query.group_by(Order.product_name)
        .order_by(order_count.desc(), Order.product_name.desc())
        .limit(REPORT_LIMIT)
    )

    return [
        ProductPopularity(product_name=name, order_count=count)
        for name, count in session.exec(query).all()
    ]


@cache("report")
@persistence_errors("popular customers report")
def popular_customers(session: Session, principal: Principal) -> List[CustomerPopularity]:
    scope = require(principal, Operation.VIEW_POPULAR)

    order_count = func.count(Order.id).label("order_count")
    query = select(User.id, User.name, order_count).join(Order, Order.customer_id == User.id)
    if scope == Scope.STORE:
        query = _managed_by(query, principal)
    query = (
        query.group_by(User.id, User.name)
        .order_by(order_count.desc(), User.id.desc())
        .limit(REPORT_LIMIT)
    )

    return [
        CustomerPopularity(customer_id=user_id, customer_name=name, order_count=count)
        for user_id, name, count in session.exec(query).all()
    ]
