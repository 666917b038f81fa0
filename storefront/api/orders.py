from typing import List

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core import limiter
from storefront.core.config import settings
from storefront.core.security import get_principal
from storefront.database import get_session
from storefront.schemas import OrderCreate, OrderRead
from storefront.services import reports
from storefront.services.orders import OrderService
from storefront.services.reports import OrderView

router = APIRouter()


@router.post("/", response_model=OrderRead)
@limiter.limit(settings.ORDER_RATE_LIMIT)
def place_order(
    request: Request,
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    order = OrderService(session).place_order(
        current, payload.store_id, payload.product_name, payload.units
    )
    return OrderRead.model_validate(order)


@router.get("/recent", response_model=List[OrderView])
def recent_orders(
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    return reports.recent_orders(session, current)
