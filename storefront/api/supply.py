from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core import limiter
from storefront.core.config import settings
from storefront.core.security import get_principal
from storefront.database import get_session
from storefront.schemas import SupplyCreate, SupplyRead
from storefront.services.supply import SupplyReplenishmentService

router = APIRouter()


@router.post("/", response_model=SupplyRead)
@limiter.limit(settings.ORDER_RATE_LIMIT)
def request_supply(
    request: Request,
    payload: SupplyCreate,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)  # Manager of the store only
):
    receipt = SupplyReplenishmentService(session).request_supply(
        current, payload.store_id, payload.warehouse_id, payload.product_name, payload.units
    )
    supply_request = receipt.request
    return SupplyRead(
        request_id=supply_request.id,
        update_id=receipt.update.id,
        manager_id=supply_request.manager_id,
        warehouse_id=supply_request.warehouse_id,
        store_id=supply_request.store_id,
        product_name=supply_request.product_name,
        units=supply_request.units,
        units_on_hand=receipt.units_on_hand,
        requested_at=supply_request.requested_at,
    )
