from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core.security import get_principal
from storefront.database import get_session
from storefront.services import reports
from storefront.services.reports import CustomerPopularity, ProductPopularity, UpdateView

router = APIRouter()


@router.get("/updates", response_model=List[UpdateView])
def recent_updates(
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    """Five most recent product updates; managers see their own, admins see all."""
    return reports.recent_updates(session, current)


@router.get("/popular-products", response_model=List[ProductPopularity])
def popular_products(
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    return reports.popular_products(session, current)


@router.get("/popular-customers", response_model=List[CustomerPopularity])
def popular_customers(
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    return reports.popular_customers(session, current)
