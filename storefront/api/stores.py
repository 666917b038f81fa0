from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.auth import Principal
from storefront.core.security import get_principal
from storefront.database import get_session
from storefront.ledger import ProductChanges
from storefront.schemas import ProductEdit, ProductRead, StoreRead
from storefront.services import catalog

router = APIRouter()


@router.get("/nearby", response_model=List[StoreRead])
def nearby_stores(
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    return [StoreRead.model_validate(store) for store in catalog.nearby_stores(session, current)]


@router.get("/{store_id}/products", response_model=List[ProductRead])
def list_products(
    store_id: int,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)
):
    return [
        ProductRead.model_validate(product)
        for product in catalog.list_products(session, current, store_id)
    ]


@router.patch("/{store_id}/products/{product_name}", response_model=ProductRead)
def update_product(
    store_id: int,
    product_name: str,
    payload: ProductEdit,
    session: Session = Depends(get_session),
    current: Principal = Depends(get_principal)  # Manager of this store only
):
    changes = ProductChanges(**payload.model_dump(exclude_unset=True))
    product = catalog.update_product(session, current, store_id, product_name, changes)
    return ProductRead.model_validate(product)
