"""Request and response bodies for the HTTP layer.

Field constraints here are front-end input validation; business rules are
enforced again by the core.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from storefront.models import Role


class UserCreate(SQLModel):
    name: str = Field(min_length=1)
    secret: str = Field(min_length=1)
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class UserUpdate(SQLModel):
    name: Optional[str] = None
    secret: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class UserRead(SQLModel):
    id: int
    name: str
    role: Role
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class LoginRequest(SQLModel):
    name: str
    secret: str


class LoginResponse(SQLModel):
    api_key: str
    user_id: int
    role: Role


class StoreRead(SQLModel):
    id: int
    name: str
    latitude: float
    longitude: float
    manager_id: int


class ProductRead(SQLModel):
    store_id: int
    name: str
    units: int
    price_per_unit: float
    updated_at: datetime


class ProductEdit(SQLModel):
    units: Optional[int] = Field(default=None, ge=0)
    price_per_unit: Optional[float] = Field(default=None, ge=0)


class OrderCreate(SQLModel):
    store_id: int
    product_name: str
    units: int = Field(gt=0)


class OrderRead(SQLModel):
    id: int
    customer_id: int
    store_id: int
    product_name: str
    units: int
    ordered_at: datetime


class SupplyCreate(SQLModel):
    store_id: int
    warehouse_id: int
    product_name: str
    units: int = Field(gt=0)


class SupplyRead(SQLModel):
    request_id: int
    update_id: int
    manager_id: int
    warehouse_id: int
    store_id: int
    product_name: str
    units: int
    units_on_hand: int
    requested_at: datetime
