from datetime import datetime

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel


class Product(SQLModel, table=True):
    """Stock of one product at one store, keyed by (store_id, name)."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("units >= 0", name="ck_products_units_non_negative"),
        CheckConstraint("price_per_unit >= 0", name="ck_products_price_non_negative"),
    )

    store_id: int = Field(foreign_key="stores.id", primary_key=True)
    name: str = Field(primary_key=True)
    units: int = Field(default=0)
    price_per_unit: float = Field(default=0.0)
    updated_at: datetime = Field(default_factory=datetime.now)
