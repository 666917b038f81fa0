from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKeyConstraint
from sqlmodel import Field, SQLModel


class Order(SQLModel, table=True):
    __tablename__ = "orders"
    __table_args__ = (
        ForeignKeyConstraint(
            ["store_id", "product_name"], ["products.store_id", "products.name"]
        ),
        CheckConstraint("units > 0", name="ck_orders_units_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="users.id", index=True)
    store_id: int = Field(index=True)
    product_name: str
    units: int
    ordered_at: datetime = Field(default_factory=datetime.now, index=True)
