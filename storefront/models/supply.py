from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKeyConstraint
from sqlmodel import Field, SQLModel


class SupplyRequest(SQLModel, table=True):
    """Manager-initiated transfer of stock from a warehouse into a store"""
    __tablename__ = "supply_requests"
    __table_args__ = (
        ForeignKeyConstraint(
            ["store_id", "product_name"], ["products.store_id", "products.name"]
        ),
        CheckConstraint("units > 0", name="ck_supply_requests_units_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    manager_id: int = Field(foreign_key="users.id", index=True)
    warehouse_id: int = Field(foreign_key="warehouses.id")
    store_id: int
    product_name: str
    units: int
    requested_at: datetime = Field(default_factory=datetime.now)
