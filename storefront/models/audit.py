from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ProductUpdate(SQLModel, table=True):
    """Append-only record of who changed a product's stock or price, and when"""
    __tablename__ = "product_updates"

    id: Optional[int] = Field(default=None, primary_key=True)
    manager_id: int = Field(foreign_key="users.id", index=True)
    store_id: int = Field(index=True)
    product_name: str
    updated_at: datetime = Field(default_factory=datetime.now, index=True)
    # Set when the entry was produced by a supply request
    supply_request_id: Optional[int] = Field(default=None, foreign_key="supply_requests.id")
