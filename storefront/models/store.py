from typing import Optional

from sqlmodel import Field, SQLModel


class Store(SQLModel, table=True):
    __tablename__ = "stores"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    latitude: float
    longitude: float
    manager_id: int = Field(foreign_key="users.id", index=True)


class Warehouse(SQLModel, table=True):
    __tablename__ = "warehouses"

    id: Optional[int] = Field(default=None, primary_key=True)
    area: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
