from datetime import date, datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Product(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    category: str
    image: str
    price: str
    description: str


class Discount(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    code: str = Field(index=True)
    type: str
    value: float
    start_date: date
    end_date: date
    time_frame_start: str
    time_frame_end: str
    minimum_order_value: float
    minimum_items: int
    applicable_categories: list[str] = Field(sa_column=Column(JSON, nullable=False))
    usage_limit: int


class Contact(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str
    phone: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CustomerInfo(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, foreign_key="account.email")
    phone: str
    address: str
    city: str
    country: str
    postal_code: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
