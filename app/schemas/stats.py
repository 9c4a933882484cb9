# app/schemas/stats.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import OrderStatus


class DashboardSummary(SQLModel):
    """
    Headline counters for the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    out_of_stock_products: int
    total_customers: int
    total_orders: int
    paid_orders: int
    total_revenue: float


class MonthlySales(SQLModel):
    """
    Paid revenue for one calendar month.
    """
    model_config = ConfigDict(extra="forbid")

    month: int
    total_revenue: float
    order_count: int


class SalesReport(SQLModel):
    year: int
    months: list[MonthlySales]


class TopProduct(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    name: str
    total_quantity: int
    total_revenue: float


class RecentOrderSummary(SQLModel):
    """
    Lightweight info for the last paid orders.
    """
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    user_id: uuid.UUID
    full_name: str
    total_price: float
    status: OrderStatus
    paid_at: datetime | None
    created_at: datetime
