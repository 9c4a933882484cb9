# app/routers/admin_stats.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import (
    DashboardSummary,
    RecentOrderSummary,
    SalesReport,
    TopProduct,
)
from app.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin/dashboard",
    tags=["Admin Dashboard"],
    dependencies=[Depends(require_admin)],
)

repo = StatsRepository()
service = StatsService(repo)


@router.get("/summary", response_model=DashboardSummary)
def get_summary(session: Session = Depends(get_session)):
    """
    Product, customer and order counters plus paid revenue.
    """
    return service.summary(session)


@router.get("/sales", response_model=SalesReport)
def get_monthly_sales(
    year: int | None = Query(default=None, ge=2000, le=2100),
    session: Session = Depends(get_session),
):
    """
    Paid revenue per month.

    Query params (optional):
      - year: defaults to the current year
    """
    return service.sales_by_month(session, year)


@router.get("/top-products", response_model=list[TopProduct])
def get_top_products(
    limit: int = Query(default=5, ge=1, le=50),
    session: Session = Depends(get_session),
):
    return service.top_products(session, limit)


@router.get("/recent-orders", response_model=list[RecentOrderSummary])
def get_recent_orders(session: Session = Depends(get_session)):
    """
    The five most recently paid orders.
    """
    return service.recent_orders(session)
