# app/services/stats_service.py
from datetime import datetime, timezone

from sqlmodel import Session

from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import (
    DashboardSummary,
    MonthlySales,
    RecentOrderSummary,
    SalesReport,
    TopProduct,
)


class StatsService:
    """
    Shapes raw dashboard aggregates into response models.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def summary(self, session: Session) -> DashboardSummary:
        return DashboardSummary(
            total_products=self.repo.count_products(session),
            out_of_stock_products=self.repo.count_out_of_stock(session),
            total_customers=self.repo.count_customers(session),
            total_orders=self.repo.count_orders(session),
            paid_orders=self.repo.count_orders(session, paid_only=True),
            total_revenue=round(self.repo.paid_revenue(session), 2),
        )

    def sales_by_month(self, session: Session, year: int | None = None) -> SalesReport:
        """
        Twelve MonthlySales entries for the year (default: current year);
        months without paid orders report zero.
        """
        if year is None:
            year = datetime.now(timezone.utc).year

        by_month = {
            int(month): (float(revenue or 0.0), int(order_count or 0))
            for month, revenue, order_count in self.repo.monthly_sales(session, year)
        }

        months = []
        for month in range(1, 13):
            revenue, order_count = by_month.get(month, (0.0, 0))
            months.append(
                MonthlySales(
                    month=month,
                    total_revenue=round(revenue, 2),
                    order_count=order_count,
                )
            )
        return SalesReport(year=year, months=months)

    def top_products(self, session: Session, limit: int = 5) -> list[TopProduct]:
        return [
            TopProduct(
                product_id=product_id,
                name=name,
                total_quantity=int(total_quantity or 0),
                total_revenue=round(float(total_revenue or 0.0), 2),
            )
            for product_id, name, total_quantity, total_revenue in self.repo.top_products(
                session, limit=limit
            )
        ]

    def recent_orders(self, session: Session, limit: int = 5) -> list[RecentOrderSummary]:
        return [
            RecentOrderSummary(
                id=o.id,
                user_id=o.user_id,
                full_name=o.full_name,
                total_price=o.total_price,
                status=o.status,
                paid_at=o.paid_at,
                created_at=o.created_at,
            )
            for o in self.repo.recent_paid_orders(session, limit=limit)
        ]
