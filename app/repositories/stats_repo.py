# app/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User


class StatsRepository:
    """
    Aggregate queries behind the admin dashboard; never writes.
    """

    def _count(self, session: Session, stmt) -> int:
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        return int(session.exec(stmt).one() or 0)

    def count_products(self, session: Session) -> int:
        return self._count(session, select(func.count()).select_from(Product))

    def count_out_of_stock(self, session: Session) -> int:
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(Product.stock_status == "OutOfStock")
        )
        return self._count(session, stmt)

    def count_customers(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == "user")
        return self._count(session, stmt)

    def count_orders(self, session: Session, paid_only: bool = False) -> int:
        stmt = select(func.count()).select_from(Order)
        if paid_only:
            stmt = stmt.where(Order.is_paid == True)  # noqa: E712
        return self._count(session, stmt)

    def paid_revenue(self, session: Session) -> float:
        stmt = select(func.coalesce(func.sum(Order.total_price), 0.0)).where(
            Order.is_paid == True  # noqa: E712
        )
        return float(session.exec(stmt).one() or 0.0)

    def monthly_sales(self, session: Session, year: int) -> list[tuple]:
        """
        Paid revenue and order count per month of paid_at for one year.
        """
        month_expr = func.extract("month", Order.paid_at)

        stmt = (
            select(
                month_expr.label("month"),
                func.coalesce(func.sum(Order.total_price), 0.0).label("revenue"),
                func.count(Order.id).label("order_count"),
            )
            .where(
                Order.is_paid == True,  # noqa: E712
                func.extract("year", Order.paid_at) == year,
            )
            .group_by(month_expr)
            .order_by(month_expr)
        )

        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 5) -> list[tuple]:
        """
        Best sellers by quantity across paid orders.

        Names come from the order lines so deleted products still show.
        """
        qty_sum = func.coalesce(func.sum(OrderItem.quantity), 0)
        revenue_sum = func.coalesce(
            func.sum(OrderItem.quantity * OrderItem.unit_price),
            0.0,
        )

        stmt = (
            select(
                OrderItem.product_id,
                OrderItem.name,
                qty_sum.label("total_quantity"),
                revenue_sum.label("total_revenue"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .where(Order.is_paid == True)  # noqa: E712
            .group_by(OrderItem.product_id, OrderItem.name)
            .order_by(qty_sum.desc())
            .limit(limit)
        )

        return list(session.exec(stmt).all())

    def recent_paid_orders(self, session: Session, limit: int = 5) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.is_paid == True)  # noqa: E712
            .order_by(Order.paid_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())
