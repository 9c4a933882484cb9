# app/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Queries over orders and their lines.

    Writes only flush. Checkout changes the order, product stock and the
    cart together, and OrderService owns the single commit for all of it.
    """

    def _newest_first(self, stmt, skip: int, limit: int):
        return stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).where(Order.user_id == user_id)
        return session.exec(self._newest_first(stmt, skip, limit)).all()

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[Order]:
        stmt = select(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        return session.exec(self._newest_first(stmt, skip, limit)).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def add(self, session: Session, order: Order) -> Order:
        # flush so order.id exists for the lines
        session.add(order)
        session.flush()
        return order

    def add_items(self, session: Session, items: list[OrderItem]) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items

    def list_items_for_order(
        self, session: Session, order_id: uuid.UUID
    ) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return session.exec(stmt).all()
