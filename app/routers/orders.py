# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_user, require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatus,
    OrderWithItemsRead,
    OrderStatusUpdate,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

# Back-office routes share the prefix; main.py mounts them after the /me
# routes so "/me" is never parsed as an order id.
staff = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(require_admin)],
)

service = OrderService(OrderRepository(), CartRepository(), ProductRepository())


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    """
    Turn the shopper's basket into a Pending order.

    Every line is re-checked against live stock first; if any fails the
    response is 400 listing each offending line and nothing is written.
    On success stock is deducted and the basket emptied.
    """
    return service.create_order_from_cart(session, shopper.id, payload)


@router.get("/me", response_model=list[OrderRead])
def my_orders(
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """Order history, newest first, without lines."""
    return service.list_user_orders(session, shopper.id, skip, limit)


@router.get("/me/{order_id}", response_model=OrderWithItemsRead)
def my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    return service.get_user_order(session, shopper.id, order_id)


@router.put("/me/{order_id}/pay", response_model=OrderRead)
def pay_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    return service.mark_paid(session, shopper.id, order_id)


@staff.get("", response_model=list[OrderRead])
def all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
):
    return service.list_all_orders(session, skip, limit, status_filter)


@staff.get("/{order_id}", response_model=OrderWithItemsRead)
def order_detail(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_order_admin(session, order_id)


@staff.patch("/{order_id}/status", response_model=OrderRead)
def move_order(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Advance an order through fulfilment.

    Pending goes to Processing or Cancelled, Processing to Shipped or
    Cancelled, Shipped to Delivered. Anything else is a 400.
    """
    return service.update_status(session, order_id, payload)
