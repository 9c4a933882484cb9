# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_user
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from app.services.cart_service import CartService

# Every cart route answers with the full recomputed summary so the
# storefront can redraw the basket from a single response.
router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(CartRepository(), ProductRepository())


@router.get("", response_model=CartSummary)
def read_cart(
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    """Customers only; admin accounts have no basket."""
    return service.get_cart_summary(session, shopper.id)


@router.post("", response_model=CartSummary)
def add_line(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    """
    Put a book format in the basket.

    Adding a format already in the basket bumps its quantity.
    400 when the requested amount exceeds stock.
    """
    return service.add_to_cart(session, shopper.id, payload)


@router.patch("/{item_id}", response_model=CartSummary)
def change_line_quantity(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    return service.update_quantity(session, shopper.id, item_id, payload)


@router.delete("/{item_id}", response_model=CartSummary)
def drop_line(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    return service.remove_item(session, shopper.id, item_id)


@router.delete("", response_model=CartSummary)
def empty_cart(
    session: Session = Depends(get_session),
    shopper: User = Depends(require_user),
):
    return service.clear_cart(session, shopper.id)
