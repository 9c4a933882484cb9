# app/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from fastapi import HTTPException, status
from sqlmodel import Session

from app.catalog.status import apply_status
from app.catalog.variants import dump_variants, load_variants
from app.core.exceptions import NotFoundError
from app.models.cart import CartItem
from app.models.order import Order, OrderItem
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from app.services.cart_service import SellableUnit, resolve_sellable

logger = logging.getLogger(__name__)

TAX_RATE = Decimal("0.0825")
SHIPPING_FLAT = Decimal("4.99")
FREE_SHIPPING_MIN = Decimal("25.00")

CENT = Decimal("0.01")

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "Pending": {"Processing", "Cancelled"},
    "Processing": {"Shipped", "Cancelled"},
    "Shipped": {"Delivered"},
    "Delivered": set(),
    "Cancelled": set(),
}


def compute_totals(items_price: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """
    Shipping, tax and grand total for a given items subtotal.

    Shipping is free from FREE_SHIPPING_MIN upward; tax applies to
    items + shipping.
    """
    items_price = items_price.quantize(CENT, rounding=ROUND_HALF_UP)
    shipping = Decimal("0.00") if items_price >= FREE_SHIPPING_MIN else SHIPPING_FLAT
    tax = ((items_price + shipping) * TAX_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return shipping, tax, items_price + shipping + tax


class OrderService:
    """
    Checkout, order history and fulfilment.

    Checkout prices every line from the live variant (not the cart
    snapshot), writes the order, takes the copies out of stock and
    empties the basket in one commit.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Place an order for everything in the basket.

        All lines are checked before anything is written. Problems are
        collected, not raised one by one, so the 400 names every line
        the shopper has to fix.
        """
        cart_items = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        errors: list[dict[str, str]] = []
        units: list[tuple[CartItem, SellableUnit]] = []

        for ci in cart_items:
            try:
                unit = resolve_sellable(
                    self.product_repo, session, ci.product_id, ci.variant_id
                )
            except HTTPException as exc:
                errors.append({"product_id": str(ci.product_id), "reason": exc.detail})
                continue

            if ci.quantity > unit.stock:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": f"Insufficient stock (have {unit.stock}, requested {ci.quantity})",
                    }
                )
                continue

            if unit.price <= 0:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Invalid price",
                    }
                )
                continue

            units.append((ci, unit))

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        items_price = sum(
            (Decimal(str(unit.price)) * ci.quantity for ci, unit in units),
            Decimal("0"),
        )
        shipping, tax, total = compute_totals(items_price)

        address = payload.shipping_address
        order = self.order_repo.add(
            session,
            Order(
                user_id=user_id,
                full_name=address.full_name,
                phone=address.phone,
                address=address.address,
                city=address.city,
                postal_code=address.postal_code,
                country=address.country,
                payment_method=payload.payment_method,
                items_price=float(items_price.quantize(CENT)),
                shipping_price=float(shipping),
                tax_price=float(tax),
                total_price=float(total),
                status="Pending",
            ),
        )

        self.order_repo.add_items(
            session,
            [
                OrderItem(
                    order_id=order.id,
                    product_id=unit.product.id,
                    variant_id=unit.variant_id,
                    name=unit.product.name,
                    format=unit.format,
                    image=unit.main_image,
                    quantity=ci.quantity,
                    unit_price=unit.price,
                )
                for ci, unit in units
            ],
        )

        self._deduct_stock(session, units)

        for ci in cart_items:
            session.delete(ci)

        session.commit()
        session.refresh(order)
        logger.info("Order %s created for user %s (total %s)", order.id, user_id, total)

        return self._with_lines(session, order)

    def _deduct_stock(
        self,
        session: Session,
        units: list[tuple[CartItem, SellableUnit]],
    ) -> None:
        """
        Subtract ordered quantities from each variant, grouped per product
        so a product with several ordered formats is rewritten once.
        """
        by_product: dict[uuid.UUID, dict[str, int]] = {}
        products = {}
        for ci, unit in units:
            products[unit.product.id] = unit.product
            wanted = by_product.setdefault(unit.product.id, {})
            wanted[unit.variant_id] = wanted.get(unit.variant_id, 0) + ci.quantity

        for product_id, wanted in by_product.items():
            product = products[product_id]
            variants = load_variants(product.variants)
            for variant in variants:
                qty = wanted.get(variant.id)
                if qty is None:
                    continue
                if qty > variant.count_in_stock:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Insufficient stock for {product.name} ({variant.format})",
                    )
                variant.count_in_stock -= qty

            product.variants = dump_variants(variants)
            apply_status(product)
            product.updated_at = datetime.now(timezone.utc)
            session.add(product)

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_for_user(session, user_id, skip, limit)

    def _get_owned(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found")
        return order

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_owned(session, user_id, order_id)
        return self._with_lines(session, order)

    def mark_paid(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order:
        """
        Record payment for the user's order. Cancelled orders cannot be paid.
        """
        order = self._get_owned(session, user_id, order_id)
        if order.status == "Cancelled":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cancelled orders cannot be paid",
            )
        if order.is_paid:
            return order

        order.is_paid = True
        order.paid_at = datetime.now(timezone.utc)
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit, status_filter)

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        order = self._get_any(session, order_id)
        return self._with_lines(session, order)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Move an order along ALLOWED_TRANSITIONS.

        Re-sending the current status is a no-op. Delivered and Cancelled
        are final.
        """
        order = self._get_any(session, order_id)
        target = payload.status
        if target == order.status:
            return order

        if target not in ALLOWED_TRANSITIONS.get(order.status, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {order.status} -> {target}",
            )

        logger.info("Order %s: %s -> %s", order.id, order.status, target)
        order.status = target
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    def _get_any(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def _with_lines(
        self,
        session: Session,
        order: Order,
    ) -> OrderWithItemsRead:
        lines = self.order_repo.list_items_for_order(session, order.id)
        return OrderWithItemsRead(
            **order.model_dump(),
            items=[
                OrderItemRead(
                    **line.model_dump(),
                    line_total=round(line.quantity * line.unit_price, 2),
                )
                for line in lines
            ],
        )
