# app/services/cart_service.py
import uuid
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlmodel import Session

from app.catalog.listing import STANDARD_FORMAT
from app.catalog.variants import find_variant
from app.core.exceptions import NotFoundError
from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)


@dataclass
class SellableUnit:
    """The (product, variant) pair a cart line or order line refers to."""

    product: Product
    variant_id: str | None
    format: str
    price: float
    stock: int
    main_image: str | None


def resolve_sellable(
    product_repo: ProductRepository,
    session: Session,
    product_id: uuid.UUID,
    variant_id: str | None,
) -> SellableUnit:
    """
    Look up a purchasable unit.

    Raises:
        NotFoundError: unknown product or variant.
        HTTPException(400): product is not Active.
    """
    product = product_repo.get_by_id(session, product_id)
    if not product:
        raise NotFoundError("Product not found")
    if product.status == "Inactive":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Product is inactive",
        )

    variant = find_variant(product, variant_id)
    if variant is None:
        return SellableUnit(product, None, STANDARD_FORMAT, 0.0, 0, None)
    return SellableUnit(
        product=product,
        variant_id=variant.id,
        format=variant.format,
        price=variant.price,
        stock=variant.count_in_stock,
        main_image=variant.main_image,
    )


class CartService:
    """
    The shopper's basket.

    Lines are keyed by (product, variant) and carry a snapshot of the
    format's name, price and image taken when the line was last touched.
    Quantities never exceed the stock of that format.
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    def _get_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartItem:
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise NotFoundError("Item not in cart")
        return item

    @staticmethod
    def _check_stock(unit: SellableUnit, quantity: int) -> None:
        if quantity > unit.stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Not enough stock available (have {unit.stock})",
            )

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        lines = [
            CartItemRead(
                **it.model_dump(),
                line_total=round(it.quantity * it.snapshot_price, 2),
            )
            for it in self.cart_repo.list_for_user(session, user_id)
        ]
        return CartSummary(
            items=lines,
            total_quantity=sum(line.quantity for line in lines),
            total_price=round(sum(line.line_total for line in lines), 2),
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product format to the user's cart.

        Rules:
          - product must exist and not be inactive; variant must exist
          - quantity + existing_quantity <= variant count_in_stock
          - snapshot_price is taken from the current variant price
        """
        unit = resolve_sellable(
            self.product_repo, session, payload.product_id, payload.variant_id
        )
        existing = self.cart_repo.get_line(
            session, user_id, unit.product.id, unit.variant_id
        )

        if existing:
            new_qty = existing.quantity + payload.quantity
            self._check_stock(unit, new_qty)
            existing.quantity = new_qty
            existing.snapshot_price = unit.price
            self.cart_repo.save(session, existing)
        else:
            self._check_stock(unit, payload.quantity)
            self.cart_repo.save(
                session,
                CartItem(
                    user_id=user_id,
                    product_id=unit.product.id,
                    variant_id=unit.variant_id,
                    quantity=payload.quantity,
                    snapshot_price=unit.price,
                    product_name=unit.product.name,
                    format=unit.format,
                    main_image=unit.main_image,
                ),
            )

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the exact quantity of a cart line, within stock.
        """
        item = self._get_item(session, user_id, item_id)
        unit = resolve_sellable(
            self.product_repo, session, item.product_id, item.variant_id
        )
        self._check_stock(unit, payload.quantity)

        item.quantity = payload.quantity
        self.cart_repo.save(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a line from the cart and return updated summary.
        """
        item = self._get_item(session, user_id, item_id)
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total_quantity=0, total_price=0.0)
