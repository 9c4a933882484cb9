# app/repositories/product_repo.py
import uuid

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        include_inactive: bool = False,
        category: str | None = None,
        subcategory: str | None = None,
    ) -> list[Product]:
        """
        Newest first. Inactive products are hidden unless requested.
        """
        stmt = select(Product)
        if not include_inactive:
            stmt = stmt.where(Product.status != "Inactive")
        if category:
            stmt = stmt.where(Product.category == category)
        if subcategory:
            stmt = stmt.where(Product.subcategory == subcategory)
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def list_in_category(
        self,
        session: Session,
        slug: str,
        include_inactive: bool = False,
    ) -> list[Product]:
        """
        Products whose category OR subcategory equals `slug`.
        """
        stmt = select(Product).where(
            or_(Product.category == slug, Product.subcategory == slug)
        )
        if not include_inactive:
            stmt = stmt.where(Product.status != "Inactive")
        stmt = stmt.order_by(Product.created_at.desc())
        return session.exec(stmt).all()

    def list_featured(self, session: Session) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.status != "Inactive")
            .where(
                or_(
                    Product.is_promotion == True,  # noqa: E712
                    Product.is_new_arrival == True,  # noqa: E712
                    Product.is_popular == True,  # noqa: E712
                )
            )
            .order_by(Product.created_at.desc())
        )
        return session.exec(stmt).all()

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        return int(session.exec(stmt).one() or 0)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
