# app/routers/products.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.listing import DisplayGroup, FeaturedGroups, SellableRow
from app.schemas.product import ProductRead
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, placeholder_image=get_settings().PLACEHOLDER_IMAGE_URL)


def get_product_service() -> ProductService:
    return service


# -------- Public endpoints --------


@router.get("", response_model=list[SellableRow])
def list_products(
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
    skip: int = 0,
    limit: int = 50,
    include_inactive: bool = False,
    category: str | None = None,
    subcategory: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
):
    """
    List products, one entry per format (variant).

    - Public endpoint.
    - Inactive products are hidden unless `include_inactive=true`.
    - Price filters apply to each format's own price.
    """
    return products.list_rows(
        session,
        skip=skip,
        limit=limit,
        include_inactive=include_inactive,
        category=category,
        subcategory=subcategory,
        min_price=min_price,
        max_price=max_price,
    )


@router.get("/grouped", response_model=list[DisplayGroup])
def list_product_cards(
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
    skip: int = 0,
    limit: int = 50,
    category: str | None = None,
    subcategory: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
):
    """
    List products as display cards (one per title, with price range).
    """
    return products.list_groups(
        session,
        skip=skip,
        limit=limit,
        category=category,
        subcategory=subcategory,
        min_price=min_price,
        max_price=max_price,
    )


@router.get("/featured", response_model=FeaturedGroups)
def list_featured(
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Promotions, new arrivals and popular titles as display cards.
    """
    return products.featured(session)


@router.get("/category/{slug}", response_model=list[SellableRow])
def list_category_products(
    slug: str,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Products whose category or subcategory matches `slug`, one entry per format.

    - 404 when nothing matches.
    """
    return products.list_category_rows(session, slug)


@router.get("/{id_or_slug}", response_model=ProductRead)
def get_product(
    id_or_slug: str,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Get a single product (with all variants) by id or slug.
    """
    return products.get_by_id_or_slug(session, id_or_slug)
