# app/services/product_service.py
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.catalog.listing import PLACEHOLDER_IMAGE, expand_all, group
from app.catalog.slugs import generate_slug
from app.catalog.status import apply_status
from app.catalog.variants import (
    UploadedAssets,
    dump_variants,
    load_variants,
    merge_variants,
)
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.storage_utils import AssetStorage, generate_filename, validate_image
from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.listing import DisplayGroup, FeaturedGroups, SellableRow
from app.schemas.product import FeaturedUpdate, ProductCreate, ProductUpdate
from app.schemas.variant import VariantInput

logger = logging.getLogger(__name__)

# (content_type, file_bytes)
ImageFile = tuple[str | None, bytes]


@dataclass
class VariantFiles:
    """
    Raw files posted for one variant position in a create/update form.
    """

    main: ImageFile | None = None
    album: list[ImageFile] = field(default_factory=list)


class ProductService:
    """
    Business logic for products and their variants.

    Responsibilities:
      - slug generation & uniqueness (409 on collision)
      - variant merge / image sanitizing via app.catalog
      - status recomputation on every write
      - image upload / cleanup orchestration with the asset storage
      - listing views (expanded rows, grouped cards, featured sections)
    """

    def __init__(
        self,
        repo: ProductRepository,
        storage: AssetStorage | None = None,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ):
        self.repo = repo
        self.storage = storage or AssetStorage()
        self.placeholder_image = placeholder_image

    # ----- internals -----

    def _resolve_slug(
        self,
        session: Session,
        raw_slug: str | None,
        name: str | None,
        volume_number: int | None,
        product_id: uuid.UUID | None = None,
    ) -> str:
        """
        Explicit slug (normalized) wins, else name [+ volume].

        Raises:
            ValidationError: nothing usable to build a slug from.
            ConflictError: another product already owns the slug.
        """
        if raw_slug:
            slug = generate_slug(raw_slug)
        else:
            slug = generate_slug(name, volume_number)

        if not slug:
            raise ValidationError("A product name is required to build its slug")

        owner = self.repo.get_by_slug(session, slug)
        if owner is not None and owner.id != product_id:
            raise ConflictError(f"Slug '{slug}' is already used by another product")
        return slug

    def _upload_variant_files(
        self,
        product_id: uuid.UUID,
        files: dict[int, VariantFiles],
        variant_count: int,
    ) -> dict[int, UploadedAssets]:
        """
        Validate and store posted images, keyed by variant position.

        Path pattern:
            products/<product_id>/variants/<idx>/<uuid>.<ext>

        Raises:
            NotFoundError: files posted for a position with no variant;
                nothing is uploaded in that case.
        """
        orphan = sorted(idx for idx in files if idx >= variant_count)
        if orphan:
            raise NotFoundError(f"No submitted variant at index {orphan[0]}")

        uploaded: dict[int, UploadedAssets] = {}

        for idx, variant_files in files.items():
            assets = UploadedAssets()
            if variant_files.main is not None:
                content_type, file_bytes = variant_files.main
                assets.main = self._store_image(
                    product_id, idx, content_type, file_bytes
                )
            for content_type, file_bytes in variant_files.album:
                assets.album.append(
                    self._store_image(product_id, idx, content_type, file_bytes)
                )
            uploaded[idx] = assets

        return uploaded

    def _store_image(
        self,
        product_id: uuid.UUID,
        idx: int,
        content_type: str | None,
        file_bytes: bytes,
    ) -> str:
        ext = validate_image(content_type, file_bytes)
        path = f"products/{product_id}/variants/{idx}/{generate_filename(ext)}"
        return self.storage.upload(path, file_bytes, content_type)

    def _save(self, session: Session, product: Product, creating: bool) -> Product:
        try:
            if creating:
                return self.repo.create(session, product)
            return self.repo.update(session, product)
        except IntegrityError as exc:
            session.rollback()
            raise ConflictError("Product violates a uniqueness constraint") from exc

    def _cleanup_images(self, urls: set[str]) -> None:
        """Best-effort removal of images no product refers to anymore."""
        for url in urls:
            try:
                self.storage.delete_public_url(url)
            except Exception:
                logger.warning("Could not delete stored image %s", url, exc_info=True)

    @staticmethod
    def _fresh_urls(uploads: dict[int, UploadedAssets]) -> set[str]:
        # images stored during this request
        urls: set[str] = set()
        for assets in uploads.values():
            if assets.main:
                urls.add(assets.main)
            urls.update(assets.album)
        return urls

    @staticmethod
    def _image_urls(variants: list) -> set[str]:
        urls: set[str] = set()
        for variant in load_variants(variants):
            if variant.main_image:
                urls.add(variant.main_image)
            urls.update(variant.album_images)
        return urls

    # ----- Admin: products -----

    def list_all(self, session: Session, skip: int = 0, limit: int = 100) -> list[Product]:
        return self.repo.list_products(session, skip=skip, limit=limit, include_inactive=True)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
        files: dict[int, VariantFiles] | None = None,
    ) -> Product:
        """
        Create a product with its variants.

        - slug: explicit slug or generated from name (+ volume), must be unique.
        - uploaded images are attached to the variant at the same position.
        - status is derived from stock (OutOfStock when total stock is 0).
        """
        slug = self._resolve_slug(
            session, payload.slug, payload.name, payload.volume_number
        )

        product = Product(
            name=payload.name,
            slug=slug,
            **payload.model_dump(
                include={
                    "description",
                    "category",
                    "subcategory",
                    "series_title",
                    "volume_number",
                    "publisher",
                    "author",
                    "author_bio",
                    "publication_date",
                    "age",
                    "is_promotion",
                    "is_new_arrival",
                    "is_popular",
                }
            ),
        )

        uploads = self._upload_variant_files(
            product.id, files or {}, len(payload.variants)
        )
        variants = merge_variants(payload.variants, [], uploads)
        product.variants = dump_variants(variants)
        apply_status(product, payload.status)

        try:
            created = self._save(session, product, creating=True)
        except ConflictError:
            self._cleanup_images(self._fresh_urls(uploads))
            raise
        logger.info(
            "Created product %s (%s) with %d variant(s)",
            created.id,
            created.slug,
            len(variants),
        )
        return created

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
        files: dict[int, VariantFiles] | None = None,
    ) -> Product:
        """
        Update a product and merge its variants with the stored ones
        (by variant id, else by position).

        - None fields keep their stored value.
        - an omitted / empty variants array keeps stored variants
          (new uploads still attach to them by position).
        - slug is regenerated when name or volume changes, unless given.
        """
        product = self.get_product(session, product_id)
        existing = load_variants(product.variants)

        updates = payload.model_dump(
            exclude_unset=True,
            exclude={"slug", "variants", "status"},
        )
        updates = {k: v for k, v in updates.items() if v is not None}

        renamed = (
            "name" in updates and updates["name"] != product.name
        ) or (
            "volume_number" in updates
            and updates["volume_number"] != product.volume_number
        )
        if payload.slug or renamed:
            product.slug = self._resolve_slug(
                session,
                payload.slug,
                updates.get("name", product.name),
                updates.get("volume_number", product.volume_number),
                product_id=product.id,
            )

        for key, value in updates.items():
            setattr(product, key, value)

        if payload.variants:
            incoming = payload.variants
        else:
            incoming = [VariantInput(**v.model_dump()) for v in existing]

        uploads = self._upload_variant_files(product.id, files or {}, len(incoming))
        merged = merge_variants(incoming, existing, uploads)

        dropped = self._image_urls(product.variants) - self._image_urls(
            dump_variants(merged)
        )

        product.variants = dump_variants(merged)
        apply_status(product, payload.status)
        product.updated_at = datetime.now(timezone.utc)

        try:
            updated = self._save(session, product, creating=False)
        except ConflictError:
            self._cleanup_images(self._fresh_urls(uploads))
            raise
        self._cleanup_images(dropped)
        logger.info("Updated product %s (%s)", updated.id, updated.slug)
        return updated

    def set_featured(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: FeaturedUpdate,
    ) -> Product:
        product = self.get_product(session, product_id)
        for key, value in payload.model_dump(exclude_none=True).items():
            setattr(product, key, value)
        product.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product (its variants go with it) and clean up Storage.
        """
        product = self.get_product(session, product_id)
        urls = self._image_urls(product.variants)
        self.repo.delete(session, product)
        self._cleanup_images(urls)
        logger.info("Deleted product %s", product_id)

    # ----- Public: listing views -----

    def get_by_id_or_slug(self, session: Session, id_or_slug: str) -> Product:
        try:
            product = self.repo.get_by_id(session, uuid.UUID(id_or_slug))
        except ValueError:
            product = self.repo.get_by_slug(session, id_or_slug)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _filter_rows(
        rows: list[SellableRow],
        min_price: float | None,
        max_price: float | None,
    ) -> list[SellableRow]:
        if min_price is not None:
            rows = [r for r in rows if r.price >= min_price]
        if max_price is not None:
            rows = [r for r in rows if r.price <= max_price]
        return rows

    def list_rows(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        include_inactive: bool = False,
        category: str | None = None,
        subcategory: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[SellableRow]:
        """
        One row per purchasable format; pagination applies to products.
        """
        products = self.repo.list_products(
            session,
            skip=skip,
            limit=limit,
            include_inactive=include_inactive,
            category=category,
            subcategory=subcategory,
        )
        return self._filter_rows(expand_all(products), min_price, max_price)

    def list_groups(self, session: Session, **filters) -> list[DisplayGroup]:
        return group(self.list_rows(session, **filters), self.placeholder_image)

    def list_category_rows(
        self,
        session: Session,
        slug: str,
        include_inactive: bool = False,
    ) -> list[SellableRow]:
        products = self.repo.list_in_category(
            session, slug, include_inactive=include_inactive
        )
        if not products:
            raise NotFoundError("No products found")
        return expand_all(products)

    def featured(self, session: Session) -> FeaturedGroups:
        rows = expand_all(self.repo.list_featured(session))
        return FeaturedGroups(
            promotions=group(
                [r for r in rows if r.is_promotion], self.placeholder_image
            ),
            new_arrivals=group(
                [r for r in rows if r.is_new_arrival], self.placeholder_image
            ),
            popular=group([r for r in rows if r.is_popular], self.placeholder_image),
        )
