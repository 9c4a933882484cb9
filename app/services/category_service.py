# app/services/category_service.py
import logging
import uuid

from sqlmodel import Session

from app.catalog.slugs import generate_slug
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.category import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryUpdate, Subcategory

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Business logic for categories.

    Responsibilities:
      - slug generation for categories and subcategories
      - unique name / slug (409 on collision)
      - subcategories sorted by name, de-duplicated by slug
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    @staticmethod
    def _normalize_subcategories(subs: list[Subcategory]) -> list[dict]:
        by_slug: dict[str, dict] = {}
        for sub in subs:
            slug = generate_slug(sub.slug or sub.name)
            if not slug:
                raise ValidationError(f"Invalid subcategory name '{sub.name}'")
            by_slug.setdefault(slug, {"name": sub.name, "slug": slug})
        return sorted(by_slug.values(), key=lambda s: s["name"].lower())

    def _check_unique(
        self,
        session: Session,
        name: str,
        slug: str,
        category_id: uuid.UUID | None = None,
    ) -> None:
        for other in (
            self.repo.get_by_name(session, name),
            self.repo.get_by_slug(session, slug),
        ):
            if other is not None and other.id != category_id:
                raise ConflictError("Category name or slug already exists")

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def get_category(self, session: Session, slug: str) -> Category:
        category = self.repo.get_by_slug(session, slug)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        slug = generate_slug(payload.slug or payload.name)
        if not slug:
            raise ValidationError("Category name cannot produce an empty slug")
        self._check_unique(session, payload.name, slug)

        category = Category(
            name=payload.name,
            slug=slug,
            subcategories=self._normalize_subcategories(payload.subcategories),
            color=payload.color,
            text_color=payload.text_color,
        )
        created = self.repo.save(session, category)
        logger.info("Created category %s", created.slug)
        return created

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise NotFoundError("Category not found")

        name = payload.name or category.name
        if payload.slug:
            slug = generate_slug(payload.slug)
        elif payload.name:
            slug = generate_slug(payload.name)
        else:
            slug = category.slug
        if not slug:
            raise ValidationError("Category slug cannot be empty")
        self._check_unique(session, name, slug, category.id)

        category.name = name
        category.slug = slug
        if payload.subcategories is not None:
            category.subcategories = self._normalize_subcategories(
                payload.subcategories
            )
        if payload.color is not None:
            category.color = payload.color
        if payload.text_color is not None:
            category.text_color = payload.text_color

        return self.repo.save(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise NotFoundError("Category not found")
        self.repo.delete(session, category)
        logger.info("Deleted category %s", category.slug)
