# app/services/cms_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.catalog.slugs import generate_slug
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.storage_utils import AssetStorage, generate_filename, validate_image
from app.models.cms import CmsBanner, StaticPage
from app.repositories.cms_repo import CmsRepository
from app.schemas.cms import BannerFields, StaticPageCreate, StaticPageUpdate

logger = logging.getLogger(__name__)

# (content_type, file_bytes)
ImageFile = tuple[str | None, bytes]


class CmsService:
    """
    Business logic for homepage banners and static pages.
    """

    def __init__(self, repo: CmsRepository, storage: AssetStorage | None = None):
        self.repo = repo
        self.storage = storage or AssetStorage()

    # ----- Banners -----

    def _upload_banner_image(
        self,
        banner_id: uuid.UUID,
        kind: str,
        image: ImageFile,
    ) -> str:
        """
        Path pattern:
            banners/<banner_id>/<kind>-<uuid>.<ext>
        """
        content_type, file_bytes = image
        ext = validate_image(content_type, file_bytes)
        path = f"banners/{banner_id}/{kind}-{generate_filename(ext)}"
        return self.storage.upload(path, file_bytes, content_type)

    def _replace_image(self, old_url: str | None) -> None:
        if not old_url:
            return
        try:
            self.storage.delete_public_url(old_url)
        except Exception:
            logger.warning("Could not delete banner image %s", old_url, exc_info=True)

    def list_banners(self, session: Session, only_active: bool = False) -> list[CmsBanner]:
        return self.repo.list_banners(session, only_active=only_active)

    def get_banner(self, session: Session, banner_id: uuid.UUID) -> CmsBanner:
        banner = self.repo.get_banner(session, banner_id)
        if not banner:
            raise NotFoundError("Banner not found")
        return banner

    def create_banner(
        self,
        session: Session,
        fields: BannerFields,
        image_desktop: ImageFile | None = None,
        image_mobile: ImageFile | None = None,
    ) -> CmsBanner:
        if not fields.title or not fields.title.strip():
            raise ValidationError("Banner title is required")

        banner = CmsBanner(
            **fields.model_dump(exclude_none=True, exclude={"title"}),
            title=fields.title.strip(),
        )
        if image_desktop is not None:
            banner.image_desktop = self._upload_banner_image(
                banner.id, "desktop", image_desktop
            )
        if image_mobile is not None:
            banner.image_mobile = self._upload_banner_image(
                banner.id, "mobile", image_mobile
            )
        return self.repo.save(session, banner)

    def update_banner(
        self,
        session: Session,
        banner_id: uuid.UUID,
        fields: BannerFields,
        image_desktop: ImageFile | None = None,
        image_mobile: ImageFile | None = None,
    ) -> CmsBanner:
        """
        Partial update; a posted image replaces (and deletes) the old one.
        """
        banner = self.get_banner(session, banner_id)

        for key, value in fields.model_dump(exclude_none=True).items():
            setattr(banner, key, value)

        if image_desktop is not None:
            old = banner.image_desktop
            banner.image_desktop = self._upload_banner_image(
                banner.id, "desktop", image_desktop
            )
            self._replace_image(old)
        if image_mobile is not None:
            old = banner.image_mobile
            banner.image_mobile = self._upload_banner_image(
                banner.id, "mobile", image_mobile
            )
            self._replace_image(old)

        return self.repo.save(session, banner)

    def toggle_banner(self, session: Session, banner_id: uuid.UUID) -> CmsBanner:
        banner = self.get_banner(session, banner_id)
        banner.is_active = not banner.is_active
        return self.repo.save(session, banner)

    def delete_banner(self, session: Session, banner_id: uuid.UUID) -> None:
        banner = self.get_banner(session, banner_id)
        images = (banner.image_desktop, banner.image_mobile)
        self.repo.delete(session, banner)
        for url in images:
            self._replace_image(url)

    # ----- Static pages -----

    def list_pages(self, session: Session) -> list[StaticPage]:
        return self.repo.list_pages(session)

    def get_public_page(self, session: Session, slug: str) -> StaticPage:
        page = self.repo.get_page_by_slug(session, slug)
        if not page or not page.is_active:
            raise NotFoundError("Page not found")
        return page

    def _page_slug(
        self,
        session: Session,
        raw: str,
        page_id: uuid.UUID | None = None,
    ) -> str:
        slug = generate_slug(raw)
        if not slug:
            raise ValidationError("Page slug cannot be empty")
        owner = self.repo.get_page_by_slug(session, slug)
        if owner is not None and owner.id != page_id:
            raise ConflictError(f"Page slug '{slug}' already exists")
        return slug

    def create_page(self, session: Session, payload: StaticPageCreate) -> StaticPage:
        page = StaticPage(
            slug=self._page_slug(session, payload.slug or payload.title),
            title=payload.title,
            content=payload.content,
            is_active=payload.is_active,
        )
        return self.repo.save(session, page)

    def update_page(
        self,
        session: Session,
        page_id: uuid.UUID,
        payload: StaticPageUpdate,
    ) -> StaticPage:
        page = self.repo.get_page(session, page_id)
        if not page:
            raise NotFoundError("Page not found")

        if payload.slug is not None:
            page.slug = self._page_slug(session, payload.slug, page.id)
        if payload.title is not None:
            page.title = payload.title.strip() or page.title
        if payload.content is not None:
            page.content = payload.content
        if payload.is_active is not None:
            page.is_active = payload.is_active

        page.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, page)

    def delete_page(self, session: Session, page_id: uuid.UUID) -> None:
        page = self.repo.get_page(session, page_id)
        if not page:
            raise NotFoundError("Page not found")
        self.repo.delete(session, page)
