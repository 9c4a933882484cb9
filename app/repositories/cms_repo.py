# app/repositories/cms_repo.py
import uuid

from sqlmodel import Session, select

from app.models.cms import CmsBanner, StaticPage


class CmsRepository:
    """
    Data access layer for banners and static pages.
    """

    # ----- Banners -----

    def list_banners(self, session: Session, only_active: bool = False) -> list[CmsBanner]:
        stmt = select(CmsBanner)
        if only_active:
            stmt = stmt.where(CmsBanner.is_active == True)  # noqa: E712
        stmt = stmt.order_by(CmsBanner.order, CmsBanner.created_at)
        return session.exec(stmt).all()

    def get_banner(self, session: Session, banner_id: uuid.UUID) -> CmsBanner | None:
        return session.get(CmsBanner, banner_id)

    # ----- Static pages -----

    def list_pages(self, session: Session) -> list[StaticPage]:
        stmt = select(StaticPage).order_by(StaticPage.title)
        return session.exec(stmt).all()

    def get_page(self, session: Session, page_id: uuid.UUID) -> StaticPage | None:
        return session.get(StaticPage, page_id)

    def get_page_by_slug(self, session: Session, slug: str) -> StaticPage | None:
        stmt = select(StaticPage).where(StaticPage.slug == slug)
        return session.exec(stmt).first()

    # ----- Shared -----

    def save(self, session: Session, row):
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def delete(self, session: Session, row) -> None:
        session.delete(row)
        session.commit()
