# app/routers/static_pages.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.routers.banners import get_cms_service
from app.schemas.cms import StaticPageCreate, StaticPageRead, StaticPageUpdate
from app.services.cms_service import CmsService

router = APIRouter(prefix="/static-pages", tags=["Static Pages"])


@router.get(
    "",
    response_model=list[StaticPageRead],
    dependencies=[Depends(require_admin)],
)
def list_pages(
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    List all pages, inactive included (admin only).
    """
    return cms.list_pages(session)


@router.get("/{slug}", response_model=StaticPageRead)
def get_page(
    slug: str,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    Get an active page by slug (public).
    """
    return cms.get_public_page(session, slug)


@router.post(
    "",
    response_model=StaticPageRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_page(
    payload: StaticPageCreate,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    return cms.create_page(session, payload)


@router.put(
    "/{page_id}",
    response_model=StaticPageRead,
    dependencies=[Depends(require_admin)],
)
def update_page(
    page_id: uuid.UUID,
    payload: StaticPageUpdate,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    return cms.update_page(session, page_id, payload)


@router.delete(
    "/{page_id}",
    dependencies=[Depends(require_admin)],
)
def delete_page(
    page_id: uuid.UUID,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
) -> dict[str, str]:
    cms.delete_page(session, page_id)
    return {"message": "Page deleted"}
