# app/routers/banners.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.cms_repo import CmsRepository
from app.schemas.cms import BannerFields, BannerRead
from app.services.cms_service import CmsService, ImageFile

router = APIRouter(prefix="/cms/banners", tags=["CMS Banners"])

repo = CmsRepository()
service = CmsService(repo)


def get_cms_service() -> CmsService:
    return service


def banner_form(
    title: str | None = Form(None),
    subtitle: str | None = Form(None),
    cta_text: str | None = Form(None),
    cta_link: str | None = Form(None),
    background_color: str | None = Form(None),
    text_color: str | None = Form(None),
    animation_type: str | None = Form(None),
    order: int | None = Form(None),
    is_active: bool | None = Form(None),
) -> BannerFields:
    """Collect the banner text fields posted with the multipart form."""
    return BannerFields(
        title=title,
        subtitle=subtitle,
        cta_text=cta_text,
        cta_link=cta_link,
        background_color=background_color,
        text_color=text_color,
        animation_type=animation_type,
        order=order,
        is_active=is_active,
    )


def _read_image(file: UploadFile | None) -> ImageFile | None:
    if file is None:
        return None
    return file.content_type, file.file.read()


# -------- Public endpoints --------


@router.get("", response_model=list[BannerRead])
def list_banners(
    active: bool = False,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    List banners sorted by carousel order.

    - `active=true` returns only active banners (storefront carousel).
    """
    return cms.list_banners(session, only_active=active)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=BannerRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_banner(
    fields: BannerFields = Depends(banner_form),
    image_desktop: UploadFile | None = File(None),
    image_mobile: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    Create a banner (admin only). Images: JPEG, PNG, WEBP.
    """
    return cms.create_banner(
        session,
        fields,
        image_desktop=_read_image(image_desktop),
        image_mobile=_read_image(image_mobile),
    )


@router.put(
    "/{banner_id}",
    response_model=BannerRead,
    dependencies=[Depends(require_admin)],
)
def update_banner(
    banner_id: uuid.UUID,
    fields: BannerFields = Depends(banner_form),
    image_desktop: UploadFile | None = File(None),
    image_mobile: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    Update a banner (admin only). Posted images replace the old ones.
    """
    return cms.update_banner(
        session,
        banner_id,
        fields,
        image_desktop=_read_image(image_desktop),
        image_mobile=_read_image(image_mobile),
    )


@router.patch(
    "/{banner_id}/toggle",
    response_model=BannerRead,
    dependencies=[Depends(require_admin)],
)
def toggle_banner(
    banner_id: uuid.UUID,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
):
    """
    Flip a banner's active flag (admin only).
    """
    return cms.toggle_banner(session, banner_id)


@router.delete(
    "/{banner_id}",
    dependencies=[Depends(require_admin)],
)
def delete_banner(
    banner_id: uuid.UUID,
    session: Session = Depends(get_session),
    cms: CmsService = Depends(get_cms_service),
) -> dict[str, str]:
    """
    Delete a banner and its images (admin only).
    """
    cms.delete_banner(session, banner_id)
    return {"message": "Banner deleted"}
