# app/routers/admin_products.py
import json
import logging
import re
import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session, SQLModel
from starlette.datastructures import UploadFile

from app.core.auth import require_admin
from app.database import get_session
from app.routers.products import get_product_service
from app.schemas.product import (
    FeaturedUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from app.services.product_service import ProductService, VariantFiles

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/products",
    tags=["Admin Products"],
    dependencies=[Depends(require_admin)],
)

# variant_main_image_<idx> (one file) / variant_album_images_<idx> (many)
VARIANT_FILE_FIELD = re.compile(r"^variant_(main_image|album_images)_(\d+)$")


async def _read_product_form(
    request: Request,
    schema: type[SQLModel],
) -> tuple[Any, dict[int, VariantFiles]]:
    """
    Parse a product create/update request.

    Accepts either a JSON body, or a multipart form where:
      - text fields map to schema fields (blank values are ignored)
      - `variants` is a JSON-encoded array
      - images are posted as variant_main_image_<i> / variant_album_images_<i>

    Returns:
        (validated payload, files keyed by variant position)

    Raises:
        RequestValidationError (422): payload does not match the schema.
        HTTPException(400): unexpected file field.
    """
    files: dict[int, VariantFiles] = {}

    if request.headers.get("content-type", "").startswith("application/json"):
        data = await request.json()
    else:
        form = await request.form()
        data = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                match = VARIANT_FILE_FIELD.match(key)
                if not match:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Unexpected file field '{key}'",
                    )
                kind, idx = match.group(1), int(match.group(2))
                entry = files.setdefault(idx, VariantFiles())
                content = await value.read()
                if kind == "main_image":
                    entry.main = (value.content_type, content)
                else:
                    entry.album.append((value.content_type, content))
            elif value != "":
                data[key] = value

        if "variants" in data:
            try:
                data["variants"] = json.loads(data["variants"])
            except json.JSONDecodeError:
                # Unparseable array: behave as if no variants were sent
                logger.warning("Ignoring malformed variants field in product form")
                del data["variants"]

    try:
        payload = schema.model_validate(data)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
    return payload, files


@router.get("", response_model=list[ProductRead])
def list_products_admin(
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
    skip: int = 0,
    limit: int = 100,
):
    """
    List all products with their variants, inactive included (admin only).
    """
    return products.list_all(session, skip=skip, limit=limit)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    request: Request,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Create a new product (admin only).

    Multipart form or JSON; see `_read_product_form` for the field layout.
    """
    payload, files = await _read_product_form(request, ProductCreate)
    return await run_in_threadpool(products.create_product, session, payload, files)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: uuid.UUID,
    request: Request,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Update an existing product and merge its variants (admin only).

    Album images not resubmitted for a variant are removed.
    """
    payload, files = await _read_product_form(request, ProductUpdate)
    return await run_in_threadpool(
        products.update_product, session, product_id, payload, files
    )


@router.patch("/{product_id}/featured", response_model=ProductRead)
def update_featured_flags(
    product_id: uuid.UUID,
    payload: FeaturedUpdate,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
):
    """
    Toggle promotion / new arrival / popular flags (admin only).
    """
    return products.set_featured(session, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_200_OK)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    products: ProductService = Depends(get_product_service),
) -> dict[str, str]:
    """
    Delete a product, its variants and their stored images (admin only).
    """
    products.delete_product(session, product_id)
    return {"message": "Product deleted successfully"}
