import logging
from typing import Optional

from fastapi import HTTPException
from starlette.datastructures import UploadFile

from ..core import ProductIn, _make_product_dict, populate_category
from ..database import PRODUCTS, CATEGORIES, new_id
from ..uploads import save_image

logger = logging.getLogger(__name__)

# This file contains the controller logic for product and category endpoints.
# Images are stored only after the payload, category and product checks pass.

PRODUCT_IMAGE_DIR = "products"


def _require_category(category_id: str) -> None:
    if category_id not in CATEGORIES:
        raise HTTPException(status_code=400, detail="category not found")


async def list_products_logic():
    out = [populate_category(p) for p in PRODUCTS.values()]
    return {"success": True, "data": out, "message": f"{len(out)} products found"}


async def get_product_logic(product_id: str):
    p = PRODUCTS.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    return {"success": True, "data": populate_category(p)}


async def create_product_logic(payload: ProductIn, image: Optional[UploadFile]):
    if image is None:
        raise HTTPException(status_code=400, detail="product image is required")
    _require_category(payload.categoryId)

    image_url = save_image(image, PRODUCT_IMAGE_DIR)
    pid = new_id()
    PRODUCTS[pid] = _make_product_dict(pid, payload, [image_url])
    logger.info("Created product %s (%s)", pid, payload.name)
    # categoryId is returned as a bare reference, like an unpopulated insert
    return {"success": True, "data": PRODUCTS[pid], "message": "Product created successfully"}


async def update_product_logic(product_id: str, payload: ProductIn, image: Optional[UploadFile]):
    existing = PRODUCTS.get(product_id)
    if not existing:
        raise HTTPException(status_code=404, detail="product not found")
    _require_category(payload.categoryId)

    if image is not None:
        images = [save_image(image, PRODUCT_IMAGE_DIR)]
    else:
        images = existing.get("images", [])
    PRODUCTS[product_id] = _make_product_dict(product_id, payload, images)
    logger.info("Updated product %s", product_id)
    return {"success": True, "data": populate_category(PRODUCTS[product_id]), "message": "Product updated successfully"}


async def delete_product_logic(product_id: str):
    if PRODUCTS.pop(product_id, None) is None:
        raise HTTPException(status_code=404, detail="product not found")
    logger.info("Deleted product %s", product_id)
    return {"success": True, "message": "Product deleted successfully"}


async def list_categories_logic():
    # Older controller convention: a bare array, no envelope
    return list(CATEGORIES.values())
