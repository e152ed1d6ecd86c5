# marqueza_api/routes/products.py
# Product and category endpoints. Images arrive as the "images" multipart field.

from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, UploadFile

from ..controllers import products as products_controller
from ..core import ProductIn, parse_payload
from ..uploads import single_image_upload

router = APIRouter()

upload_product_image = single_image_upload("images")


@router.get("/products")
async def list_products():
    return await products_controller.list_products_logic()


@router.get("/products/{product_id}")
async def get_product(product_id: str):
    return await products_controller.get_product_logic(product_id)


@router.post("/products", status_code=201)
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    categoryId: Optional[str] = Form(None),
    isPersonalizable: Optional[str] = Form("false"),
    details: Optional[str] = Form(""),
    image: Optional[UploadFile] = Depends(upload_product_image),
):
    fields = {
        "name": name,
        "description": description,
        "price": price,
        "stock": stock,
        "categoryId": categoryId,
        "isPersonalizable": isPersonalizable,
        "details": details,
    }
    payload = parse_payload(ProductIn, {k: v for k, v in fields.items() if v is not None})
    return await products_controller.create_product_logic(payload, image)


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    request: Request,
    image: Optional[UploadFile] = Depends(upload_product_image),
):
    """Accepts multipart (new image staged) or a JSON body (text-only edit)."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        data = {k: v for k, v in form.items() if k != "images" and isinstance(v, str)}
    elif content_type.startswith("application/json"):
        data = await request.json()
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="JSON body must be an object")
    else:
        raise HTTPException(status_code=415, detail="expected multipart/form-data or application/json")
    payload = parse_payload(ProductIn, data)
    return await products_controller.update_product_logic(product_id, payload, image)


@router.delete("/products/{product_id}")
async def delete_product(product_id: str):
    return await products_controller.delete_product_logic(product_id)


@router.get("/categories")
async def list_categories():
    return await products_controller.list_categories_logic()
