from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .database import CATEGORIES

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProductIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    price: float = Field(..., gt=0, le=999999.99)
    stock: int = Field(0, ge=0, le=999999)
    categoryId: str = Field(..., min_length=1)
    isPersonalizable: bool = False
    details: Optional[str] = Field("", max_length=1000)


class ProfileUpdateIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    fullName: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., pattern=r"^7\d{3}-\d{4}$")
    address: str = Field(..., min_length=10, max_length=200)


def parse_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Build a schema from loosely-typed form/JSON data, mapping failures to a 400."""
    try:
        return model(**data)
    except ValidationError as e:
        messages = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            messages.append(f"{field}: {err['msg']}")
        raise HTTPException(status_code=400, detail="; ".join(messages))


def _make_product_dict(product_id: str, p: ProductIn, images: List[str]) -> Dict[str, Any]:
    return {
        "_id": product_id,
        "name": p.name,
        "description": p.description,
        "price": round(p.price, 2),
        "stock": p.stock,
        "categoryId": p.categoryId,
        "isPersonalizable": p.isPersonalizable,
        "details": p.details or "",
        "images": images,
    }


def populate_category(product: Dict[str, Any]) -> Dict[str, Any]:
    # Same shape a populated document reference would have
    category = CATEGORIES.get(product["categoryId"])
    out = dict(product)
    if category:
        out["categoryId"] = {"_id": category["_id"], "name": category["name"]}
    return out


def public_client(client: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": client["_id"],
        "_id": client["_id"],
        "name": client["name"],
        "email": client["email"],
        "phone": client.get("phone", ""),
        "address": client.get("address", ""),
        "profilePicture": client.get("profilePicture"),
        "createdAt": client.get("createdAt"),
    }
