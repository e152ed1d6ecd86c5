"""
Client-side field validation for the product and profile forms.

Every validator is pure: it takes the raw field value (usually the string
typed into the form) and returns a ``FieldResult``. The aggregators collect
the failures into an error map keyed by field name; a form is only submitted
when that map is empty.
"""
import mimetypes
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, NamedTuple, Optional

MAX_IMAGE_BYTES = 5 * 1024 * 1024
PRODUCT_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif")
PROFILE_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

MAX_PRICE = 999999.99
MAX_STOCK = 999999

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NAME_RE = re.compile(r"^[a-zA-ZàáâäèéêëìíîïòóôöùúûüÀÁÂÄÈÉÊËÌÍÎÏÒÓÔÖÙÚÛÜñÑ\s\-\.']+$")
_PHONE_RE = re.compile(r"^7\d{3}-\d{4}$")


@dataclass
class ImageFile:
    """An image picked from disk, staged for upload."""
    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str) -> "ImageFile":
        content_type, _ = mimetypes.guess_type(path)
        with open(path, "rb") as f:
            content = f.read()
        return cls(os.path.basename(path), content_type or "application/octet-stream", content)


class FieldResult(NamedTuple):
    is_valid: bool
    error: Optional[str] = None


@dataclass
class ValidationReport:
    is_valid: bool
    errors: Dict[str, str]


OK = FieldResult(True, None)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else str(value)


def _length_rule(value: Any, minimum: int, maximum: int, label: str) -> FieldResult:
    if _blank(value):
        return FieldResult(False, f"{label} is required")
    text = _as_text(value)
    if len(text) < minimum:
        return FieldResult(False, f"{label} must be at least {minimum} characters")
    if len(text) > maximum:
        return FieldResult(False, f"{label} cannot exceed {maximum} characters")
    return OK


# ---------------------------
# Product fields
# ---------------------------
def validate_name(value: Any) -> FieldResult:
    return _length_rule(value, 2, 100, "Product name")


def validate_description(value: Any) -> FieldResult:
    return _length_rule(value, 10, 500, "Description")


def parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _as_text(value)
        if not _NUMBER_RE.match(text):
            return None
        number = float(text)
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def parse_integer(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _as_text(value)
    if not _INTEGER_RE.match(text):
        return None
    return int(text)


def validate_price(value: Any) -> FieldResult:
    if _blank(value):
        return FieldResult(False, "Price is required")
    price = parse_number(value)
    if price is None:
        return FieldResult(False, "Price must be a valid number")
    if price <= 0:
        return FieldResult(False, "Price must be greater than 0")
    if price > MAX_PRICE:
        return FieldResult(False, "Price cannot exceed $999,999.99")
    return OK


def validate_stock(value: Any) -> FieldResult:
    if _blank(value):
        return FieldResult(False, "Stock is required")
    stock = parse_integer(value)
    if stock is None:
        return FieldResult(False, "Stock must be a whole number")
    if stock < 0:
        return FieldResult(False, "Stock cannot be negative")
    if stock > MAX_STOCK:
        return FieldResult(False, "Stock cannot exceed 999,999 units")
    return OK


def validate_category(value: Any) -> FieldResult:
    if _blank(value):
        return FieldResult(False, "Please select a category")
    return OK


def validate_image(image: Any, editing_id: Optional[str] = None) -> FieldResult:
    """Required only on create; a staged file must be a small enough image."""
    if not editing_id and not image:
        return FieldResult(False, "A product image is required")
    if not isinstance(image, ImageFile):
        return OK
    error = None
    if image.size > MAX_IMAGE_BYTES:
        error = "Image cannot exceed 5MB"
    if image.content_type not in PRODUCT_IMAGE_TYPES:
        error = "Image must be JPG, PNG, WebP or GIF"
    return FieldResult(error is None, error)


def validate_details(value: Any) -> FieldResult:
    if value and len(value) > 1000:
        return FieldResult(False, "Details cannot exceed 1000 characters")
    return OK


def validate_product_data(data: Mapping[str, Any], editing_id: Optional[str] = None) -> ValidationReport:
    checks = {
        "name": validate_name(data.get("name")),
        "description": validate_description(data.get("description")),
        "price": validate_price(data.get("price")),
        "stock": validate_stock(data.get("stock")),
        "categoryId": validate_category(data.get("categoryId")),
        "image": validate_image(data.get("image"), editing_id),
        "details": validate_details(data.get("details")),
    }
    errors = {name: result.error for name, result in checks.items() if not result.is_valid}
    return ValidationReport(is_valid=not errors, errors=errors)


# ---------------------------
# Profile fields
# ---------------------------
def validate_full_name(value: Any) -> FieldResult:
    result = _length_rule(value, 2, 100, "Full name")
    if not result.is_valid:
        return result
    if not _NAME_RE.match(_as_text(value)):
        return FieldResult(False, "Full name contains invalid characters")
    return OK


def validate_phone(value: Any) -> FieldResult:
    if _blank(value):
        return FieldResult(False, "Phone is required")
    if not _PHONE_RE.match(_as_text(value)):
        return FieldResult(False, "Format: 7XXX-XXXX (e.g. 7123-4567)")
    return OK


def validate_address(value: Any) -> FieldResult:
    return _length_rule(value, 10, 200, "Address")


def validate_profile_picture(image: ImageFile) -> FieldResult:
    if image.content_type not in PROFILE_IMAGE_TYPES:
        return FieldResult(False, "Only JPG, PNG or WEBP images are allowed")
    if image.size > MAX_IMAGE_BYTES:
        return FieldResult(False, "Image cannot exceed 5MB")
    return OK


def validate_profile_data(data: Mapping[str, Any]) -> ValidationReport:
    checks = {
        "fullName": validate_full_name(data.get("fullName")),
        "phone": validate_phone(data.get("phone")),
        "address": validate_address(data.get("address")),
    }
    errors = {name: result.error for name, result in checks.items() if not result.is_valid}
    return ValidationReport(is_valid=not errors, errors=errors)


# ---------------------------
# Input transforms applied while typing
# ---------------------------
def format_phone(raw: str) -> str:
    """
    Digits only, leading 7 forced, dash after the fourth digit, 8 digits max.

    A number that does not start with 7 gets a 7 prepended rather than being
    rejected, so "81234567" becomes "7812-3456".
    """
    digits = re.sub(r"\D", "", raw or "")
    if digits and not digits.startswith("7"):
        digits = "7" + digits
    if len(digits) > 4:
        digits = digits[:4] + "-" + digits[4:8]
    return digits


def capitalize_words(raw: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), raw or "")
