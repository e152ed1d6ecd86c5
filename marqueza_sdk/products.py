# marqueza_sdk/products.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import requests

from .notify import LogNotifier
from .responses import ApiError, success_message, unwrap_record
from .validation import ImageFile, parse_integer, parse_number, validate_product_data

logger = logging.getLogger(__name__)

LIST_TAB = "list"
FORM_TAB = "form"


class OperationState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ProductForm:
    """Staging copy of the product being created or edited."""
    id: str = ""
    name: str = ""
    description: str = ""
    price: str = ""
    stock: Any = 0
    category_id: str = ""
    is_personalizable: bool = False
    details: str = ""
    image: Optional[ImageFile] = None
    current_images: List[str] = field(default_factory=list)

    def to_data(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "categoryId": self.category_id,
            "isPersonalizable": self.is_personalizable,
            "details": self.details,
            "image": self.image,
        }


def product_form_fields(data: Mapping[str, Any]) -> Dict[str, str]:
    """Text parts of the multipart payload; every value is sent as a string."""
    return {
        "name": data["name"].strip(),
        "description": data["description"].strip(),
        "price": str(parse_number(data["price"])),
        "stock": str(parse_integer(data.get("stock")) or 0),
        "categoryId": data["categoryId"],
        "isPersonalizable": "true" if data.get("isPersonalizable") else "false",
        "details": data.get("details") or "",
    }


def product_json_body(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": data["name"].strip(),
        "description": data["description"].strip(),
        "price": parse_number(data["price"]),
        "stock": parse_integer(data.get("stock")) or 0,
        "categoryId": data["categoryId"],
        "isPersonalizable": bool(data.get("isPersonalizable")),
        "details": data.get("details") or "",
    }


def describe_error(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ApiError):
        return str(exc) or fallback
    if isinstance(exc, requests.RequestException):
        return "Could not reach the server"
    return fallback


class ProductsManager:
    """
    State and CRUD operations behind the products admin screen.

    Holds the product/category lists, the staging form, validation errors and
    the active tab ("list" or "form"). Views only read these attributes and
    call the operations below.
    """

    def __init__(self, client, notifier=None):
        self.client = client
        self.notifier = notifier or LogNotifier()

        self.active_tab = LIST_TAB
        self.form = ProductForm()

        self.products: List[Dict[str, Any]] = []
        self.categories: List[Dict[str, Any]] = []
        self.loading = True

        self.validation_errors: Dict[str, str] = {}
        self.is_submitting = False
        self.status: Dict[str, OperationState] = {}

    def _set_status(self, operation: str, state: OperationState):
        self.status[operation] = state

    # ---------------------------
    # Loading
    # ---------------------------
    def load(self):
        self.fetch_products()
        self.fetch_categories()

    def fetch_categories(self):
        self._set_status("fetch_categories", OperationState.LOADING)
        try:
            self.categories = self.client.list_categories()
            self._set_status("fetch_categories", OperationState.SUCCESS)
        except Exception as e:
            logger.error("Failed to load categories: %s", e)
            self.notifier.error("Error loading categories")
            self.categories = []
            self._set_status("fetch_categories", OperationState.ERROR)

    def fetch_products(self):
        self.loading = True
        self._set_status("fetch_products", OperationState.LOADING)
        try:
            self.products = self.client.list_products()
            self._set_status("fetch_products", OperationState.SUCCESS)
        except Exception as e:
            logger.error("Failed to load products: %s", e)
            self.notifier.error("Error loading products")
            self.products = []
            self._set_status("fetch_products", OperationState.ERROR)
        finally:
            self.loading = False

    # ---------------------------
    # Form helpers
    # ---------------------------
    def reset_form(self):
        self.form = ProductForm()
        self.validation_errors = {}

    def open_form(self):
        self.reset_form()
        self.active_tab = FORM_TAB

    def close_form(self):
        self.reset_form()
        self.active_tab = LIST_TAB

    def filtered_products(self, search_term: str = "") -> List[Dict[str, Any]]:
        term = (search_term or "").lower()
        return [p for p in self.products if p and p.get("name") and term in p["name"].lower()]

    def category_name(self, category_ref: Any) -> str:
        if isinstance(category_ref, dict):
            return category_ref.get("name") or ""
        for cat in self.categories:
            if cat.get("_id") == category_ref:
                return cat.get("name", "")
        return ""

    def _enrich_category(self, product: Dict[str, Any], category_id: str) -> Dict[str, Any]:
        category = next((c for c in self.categories if c.get("_id") == category_id), None)
        enriched = dict(product)
        if category:
            enriched["categoryId"] = {"_id": category["_id"], "name": category["name"]}
        return enriched

    def _validate(self, data: Mapping[str, Any]) -> bool:
        validation = validate_product_data(data, self.form.id or None)
        if not validation.is_valid:
            logger.info("Product validation failed: %s", validation.errors)
            self.validation_errors = validation.errors
            self.notifier.error("Please fix the errors in the form")
        return validation.is_valid

    # ---------------------------
    # CRUD
    # ---------------------------
    def create_product(self, data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if self.is_submitting:
            logger.warning("Submission already in progress")
            return None
        if not self._validate(data):
            self._set_status("create", OperationState.ERROR)
            return None

        self.is_submitting = True
        self.validation_errors = {}
        self._set_status("create", OperationState.LOADING)
        try:
            image = data.get("image")
            body = self.client.create_product(
                product_form_fields(data), image if isinstance(image, ImageFile) else None
            )
            enriched = self._enrich_category(unwrap_record(body), data["categoryId"])
            self.products = self.products + [enriched]
            self.notifier.success(success_message(body, "Product created successfully"))

            self.reset_form()
            self.active_tab = LIST_TAB
            self._set_status("create", OperationState.SUCCESS)
            return enriched
        except Exception as e:
            logger.exception("Product creation failed")
            self.notifier.error(describe_error(e, "Unexpected error"))
            self._set_status("create", OperationState.ERROR)
            return None
        finally:
            self.is_submitting = False

    def delete_product(self, product_id: str) -> bool:
        self._set_status("delete", OperationState.LOADING)
        try:
            body = self.client.delete_product(product_id)
            self.notifier.success(success_message(body, "Product deleted"))
        except Exception as e:
            logger.error("Failed to delete product %s: %s", product_id, e)
            self.notifier.error(describe_error(e, "Error deleting product"))
            self._set_status("delete", OperationState.ERROR)
            return False
        self._set_status("delete", OperationState.SUCCESS)
        self.fetch_products()
        return True

    def update_product(self, product: Mapping[str, Any]):
        """Seed the form with an existing product and switch to the form tab. No network."""
        category = product.get("categoryId")
        category_id = category.get("_id", "") if isinstance(category, dict) else (category or "")
        self.form = ProductForm(
            id=product.get("_id") or product.get("id") or "",
            name=product.get("name", ""),
            description=product.get("description", ""),
            price=str(product.get("price", "")),
            stock=product.get("stock") or 0,
            category_id=category_id,
            is_personalizable=bool(product.get("isPersonalizable", False)),
            details=product.get("details") or "",
            image=None,
            current_images=list(product.get("images") or []),
        )
        self.validation_errors = {}
        self.active_tab = FORM_TAB
        logger.debug("Form ready to edit product %s", self.form.id)

    def handle_edit(self, data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if self.is_submitting:
            logger.warning("Submission already in progress")
            return None
        if not self._validate(data):
            self._set_status("edit", OperationState.ERROR)
            return None
        product_id = self.form.id
        if not product_id:
            logger.error("No product id staged for edit")
            self.notifier.error("Product ID not found")
            self._set_status("edit", OperationState.ERROR)
            return None

        self.is_submitting = True
        self.validation_errors = {}
        self._set_status("edit", OperationState.LOADING)
        try:
            image = data.get("image")
            if isinstance(image, ImageFile):
                body = self.client.update_product(product_id, product_form_fields(data), image)
            else:
                body = self.client.update_product(product_id, product_json_body(data))
            self.notifier.success(success_message(body, "Product updated"))

            self.reset_form()
            self.active_tab = LIST_TAB
            self._set_status("edit", OperationState.SUCCESS)
        except Exception as e:
            logger.exception("Product update failed")
            message = describe_error(e, "Error editing product")
            self.validation_errors = {"general": message}
            self.notifier.error(message)
            self._set_status("edit", OperationState.ERROR)
            return None
        finally:
            self.is_submitting = False

        self.fetch_products()
        return unwrap_record(body)

    def submit(self, data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Create or edit depending on whether a product id is staged."""
        if self.form.id:
            return self.handle_edit(data)
        return self.create_product(data)
