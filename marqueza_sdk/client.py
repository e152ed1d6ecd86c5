# marqueza_sdk/client.py
from typing import Any, Dict, List, Optional

import requests

from . import config
from .responses import handle_response, items_from
from .validation import ImageFile


def _file_part(image: ImageFile):
    return (image.filename, image.content, image.content_type)


class StoreClient:
    """
    Thin HTTP client for the back office API.

    Every call goes through ``handle_response``; list endpoints are additionally
    normalized with ``items_from`` so callers always receive a list. ``session``
    can be any requests-compatible client (FastAPI's TestClient in tests).
    """

    def __init__(self, base_url: str = config.API_BASE_URL, token: Optional[str] = config.API_TOKEN,
                 timeout: float = config.REQUEST_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if token:
            self.set_token(token)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def set_token(self, token: str):
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def clear_token(self):
        self.session.headers.pop("Authorization", None)

    def reset(self):
        r = self.session.post(self._url("/reset"), timeout=self.timeout)
        return handle_response(r)

    # Catalog
    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(self._url("/products"), timeout=self.timeout)
        return items_from(handle_response(r), "products")

    def list_categories(self) -> List[Dict[str, Any]]:
        r = self.session.get(self._url("/categories"), timeout=self.timeout)
        return items_from(handle_response(r), "categories")

    def create_product(self, fields: Dict[str, str], image: Optional[ImageFile] = None):
        files = {"images": _file_part(image)} if image else None
        r = self.session.post(self._url("/products"), data=fields, files=files, timeout=self.timeout)
        return handle_response(r)

    def update_product(self, product_id: str, fields: Dict[str, Any], image: Optional[ImageFile] = None):
        # New image staged: multipart. Text-only edit: JSON body.
        url = self._url(f"/products/{product_id}")
        if image is not None:
            r = self.session.put(url, data=fields, files={"images": _file_part(image)}, timeout=self.timeout)
        else:
            r = self.session.put(url, json=fields, timeout=self.timeout)
        return handle_response(r)

    def delete_product(self, product_id: str):
        r = self.session.delete(self._url(f"/products/{product_id}"), timeout=self.timeout)
        return handle_response(r)

    # Session / profile
    def get_user_info(self):
        r = self.session.get(self._url("/login/user-info"), timeout=self.timeout)
        return handle_response(r)

    def logout(self):
        r = self.session.post(self._url("/login/logout"), timeout=self.timeout)
        return handle_response(r)

    def update_profile(self, fields: Dict[str, str], picture: Optional[ImageFile] = None):
        files = {"profilePicture": _file_part(picture)} if picture else None
        r = self.session.put(self._url("/clients/update-profile"), data=fields, files=files, timeout=self.timeout)
        return handle_response(r)

    # Dashboard
    def new_clients_stats(self):
        r = self.session.get(self._url("/clients/newClientsStats"), timeout=self.timeout)
        return handle_response(r)

    def total_clients(self):
        r = self.session.get(self._url("/clients/total"), timeout=self.timeout)
        return handle_response(r)

    def detailed_stats(self):
        r = self.session.get(self._url("/clients/detailedStats"), timeout=self.timeout)
        return handle_response(r)
