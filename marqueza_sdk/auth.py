import logging
from typing import Any, Dict, Optional

import requests

from .responses import ApiError

logger = logging.getLogger(__name__)


class AuthSession:
    """
    Who is logged in, and their cached user info.

    Handed explicitly to the profile hooks instead of being looked up globally.
    """

    def __init__(self, client, user: Optional[Dict[str, Any]] = None):
        self.client = client
        self.user = user
        self.user_info: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.user.get("id"))

    def login_with_token(self, token: str) -> Optional[Dict[str, Any]]:
        self.client.set_token(token)
        return self.get_user_info()

    def get_user_info(self) -> Optional[Dict[str, Any]]:
        try:
            body = self.client.get_user_info()
        except (ApiError, requests.RequestException) as e:
            logger.warning("Could not refresh user info: %s", e)
            return None
        if isinstance(body, dict) and body.get("success") and body.get("user"):
            self.user_info = body["user"]
            self.user = {"id": self.user_info.get("id") or self.user_info.get("_id"),
                         "email": self.user_info.get("email")}
        return self.user_info

    def logout(self) -> Dict[str, Any]:
        try:
            self.client.logout()
        except (ApiError, requests.RequestException) as e:
            logger.error("Logout failed: %s", e)
            return {"success": False, "error": str(e)}
        finally:
            self.client.clear_token()
            self.user = None
            self.user_info = None
        return {"success": True}
