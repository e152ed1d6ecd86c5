# marqueza_sdk/profile.py
import base64
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional
from urllib.parse import urlparse

from .responses import ApiError
from .validation import (
    ImageFile,
    capitalize_words,
    format_phone,
    validate_profile_data,
    validate_profile_picture,
)

logger = logging.getLogger(__name__)


class NotAuthenticatedError(Exception):
    pass


class SubmitResult(NamedTuple):
    success: bool
    message: str
    data: Any = None


# ---------------------------
# Display helpers
# ---------------------------
def format_member_since(created_at: Optional[str]):
    """Registration year, or a placeholder when the date is missing or unreadable."""
    if not created_at:
        return "Date not available"
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).year
    except (TypeError, ValueError):
        logger.warning("Unreadable registration date: %r", created_at)
        return "Date not available"


def get_user_initials(full_name: Optional[str]) -> str:
    if not full_name or not isinstance(full_name, str):
        return "U"
    names = full_name.split()
    if len(names) >= 2:
        return (names[0][0] + names[1][0]).upper()
    if len(names) == 1:
        return names[0][0].upper()
    return "U"


def is_valid_image_url(url: Any) -> bool:
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    if parsed.scheme == "data":
        return True
    return bool(parsed.scheme and parsed.netloc)


def to_data_url(image: ImageFile) -> str:
    encoded = base64.b64encode(image.content).decode("ascii")
    return f"data:{image.content_type};base64,{encoded}"


# ---------------------------
# Profile view state
# ---------------------------
class UserProfile:
    """Loads the logged-in user's profile for the profile screen."""

    def __init__(self, client, session):
        self.client = client
        self.session = session
        self.profile_data: Optional[Dict[str, Any]] = None
        self.loading = True
        self.error: Optional[str] = None

    def load(self):
        if self.session.is_authenticated:
            self.fetch_user_profile()
        else:
            self.loading = False
            self.profile_data = None

    def fetch_user_profile(self):
        self.loading = True
        self.error = None
        try:
            if not self.session.is_authenticated:
                raise NotAuthenticatedError("User is not authenticated")
            body = self.client.get_user_info()
            if isinstance(body, dict) and body.get("success") and body.get("user"):
                self.profile_data = body["user"]
            else:
                message = body.get("message") if isinstance(body, dict) else None
                raise ApiError(message or "Error fetching user data")
        except Exception as e:
            logger.error("Failed to load user profile: %s", e)
            self.error = str(e) or "Error loading profile data"
        finally:
            self.loading = False

        if self.profile_data is None and self.session.user_info:
            self.profile_data = self.session.user_info

    def clear_error(self):
        self.error = None


# ---------------------------
# Edit profile form
# ---------------------------
def _empty_form() -> Dict[str, Any]:
    return {"fullName": "", "phone": "", "address": "", "email": "", "profilePicture": None}


class EditProfileForm:
    """
    Staging state for the edit-profile modal.

    The picture preview is decoded on a background executor. The pending decode
    belongs to this form instance: ``reset_form`` and ``close`` cancel it, and a
    decode that finishes after either call is dropped.
    """

    def __init__(self, client, session, executor: Optional[ThreadPoolExecutor] = None):
        self.client = client
        self.session = session

        self.form_data: Dict[str, Any] = _empty_form()
        self.image_preview: Optional[str] = None
        self.errors: Dict[str, str] = {}
        self.is_loading = False
        self.success = False

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="profile-preview")
        self._preview_future: Optional[Future] = None
        self._lock = threading.Lock()

    # ---------------------------
    # Validation
    # ---------------------------
    def validate_all_fields(self):
        return validate_profile_data(self.form_data)

    def clear_errors(self):
        self.errors = {}

    # ---------------------------
    # Event handlers
    # ---------------------------
    def initialize_form(self, user_data: Dict[str, Any]):
        self.form_data = {
            "fullName": user_data.get("name") or "",
            "phone": user_data.get("phone") or "",
            "address": user_data.get("address") or "",
            "email": user_data.get("email") or "",
            "profilePicture": None,
        }
        if user_data.get("profilePicture"):
            self.image_preview = user_data["profilePicture"]
        self.errors = {}
        self.success = False

    def handle_input_change(self, name: str, value: str):
        if name == "email":
            return
        processed = value
        if name == "phone":
            processed = format_phone(value)
        elif name == "fullName":
            processed = capitalize_words(value)
        self.form_data[name] = processed

        self.errors.pop(name, None)
        self.success = False

    def handle_image_change(self, image: Optional[ImageFile]) -> Optional[Future]:
        if image is None:
            return None
        check = validate_profile_picture(image)
        if not check.is_valid:
            self.errors["profilePicture"] = check.error
            return None

        self.errors.pop("profilePicture", None)
        self.form_data["profilePicture"] = image
        self.success = False
        return self._schedule_preview(image)

    # ---------------------------
    # Preview decoding
    # ---------------------------
    def _schedule_preview(self, image: ImageFile) -> Future:
        self._cancel_preview()
        future = self._executor.submit(to_data_url, image)
        with self._lock:
            self._preview_future = future
        future.add_done_callback(self._apply_preview)
        return future

    def _apply_preview(self, future: Future):
        if future.cancelled():
            return
        with self._lock:
            if future is not self._preview_future:
                return
            self._preview_future = None
            try:
                self.image_preview = future.result()
            except Exception:
                logger.exception("Could not build image preview")

    def _cancel_preview(self):
        with self._lock:
            future, self._preview_future = self._preview_future, None
        if future is not None:
            future.cancel()

    def wait_for_preview(self, timeout: Optional[float] = None) -> Optional[str]:
        with self._lock:
            future = self._preview_future
        if future is not None:
            future.result(timeout=timeout)
            self._apply_preview(future)
        return self.image_preview

    def display_image(self) -> Optional[str]:
        return self.image_preview

    # ---------------------------
    # Submit / reset
    # ---------------------------
    def submit_form(self) -> SubmitResult:
        if self.is_loading:
            return SubmitResult(False, "An update is already in progress")
        try:
            validation = self.validate_all_fields()
            if not validation.is_valid:
                self.errors = validation.errors
                return SubmitResult(False, "Please fix the errors in the form")

            self.is_loading = True
            self.errors = {}
            fields = {
                "fullName": self.form_data["fullName"].strip(),
                "phone": self.form_data["phone"].strip(),
                "address": self.form_data["address"].strip(),
            }
            picture = self.form_data.get("profilePicture")
            body = self.client.update_profile(fields, picture if isinstance(picture, ImageFile) else None)

            if isinstance(body, dict) and body.get("success"):
                self.success = True
                self.session.get_user_info()
                return SubmitResult(True, "Profile updated successfully", body.get("data"))

            message = (body.get("message") if isinstance(body, dict) else None) or "Error updating profile"
            self.errors = {"general": message}
            return SubmitResult(False, message)
        except ApiError as e:
            message = str(e) or "Error updating profile"
            logger.error("Profile update rejected: %s", message)
            self.errors = {"general": message}
            return SubmitResult(False, message)
        except Exception:
            logger.exception("Profile update failed")
            message = "Connection error. Please try again."
            self.errors = {"general": message}
            return SubmitResult(False, message)
        finally:
            self.is_loading = False

    def reset_form(self):
        self._cancel_preview()
        with self._lock:
            self.form_data = _empty_form()
            self.image_preview = None
        self.errors = {}
        self.success = False
        self.is_loading = False

    def close(self):
        self.reset_form()
        if self._owns_executor:
            self._executor.shutdown(wait=False)
