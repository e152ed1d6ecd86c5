"""
Response handling at the API-client boundary.

The backend answers list endpoints with one of two envelopes: the current
``{"success": true, "data": [...]}`` shape or a bare JSON array kept by older
controllers. Both are decoded here, once, into a tagged value so callers only
ever see a plain list.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the backend. ``status`` is the HTTP status code."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class NonJsonResponseError(ApiError):
    """The server answered with something other than JSON (usually an HTML error page)."""
    pass


@dataclass(frozen=True)
class WrappedList:
    items: List[Any]
    message: Optional[str] = None
    kind: str = "wrapped"


@dataclass(frozen=True)
class LegacyArray:
    items: List[Any]
    kind: str = "legacy-array"


ListEnvelope = Union[WrappedList, LegacyArray]


def _is_json(response) -> bool:
    content_type = response.headers.get("content-type") or ""
    return "application/json" in content_type


def handle_response(response) -> Any:
    """Parse a JSON body, raising ApiError for non-2xx and NonJsonResponseError for non-JSON."""
    status = response.status_code
    if not _is_json(response):
        logger.error("Non-JSON response (status %s): %.200s", status, response.text)
        raise NonJsonResponseError(f"Server returned non-JSON content. Status: {status}", status=status)

    data = response.json()
    if not 200 <= status < 300:
        message = None
        if isinstance(data, dict):
            message = data.get("error") or data.get("message")
        raise ApiError(message or f"Error {status}", status=status, body=data)
    return data


def decode_list_envelope(body: Any) -> Optional[ListEnvelope]:
    if isinstance(body, dict) and body.get("success") and isinstance(body.get("data"), list):
        return WrappedList(items=body["data"], message=body.get("message"))
    if isinstance(body, list):
        return LegacyArray(items=body)
    return None


def items_from(body: Any, label: str = "items") -> List[Any]:
    """Always a list: unknown shapes become [] with a warning so screens stay usable."""
    envelope = decode_list_envelope(body)
    if envelope is None:
        logger.warning("Unexpected %s response shape: %r", label, body)
        return []
    logger.debug("Loaded %d %s (%s)", len(envelope.items), label, envelope.kind)
    return list(envelope.items)


def unwrap_record(body: Any) -> Any:
    if isinstance(body, dict) and body.get("success") and "data" in body:
        return body["data"]
    return body


def success_message(body: Any, default: str) -> str:
    if isinstance(body, dict) and body.get("success") and body.get("message"):
        return body["message"]
    return default
