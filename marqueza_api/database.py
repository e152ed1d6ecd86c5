import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from . import config

# This file holds all the in-memory document stores and concurrency locks.

PRODUCTS: Dict[str, Dict[str, Any]] = {}
CATEGORIES: Dict[str, Dict[str, Any]] = {}
CLIENTS: Dict[str, Dict[str, Any]] = {}
TOKENS: Dict[str, str] = {}
_LOCKS: Dict[str, asyncio.Lock] = {}

DEFAULT_CATEGORIES = ["Dried flowers", "Home decor", "Gift boxes", "Personalized frames"]


def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]


def new_id() -> str:
    return uuid.uuid4().hex[:24]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def issue_token(client_id: str, token: str = None) -> str:
    token = token or uuid.uuid4().hex
    TOKENS[token] = client_id
    return token


def add_category(name: str, category_id: str = None) -> Dict[str, Any]:
    cid = category_id or new_id()
    CATEGORIES[cid] = {"_id": cid, "name": name}
    return CATEGORIES[cid]


def add_client(name: str, email: str, phone: str = "", address: str = "",
               created_at: str = None, profile_picture: str = None) -> Dict[str, Any]:
    cid = new_id()
    CLIENTS[cid] = {
        "_id": cid,
        "name": name,
        "email": email,
        "phone": phone,
        "address": address,
        "profilePicture": profile_picture,
        "createdAt": created_at or now_iso(),
    }
    return CLIENTS[cid]


def clear_all() -> None:
    PRODUCTS.clear()
    CATEGORIES.clear()
    CLIENTS.clear()
    TOKENS.clear()
    _LOCKS.clear()


def seed_demo_data() -> None:
    for name in DEFAULT_CATEGORIES:
        add_category(name)
    admin = add_client(
        "Miguel Marqueza",
        "miguel@marqueza.example",
        phone="7123-4567",
        address="Colonia Escalon, San Salvador",
        created_at=(datetime.now(timezone.utc) - timedelta(days=400)).isoformat(),
    )
    issue_token(admin["_id"], config.DEMO_TOKEN)
