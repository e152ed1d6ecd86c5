import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from starlette.datastructures import UploadFile

from ..core import ProfileUpdateIn, public_client
from ..database import CLIENTS, _get_lock
from ..uploads import save_image

logger = logging.getLogger(__name__)

PROFILE_PICTURE_DIR = "profile_pictures"


def _created_at(client) -> Optional[datetime]:
    raw = client.get("createdAt")
    if not raw:
        return None
    try:
        created = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def _month_start(dt: datetime, months_back: int = 0) -> datetime:
    year, month = dt.year, dt.month - months_back
    while month <= 0:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


async def get_new_clients_stats_logic(now: Optional[datetime] = None):
    now = now or datetime.now(timezone.utc)
    current_start = _month_start(now)
    previous_start = _month_start(now, 1)

    current = previous = 0
    for c in CLIENTS.values():
        created = _created_at(c)
        if created is None:
            continue
        if created >= current_start:
            current += 1
        elif created >= previous_start:
            previous += 1

    if previous:
        growth = round((current - previous) / previous * 100, 1)
    else:
        growth = 100.0 if current else 0.0

    return {
        "success": True,
        "data": {"currentMonth": current, "previousMonth": previous, "growthPercentage": growth},
    }


async def get_total_clients_logic():
    return {"success": True, "data": {"total": len(CLIENTS)}}


async def get_detailed_clients_stats_logic(months: int = 6, now: Optional[datetime] = None):
    now = now or datetime.now(timezone.utc)
    buckets = OrderedDict()
    for back in range(months - 1, -1, -1):
        start = _month_start(now, back)
        buckets[start.strftime("%Y-%m")] = 0

    for c in CLIENTS.values():
        created = _created_at(c)
        if created is None:
            continue
        key = created.strftime("%Y-%m")
        if key in buckets:
            buckets[key] += 1

    return {
        "success": True,
        "data": {
            "monthly": [{"month": k, "count": v} for k, v in buckets.items()],
            "total": len(CLIENTS),
        },
    }


async def update_profile_logic(client_id: str, payload: ProfileUpdateIn, picture: Optional[UploadFile]):
    lock = _get_lock(f"client:{client_id}")
    async with lock:
        client = CLIENTS.get(client_id)
        if not client:
            raise HTTPException(status_code=404, detail="client not found")
        picture_url = save_image(picture, PROFILE_PICTURE_DIR) if picture is not None else None
        client["name"] = payload.fullName
        client["phone"] = payload.phone
        client["address"] = payload.address
        if picture_url:
            client["profilePicture"] = picture_url
        logger.info("Profile updated for client %s", client_id)
        return {"success": True, "message": "Profile updated successfully", "data": public_client(client)}
