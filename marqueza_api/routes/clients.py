# marqueza_api/routes/clients.py
# Client statistics and profile update. The controller functions live in
# controllers/clients.py; this module only wires paths to them.

from typing import Optional

from fastapi import APIRouter, Depends, Form, UploadFile

from ..auth import verify_token
from ..controllers import clients as clients_controller
from ..core import ProfileUpdateIn, parse_payload
from ..uploads import single_image_upload

router = APIRouter()

upload_profile_picture = single_image_upload("profilePicture")


# GET /newClientsStats - registrations this month vs. last month
@router.get("/newClientsStats")
async def new_clients_stats():
    return await clients_controller.get_new_clients_stats_logic()


# GET /total - number of registered clients
@router.get("/total")
async def total_clients():
    return await clients_controller.get_total_clients_logic()


# PUT /update-profile - personal data and profile picture of the logged-in client
@router.put("/update-profile")
async def update_profile(
    client_id: str = Depends(verify_token),
    picture: Optional[UploadFile] = Depends(upload_profile_picture),
    fullName: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
):
    fields = {"fullName": fullName, "phone": phone, "address": address}
    payload = parse_payload(ProfileUpdateIn, {k: v for k, v in fields.items() if v is not None})
    return await clients_controller.update_profile_logic(client_id, payload, picture)


@router.get("/detailedStats")
async def detailed_stats():
    handler = getattr(clients_controller, "get_detailed_clients_stats_logic", None)
    if callable(handler):
        return await handler()
    return {
        "success": True,
        "message": "Detailed statistics are not implemented",
        "data": {},
    }
