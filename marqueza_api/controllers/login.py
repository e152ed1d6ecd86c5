from fastapi import HTTPException

from ..core import public_client
from ..database import CLIENTS, TOKENS


async def user_info_logic(client_id: str):
    client = CLIENTS.get(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="user not found")
    return {"success": True, "user": public_client(client)}


async def logout_logic(token: str):
    TOKENS.pop(token, None)
    return {"success": True, "message": "Session closed"}
