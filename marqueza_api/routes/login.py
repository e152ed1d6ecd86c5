from fastapi import APIRouter, Depends

from ..auth import bearer_token, verify_token
from ..controllers import login as login_controller

router = APIRouter()


@router.get("/user-info")
async def user_info(client_id: str = Depends(verify_token)):
    return await login_controller.user_info_logic(client_id)


@router.post("/logout")
async def logout(token: str = Depends(bearer_token)):
    return await login_controller.logout_logic(token)
