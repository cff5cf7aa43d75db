from fastapi import APIRouter, Depends

from stockroom.schemas.users.user_schemas import UserOut
from stockroom.utils.get_user import get_current_user
from stockroom.utils.response import APIResponse, success_response

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=APIResponse[UserOut])
async def me_api(user=Depends(get_current_user)):
    return success_response("Current user", UserOut.model_validate(user))
