# backend/pomotask/api/endpoints/user/me.py

from fastapi import APIRouter, Depends, HTTPException

from pomotask.api.deps import get_current_user_id
from pomotask.crud import users as users_crud
from pomotask.schemas.user import UserRead

router = APIRouter()


@router.get("/me", response_model=UserRead)
async def read_me(user_id: str = Depends(get_current_user_id)):
    user = await users_crud.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return users_crud.to_user_read(user)
