# backend/pomotask/api/endpoints/web/auth.py
import logging

from fastapi import APIRouter, HTTPException, status

from pomotask.core.security import create_access_token
from pomotask.crud import users as users_crud
from pomotask.schemas.user import AuthResponse, UserLogin, UserRegister

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister):
    user = await users_crud.create_user(
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return AuthResponse(
        user=users_crud.to_user_read(user),
        token=create_access_token(user.id),
    )


@router.post("/login", response_model=AuthResponse)
async def login(body: UserLogin):
    user = await users_crud.authenticate(body.email, body.password)
    if user is None:
        logger.info("Failed login for %s", body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthResponse(
        user=users_crud.to_user_read(user),
        token=create_access_token(user.id),
    )
