from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from pomotask.core.security import decode_access_token

# lets the Swagger docs show a token input
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """
    Validates the JWT and returns the user_id (sub).
    """
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
