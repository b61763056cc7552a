# backend/pomotask/schemas/user.py

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from pomotask.schemas.common import CamelModel, _strip_and_reject_blank


class UserBase(CamelModel):
    email: EmailStr

    # trim before EmailStr validation so "  a@b.com  " is accepted
    @field_validator("email", mode="before")
    @classmethod
    def validate_email_strip(cls, v):
        return _strip_and_reject_blank(v, "email")


# ---------- Request schemas ----------

class UserRegister(UserBase):
    """
    [Request] POST /auth/register
    """
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v):
        return _strip_and_reject_blank(v, "username")


class UserLogin(UserBase):
    """
    [Request] POST /auth/login
    """
    password: str


# ---------- Response schemas ----------

class UserRead(UserBase):
    """
    [Response] the caller's account. Never carries the password hash.
    """
    id: str
    username: str
    created_at: datetime


class AuthResponse(CamelModel):
    user: UserRead
    token: str
    token_type: str = "bearer"
