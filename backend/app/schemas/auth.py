from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import InputModel
from app.schemas.user import UserResponse


class UserLogin(InputModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(InputModel):
    refresh_token: str = Field(..., min_length=1)


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(Token):
    user: UserResponse
