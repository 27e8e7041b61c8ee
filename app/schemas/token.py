# app/schemas/token.py
from pydantic import EmailStr

from app.schemas.common import CamelModel
from app.schemas.user import UserOut

class LoginIn(CamelModel):
    email: EmailStr
    password: str

class RefreshIn(CamelModel):
    refresh_token: str

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AuthResponse(TokenPair):
    user: UserOut
