# app/schemas/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from app.models.user import UserRole
from app.schemas.common import CamelModel

class UserBase(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None

class SignupIn(UserBase):
    password: str = Field(min_length=8, max_length=128)

class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.USER
    # só o super_admin escolhe; para admin é forçado ao próprio id
    admin_id: Optional[str] = None

class UserRef(CamelModel):
    id: str
    name: str
    email: str

class UserOut(UserRef):
    phone_number: Optional[str] = None
    role: UserRole
    admin_id: Optional[str] = None
    created_at: Optional[datetime] = None
