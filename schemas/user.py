# schemas/user.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    # username, email or phone number
    identifier: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str]
    phone: Optional[str]
    name: Optional[str]
    createdAt: datetime
    updatedAt: datetime


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str
