"""
Auth Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class GoogleTokenRequest(BaseModel):
    """Google ID token obtained by the front end"""
    token: str = Field(..., description="Google ID token from client")


class GoogleUserInfo(BaseModel):
    sub: str
    email: EmailStr
    name: str
    picture: Optional[str] = None
    locale: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    picture: Optional[str] = None
    locale: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class PasswordCheckRequest(BaseModel):
    password: str


class PasswordCheckResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
