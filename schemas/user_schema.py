from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from models.enums import Role


class UserBase(BaseModel):
    email: str
    display_name: str = Field(..., min_length=2)

    @validator('email')
    def validate_email(cls, v):
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError('Please enter a valid email address')
        return v


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    manager_access_code: Optional[str] = None


class UserUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=2)
    photo_url: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class UserResponse(UserBase):
    id: int
    role: Role
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    email: str
    password: str


class UserResponseWithToken(UserResponse):
    access_token: str
    token_type: str = "bearer"


class PasswordResetRequest(BaseModel):
    email: str


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str = Field(..., min_length=6)


class MessageResponse(BaseModel):
    message: str
