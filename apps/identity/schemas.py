from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field


# --- Auth ---

class LoginSchema(BaseModel):
    email: str
    password: str


class ResendVerificationSchema(BaseModel):
    email: str


# --- Users ---

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    system_role_id: int
    phone_number: Optional[str] = Field(default=None, max_length=20)


class UserUpdate(BaseModel):
    """Full replacement of the editable user fields; password is kept when omitted."""
    name: str = Field(min_length=1, max_length=100)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    system_role_id: int
    phone_number: Optional[str] = Field(default=None, max_length=20)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)


class UserDto(BaseModel):
    id: str
    name: str
    arabic_name: Optional[str] = None
    email: str
    system_role_id: int
    phone_number: Optional[str] = None
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime


class ExploreUserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    phone_number: Optional[str] = Field(default=None, max_length=20)


class ExploreUserDto(BaseModel):
    user_id: str
    name: str
    email: str
    trial_start: datetime
    trial_end: datetime
    is_trial_active: bool


# --- Roles & permissions ---

class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class RoleUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class PermissionCreate(BaseModel):
    code: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class PermissionDto(BaseModel):
    id: str
    code: str
    description: Optional[str] = None


class GrantPermissionSchema(BaseModel):
    permission_id: str


class RoleDto(BaseModel):
    id: int
    name: str
    permissions: List[PermissionDto] = []
