from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from .models import CompanySize


class FacilityRegister(BaseModel):
    """Public sign-up of a facility: creates the owning user and the facility."""
    name: str = Field(min_length=1, max_length=200)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=20)
    tel: Optional[str] = Field(default=None, max_length=20)
    company_size: CompanySize = CompanySize.SMALL
    location: Optional[str] = Field(default=None, max_length=500)
    arabic_location: Optional[str] = Field(default=None, max_length=500)
    facility_type_id: int
    accreditation_id: str


class FacilityDto(BaseModel):
    user_id: str
    name: str
    arabic_name: Optional[str] = None
    location: Optional[str] = None
    arabic_location: Optional[str] = None
    company_size: CompanySize
    email: Optional[str] = None
    phone: Optional[str] = None
    tel: Optional[str] = None
    accreditation_id: str
    facility_type_id: int
    is_approved: bool
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    created_at: datetime


class FacilityTypeCreate(BaseModel):
    type_name: str = Field(min_length=1, max_length=100)
    arabic_type_name: Optional[str] = Field(default=None, max_length=100)


class FacilityTypeDto(BaseModel):
    id: int
    type_name: str
    arabic_type_name: Optional[str] = None


class FacilityUserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=20)
    facility_role_id: Optional[int] = None


class FacilityUserDto(BaseModel):
    user_id: str
    facility_id: str
    facility_role_id: Optional[int] = None
    name: str
    arabic_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    system_role_id: int
