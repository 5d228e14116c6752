from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AccreditationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    arabic_name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    arabic_description: Optional[str] = Field(default=None, max_length=1000)


class AccreditationUpdate(AccreditationCreate):
    pass


class AccreditationDto(BaseModel):
    id: str
    name: str
    arabic_name: Optional[str] = None
    description: Optional[str] = None
    arabic_description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StandardDto(BaseModel):
    id: str
    chapter_accreditation_facility_type_id: str
    code: str
    description: Optional[str] = None
    arabic_description: Optional[str] = None
    weight: int
    is_applicable: bool
