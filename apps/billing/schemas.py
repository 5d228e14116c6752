from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class FeatureCreate(BaseModel):
    text: str = Field(min_length=1, max_length=500)
    arabic_text: Optional[str] = Field(default=None, max_length=500)


class FeatureDto(BaseModel):
    id: str
    text: str
    arabic_text: Optional[str] = None


class PlanCreate(BaseModel):
    type: str = Field(min_length=1, max_length=100)
    pricing: int = Field(ge=0)
    feature_ids: List[str] = []


class PlanUpdate(PlanCreate):
    """Full replacement; the plan's feature list becomes exactly `feature_ids`."""


class PlanDto(BaseModel):
    id: str
    type: str
    pricing: int
    features: List[FeatureDto] = []
    created_at: datetime
    updated_at: datetime
