from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from apps.accreditation.models import ComplianceStatus
from .models import ProgressStatus


class SessionStart(BaseModel):
    facility_id: str


class AnswerRecord(BaseModel):
    """Answer to a question; re-answering a question replaces the earlier answer."""
    question_id: str
    answer: str = Field(min_length=1, max_length=1000)
    answer_status: ComplianceStatus
    answer_option_id: Optional[str] = None
    assigned_to: Optional[str] = None


class SessionComponentDto(BaseModel):
    id: str
    question_id: str
    answer: str
    answer_status: ComplianceStatus


class ActionPlanComponentDto(BaseModel):
    id: str
    scenario_id: str
    assigned_to: Optional[str] = None
    progress_status: ProgressStatus


class SessionDto(BaseModel):
    id: str
    facility_id: str
    start: datetime
    end: Optional[datetime] = None
    is_closed: bool
    components: List[SessionComponentDto] = []
    action_plan: List[ActionPlanComponentDto] = []
