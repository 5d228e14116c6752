from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional
from sqlmodel import Field
from framework.repository.entity import AuditedEntity, utcnow
from apps.accreditation.models import ComplianceStatus


class ProgressStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class GapAnalysisSession(AuditedEntity, table=True):
    __tablename__ = "gap_analysis_sessions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    facility_id: str = Field(foreign_key="facilities.user_id", index=True, max_length=36)
    start: datetime = Field(default_factory=utcnow)
    end: Optional[datetime] = Field(default=None, description="Set when the session is closed")


class SessionComponent(AuditedEntity, table=True):
    """Answer given to one question within a session."""
    __tablename__ = "session_components"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="gap_analysis_sessions.id", index=True, max_length=36)
    question_id: str = Field(foreign_key="questions.id", index=True, max_length=36)
    answer: str = Field(max_length=1000)
    answer_status: ComplianceStatus


class ActionPlanComponent(AuditedEntity, table=True):
    """Improvement scenario to carry out after a session."""
    __tablename__ = "action_plan_components"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="gap_analysis_sessions.id", index=True, max_length=36)
    scenario_id: str = Field(foreign_key="improvement_scenarios.id", index=True, max_length=36)
    assigned_to: Optional[str] = Field(default=None, foreign_key="facility_users.user_id", index=True, max_length=36)
    progress_status: ProgressStatus = Field(default=ProgressStatus.NOT_STARTED)
