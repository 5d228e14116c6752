from enum import Enum
from typing import ClassVar, Optional
from sqlmodel import Field
from framework.repository.entity import AuditedEntity


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_APPLICABLE = "not_applicable"


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    YES_NO = "yes_no"
    TEXT = "text"


class Accreditation(AuditedEntity, table=True):
    __tablename__ = "accreditations"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    name: str = Field(max_length=200, index=True)
    arabic_name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    arabic_description: Optional[str] = Field(default=None, max_length=1000)


class Chapter(AuditedEntity, table=True):
    __tablename__ = "chapters"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    title: str = Field(max_length=200)
    arabic_title: Optional[str] = Field(default=None, max_length=200)
    weight: int = Field(default=0)


class ChapterAccreditationFacilityType(AuditedEntity, table=True):
    """Which chapters an accreditation asks of a given facility type."""
    __tablename__ = "chapter_accreditation_facility_types"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    chapter_id: str = Field(foreign_key="chapters.id", index=True, max_length=36)
    accreditation_id: str = Field(foreign_key="accreditations.id", index=True, max_length=36)
    facility_type_id: int = Field(foreign_key="facility_types.id", index=True)
    notes: Optional[str] = Field(default=None, max_length=1000)


class Standard(AuditedEntity, table=True):
    __tablename__ = "standards"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    chapter_accreditation_facility_type_id: str = Field(
        foreign_key="chapter_accreditation_facility_types.id", index=True, max_length=36
    )
    code: str = Field(max_length=50)
    description: Optional[str] = Field(default=None, max_length=1000)
    arabic_description: Optional[str] = Field(default=None, max_length=1000)
    weight: int = Field(default=0)
    is_applicable: bool = Field(default=True)


class EoC(AuditedEntity, table=True):
    """Element of compliance under a standard."""
    __tablename__ = "eocs"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    standard_id: str = Field(foreign_key="standards.id", index=True, max_length=36)
    text: str = Field(max_length=1000)
    arabic_text: Optional[str] = Field(default=None, max_length=1000)
    status: Optional[ComplianceStatus] = Field(default=None)
    is_applicable: bool = Field(default=True)


class Question(AuditedEntity, table=True):
    __tablename__ = "questions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    eoc_id: str = Field(foreign_key="eocs.id", index=True, max_length=36)
    question_type: QuestionType = Field(default=QuestionType.YES_NO)
    text: str = Field(max_length=1000)
    arabic_text: Optional[str] = Field(default=None, max_length=1000)
    is_required: bool = Field(default=True)
    depends_on_question_id: Optional[str] = Field(default=None, foreign_key="questions.id", max_length=36)


class AnswerOption(AuditedEntity, table=True):
    __tablename__ = "answer_options"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    question_id: str = Field(foreign_key="questions.id", index=True, max_length=36)
    option_text: str = Field(max_length=500)
    arabic_option_text: Optional[str] = Field(default=None, max_length=500)
    # No FK: improvement_scenarios already references answer_options
    improvement_scenario_id: Optional[str] = Field(default=None, index=True, max_length=36)


class ImprovementScenario(AuditedEntity, table=True):
    __tablename__ = "improvement_scenarios"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    answer_option_id: str = Field(foreign_key="answer_options.id", index=True, max_length=36)
    scenario_text: str = Field(max_length=2000)
    arabic_scenario_text: Optional[str] = Field(default=None, max_length=2000)
