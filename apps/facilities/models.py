from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional
from sqlmodel import Field, Relationship
from framework.repository.entity import AuditedEntity
from apps.identity.models import User


class CompanySize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class FacilityType(AuditedEntity, table=True):
    __tablename__ = "facility_types"
    key_field: ClassVar[str] = "id"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    type_name: str = Field(max_length=100)
    arabic_type_name: Optional[str] = Field(default=None, max_length=100)


class Facility(AuditedEntity, table=True):
    """A facility account; keyed by the id of the user that owns it."""
    __tablename__ = "facilities"
    key_field: ClassVar[str] = "user_id"

    user_id: str = Field(primary_key=True, foreign_key="users.id", max_length=36)
    name: str = Field(max_length=200)
    arabic_name: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=500)
    arabic_location: Optional[str] = Field(default=None, max_length=500)
    company_size: CompanySize = Field(default=CompanySize.SMALL)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    tel: Optional[str] = Field(default=None, max_length=20)
    accreditation_id: str = Field(foreign_key="accreditations.id", index=True, max_length=36)
    facility_type_id: int = Field(foreign_key="facility_types.id", index=True)

    is_approved: bool = Field(default=False, index=True)
    approved_at: Optional[datetime] = Field(default=None)
    approved_by: Optional[str] = Field(default=None, max_length=100)

    user: Optional[User] = Relationship()
    facility_type: Optional[FacilityType] = Relationship()


class FacilityRole(AuditedEntity, table=True):
    __tablename__ = "facility_roles"
    key_field: ClassVar[str] = "id"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    name: str = Field(max_length=100)


class FacilityRolePermission(AuditedEntity, table=True):
    __tablename__ = "facility_role_permissions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    facility_role_id: int = Field(foreign_key="facility_roles.id", index=True)
    permission_id: str = Field(foreign_key="permissions.id", index=True, max_length=36)


class FacilityUser(AuditedEntity, table=True):
    """Staff membership of a user in a facility."""
    __tablename__ = "facility_users"
    key_field: ClassVar[str] = "user_id"

    user_id: str = Field(primary_key=True, foreign_key="users.id", max_length=36)
    facility_id: str = Field(foreign_key="facilities.user_id", index=True, max_length=36)
    facility_role_id: Optional[int] = Field(default=None, foreign_key="facility_roles.id", index=True)

    user: Optional[User] = Relationship()
