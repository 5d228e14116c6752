from datetime import datetime
from typing import ClassVar, Optional
from sqlmodel import Field, Relationship
from framework.repository.entity import AuditedEntity, utcnow


class SystemRole(AuditedEntity, table=True):
    __tablename__ = "system_roles"
    key_field: ClassVar[str] = "id"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    name: str = Field(max_length=100, description="Role name, e.g. Admin")


class Permission(AuditedEntity, table=True):
    __tablename__ = "permissions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    code: str = Field(max_length=100, unique=True, index=True, description="Permission code, e.g. users.manage")
    description: Optional[str] = Field(default=None, max_length=500)


class SystemRolePermission(AuditedEntity, table=True):
    __tablename__ = "system_role_permissions"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    system_role_id: int = Field(foreign_key="system_roles.id", index=True)
    permission_id: str = Field(foreign_key="permissions.id", index=True, max_length=36)


class User(AuditedEntity, table=True):
    __tablename__ = "users"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    name: str = Field(max_length=100)
    arabic_name: Optional[str] = Field(default=None, max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    password: str = Field(max_length=255, description="bcrypt hash")
    system_role_id: int = Field(foreign_key="system_roles.id", index=True)
    phone_number: Optional[str] = Field(default=None, max_length=20)

    is_email_verified: bool = Field(default=False)
    email_verification_token: Optional[str] = Field(default=None, max_length=64, index=True)
    email_verification_expires_at: Optional[datetime] = Field(default=None)

    system_role: Optional[SystemRole] = Relationship()


class ExploreUserAccess(AuditedEntity, table=True):
    """Trial window of an explore user; shares its key with the user."""
    __tablename__ = "explore_user_accesses"
    key_field: ClassVar[str] = "user_id"

    user_id: str = Field(primary_key=True, foreign_key="users.id", max_length=36)
    trial_start: datetime = Field(default_factory=utcnow)
    trial_end: datetime

    user: Optional[User] = Relationship()


class UserActionLog(AuditedEntity, table=True):
    __tablename__ = "user_action_logs"
    key_field: ClassVar[str] = "id"

    id: str = Field(primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    action: str = Field(max_length=100, description="e.g. login")
    context: Optional[str] = Field(default=None, max_length=1000)
    timestamp: datetime = Field(default_factory=utcnow)
