"""
Entity base: audit envelope and declared key field shared by every table model.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from the database."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def generate_key() -> str:
    """New string key (UUID4 text). Keys are assigned by callers, never by repositories."""
    return str(uuid.uuid4())


class AuditedEntity(SQLModel):
    """
    Base for all persisted records.

    Subclasses declare their identifying field with ``key_field``; repositories
    read it instead of inspecting the mapper, so a model without a declared key
    cannot be used with a repository at all.
    """

    key_field: ClassVar[Optional[str]] = None

    created_at: datetime = Field(default_factory=utcnow, description="Created at")
    created_by: Optional[str] = Field(default=None, max_length=100, description="Creator user id")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update at")
    updated_by: Optional[str] = Field(default=None, max_length=100, description="Last updater user id")
    is_deleted: bool = Field(default=False, description="Soft-delete flag")

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.key_field is not None and cls.key_field not in cls.model_fields:
            raise TypeError(f"{cls.__name__}.key_field '{cls.key_field}' is not a field of the model")

    def entity_key(self) -> Any:
        """Value of the declared key field."""
        return getattr(self, self.key_field)
