"""
Data-access error taxonomy.

Precondition violations (missing key, disposed unit of work) are programming
errors; ``EntityNotFoundError`` is raised only by operations that assume the
row exists. Store failures (``SQLAlchemyError``) are never wrapped.
"""

from typing import Any


class RepositoryError(Exception):
    """Base class for repository and unit-of-work errors."""


class EntityNotFoundError(RepositoryError, LookupError):
    """No live row for the given key."""

    def __init__(self, entity_name: str, key: Any):
        self.entity_name = entity_name
        self.key = key
        super().__init__(f"Entity of type {entity_name} with key {key} not found.")


class MissingKeyError(RepositoryError, ValueError):
    """Key field empty or zero when staging an insert or update."""

    def __init__(self, entity_name: str, key_field: str, action: str):
        self.entity_name = entity_name
        self.key_field = key_field
        super().__init__(
            f"Key property '{key_field}' of {entity_name} must be set before {action} entity."
        )


class DuplicateKeyError(RepositoryError):
    """A row with the same key already exists (including soft-deleted rows)."""

    def __init__(self, entity_name: str, key: Any):
        self.entity_name = entity_name
        self.key = key
        super().__init__(f"Entity of type {entity_name} with key {key} already exists.")


class UnitOfWorkDisposedError(RepositoryError, RuntimeError):
    """Unit of work used after dispose()."""

    def __init__(self):
        super().__init__("UnitOfWork has already been disposed.")
