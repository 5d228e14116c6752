"""
Repository pattern: data access abstraction, decouples service layer from database session.
"""

from .base import BaseRepository, IRepository
from .entity import AuditedEntity, generate_key
from .pagination import Page
from .unit_of_work import UnitOfWork

__all__ = ["AuditedEntity", "BaseRepository", "IRepository", "Page", "UnitOfWork", "generate_key"]
