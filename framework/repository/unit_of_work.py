"""
Unit of Work: manages repositories and transaction boundaries.
"""

from typing import Dict, Optional, Type
from sqlalchemy import event
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.audit import current_actor
from framework.exceptions.errors import UnitOfWorkDisposedError
from framework.logging.logger import get_logger
from .base import BaseRepository

logger = get_logger("unit_of_work")


class UnitOfWork:
    """
    Owns one session for one logical operation (one request).

    Hands out at most one repository per entity type and is the only place
    changes are committed. Not safe for concurrent use: operations on one
    instance must be awaited one after another. Cancelling an awaited call
    leaves already-staged changes pending until dispose().
    """

    def __init__(self, session: Optional[AsyncSession] = None, actor: Optional[str] = None):
        """Initialize UnitOfWork; session must be provided (e.g. UnitOfWork.from_session())."""
        if session is None:
            raise ValueError("Session must be provided. Use UnitOfWork.from_session() or pass session explicitly.")

        self.session = session
        self._actor = actor
        self._repositories: Dict[type, BaseRepository] = {}
        self._affected = 0
        self._disposed = False
        event.listen(self.session.sync_session, "after_flush", self._count_flushed)

    @classmethod
    async def from_session(cls, session: AsyncSession, actor: Optional[str] = None) -> "UnitOfWork":
        """Create UnitOfWork from an existing session."""
        return cls(session=session, actor=actor)

    @property
    def actor(self) -> str:
        """User id stamped into audit fields; resolved from the current request when not given."""
        return self._actor or current_actor()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_open(self) -> None:
        if self._disposed:
            raise UnitOfWorkDisposedError()

    def _count_flushed(self, session, flush_context) -> None:
        dirty = [obj for obj in session.dirty if session.is_modified(obj, include_collections=False)]
        self._affected += len(session.new) + len(dirty) + len(session.deleted)

    def get_repository(self, model_class: Type, repo_class: Type[BaseRepository] = BaseRepository) -> BaseRepository:
        """Get or create the repository for an entity type (one instance per type)."""
        self._check_open()
        repository = self._repositories.get(model_class)
        if repository is None:
            if repo_class is BaseRepository:
                repository = BaseRepository(self.session, model_class, actor=self._actor)
            else:
                repository = repo_class(self.session)
                if repository.model is not model_class:
                    raise TypeError(
                        f"{repo_class.__name__} serves {repository.model.__name__}, not {model_class.__name__}"
                    )
                repository.actor = self._actor
            self._repositories[model_class] = repository
        elif not isinstance(repository, repo_class):
            raise TypeError(
                f"Repository for {model_class.__name__} already created as "
                f"{type(repository).__name__}, not {repo_class.__name__}"
            )
        return repository

    async def save_changes(self) -> int:
        """Commit all staged changes in one transaction; return number of rows written."""
        self._check_open()
        await self.session.commit()
        affected, self._affected = self._affected, 0
        logger.debug(f"Committed {affected} change(s)")
        return affected

    async def rollback(self) -> None:
        """Rollback all changes."""
        self._check_open()
        await self.session.rollback()
        self._affected = 0

    async def flush(self) -> None:
        """Flush session (e.g. to surface constraint errors before commit)."""
        self._check_open()
        await self.session.flush()

    async def dispose(self) -> None:
        """Release the session; safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._repositories.clear()
        event.remove(self.session.sync_session, "after_flush", self._count_flushed)
        await self.session.close()

    async def __aenter__(self):
        self._check_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None and not self._disposed:
                await self.rollback()
        finally:
            await self.dispose()
