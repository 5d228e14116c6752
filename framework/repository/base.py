"""
Repository abstract base class and generic implementation.

Every read excludes soft-deleted rows unless ``include_deleted=True`` is passed.
Single-entity reads return ``None`` when nothing matches; operations that need
the row to exist (``get_required``, ``update``, ``soft_delete``) raise
``EntityNotFoundError``. Commits belong to the UnitOfWork only.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Type, Any, Iterable, Sequence, Union
from sqlalchemy import func
from sqlalchemy.orm import attributes, selectinload
from sqlalchemy.sql.elements import UnaryExpression
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.audit import populate_created, populate_updated
from framework.config import settings
from framework.exceptions.errors import DuplicateKeyError, EntityNotFoundError, MissingKeyError
from .entity import AuditedEntity, utcnow
from .pagination import Page, clamp_page

T = TypeVar("T", bound=AuditedEntity)

Criteria = Union[None, Any, Sequence[Any]]
Includes = Sequence[Union[str, Any]]


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_by_id(self, key: Any, includes: Includes = (), include_deleted: bool = False) -> Optional[T]:
        """Get entity by key, or None."""
        pass

    @abstractmethod
    async def get_all(self, where: Criteria = None, order_by: Any = None, ascending: bool = True,
                      includes: Includes = (), include_deleted: bool = False) -> List[T]:
        """Get all entities matching optional criteria."""
        pass

    @abstractmethod
    async def find(self, where: Criteria, includes: Includes = (), include_deleted: bool = False) -> List[T]:
        """Find entities matching a predicate."""
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        """Stage entity for insert."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Stage full-record update."""
        pass

    @abstractmethod
    async def remove(self, entity: T) -> T:
        """Soft-delete entity."""
        pass

    @abstractmethod
    async def exists(self, key: Any, include_deleted: bool = False) -> bool:
        """Check entity exists by key."""
        pass

    @abstractmethod
    async def get_paged(self, page_number: int, page_size: int, where: Criteria = None,
                        order_by: Any = None, ascending: bool = True, includes: Includes = (),
                        include_deleted: bool = False) -> Page[T]:
        """Get one page of entities plus total count."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository implementation with SQLModel CRUD; subclasses can add custom queries."""

    def __init__(self, session: AsyncSession, model: Type[T], actor: Optional[str] = None):
        """Initialize repository with session and model; model must declare key_field."""
        if session is None:
            raise ValueError("Session must be provided.")
        key_field = getattr(model, "key_field", None)
        if not key_field:
            raise TypeError(f"{model.__name__} does not declare a key_field")
        self.session = session
        self.model = model
        self.key_field = key_field
        self.actor = actor

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    # --- statement helpers ---

    def _key_column(self):
        return col(getattr(self.model, self.key_field))

    def _select(self, include_deleted: bool = False, includes: Includes = ()):
        statement = select(self.model)
        if not include_deleted:
            statement = statement.where(self.model.is_deleted == False)
        for include in includes:
            relation = getattr(self.model, include) if isinstance(include, str) else include
            statement = statement.options(selectinload(relation))
        return statement

    @staticmethod
    def _apply_where(statement, where: Criteria):
        if where is None:
            return statement
        if isinstance(where, (list, tuple)):
            return statement.where(*where)
        return statement.where(where)

    def _filters(self, filters: dict) -> list:
        criteria = []
        for key, value in filters.items():
            if key not in self.model.model_fields:
                raise ValueError(f"{self.entity_name} has no field '{key}'")
            criteria.append(getattr(self.model, key) == value)
        return criteria

    def _order_clause(self, order_by: Any, ascending: bool):
        """Resolve a field name, column or directional clause into an ORDER BY clause."""
        if order_by is None:
            column = self._key_column()
        elif isinstance(order_by, UnaryExpression):
            return order_by
        elif isinstance(order_by, str):
            if order_by not in self.model.model_fields:
                raise ValueError(f"{self.entity_name} has no field '{order_by}' to order by")
            column = col(getattr(self.model, order_by))
        else:
            column = order_by
        return column.asc() if ascending else column.desc()

    def _ensure_key(self, entity: T, action: str) -> Any:
        if entity is None:
            raise ValueError(f"{self.entity_name} entity must not be None")
        key = entity.entity_key()
        if key is None or (isinstance(key, str) and not key.strip()) or (isinstance(key, int) and key == 0):
            raise MissingKeyError(self.entity_name, self.key_field, action)
        return key

    # --- reads ---

    async def get_by_id(self, key: Any, includes: Includes = (), include_deleted: bool = False) -> Optional[T]:
        """Get entity by key, or None."""
        statement = self._select(include_deleted, includes).where(self._key_column() == key)
        result = await self.session.exec(statement)
        return result.first()

    async def get_required(self, key: Any, includes: Includes = (), include_deleted: bool = False) -> T:
        """Get entity by key; raise EntityNotFoundError when missing."""
        entity = await self.get_by_id(key, includes=includes, include_deleted=include_deleted)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, key)
        return entity

    async def get_all(self, where: Criteria = None, order_by: Any = None, ascending: bool = True,
                      includes: Includes = (), include_deleted: bool = False) -> List[T]:
        """Get all entities (no implicit limit)."""
        statement = self._apply_where(self._select(include_deleted, includes), where)
        if order_by is not None:
            statement = statement.order_by(self._order_clause(order_by, ascending))
        result = await self.session.exec(statement)
        return list(result.all())

    async def find(self, where: Criteria, includes: Includes = (), include_deleted: bool = False) -> List[T]:
        """Find entities by arbitrary predicate (e.g. User.email == 'a@b.com')."""
        if where is None:
            raise ValueError("find() requires a predicate")
        statement = self._apply_where(self._select(include_deleted, includes), where)
        result = await self.session.exec(statement)
        return list(result.all())

    async def find_one(self, include_deleted: bool = False, **filters) -> Optional[T]:
        """Find one entity by filters (e.g. email='a@b.com')."""
        statement = self._apply_where(self._select(include_deleted), self._filters(filters))
        result = await self.session.exec(statement)
        return result.first()

    async def find_all(self, include_deleted: bool = False, **filters) -> List[T]:
        """Find entities by filters."""
        statement = self._apply_where(self._select(include_deleted), self._filters(filters))
        result = await self.session.exec(statement)
        return list(result.all())

    async def count(self, where: Criteria = None, include_deleted: bool = False, **filters) -> int:
        """Count entities matching criteria and filters."""
        statement = self._apply_where(self._select(include_deleted), where)
        statement = self._apply_where(statement, self._filters(filters) or None)
        result = await self.session.exec(select(func.count()).select_from(statement.subquery()))
        return result.one()

    async def exists(self, key: Any, include_deleted: bool = False) -> bool:
        """Check entity exists by key."""
        statement = select(self._key_column()).where(self._key_column() == key)
        if not include_deleted:
            statement = statement.where(self.model.is_deleted == False)
        result = await self.session.exec(statement.limit(1))
        return result.first() is not None

    async def next_int_key(self) -> int:
        """Next integer key: current maximum plus one, deleted rows included."""
        result = await self.session.exec(select(func.max(self._key_column())))
        return (result.one() or 0) + 1

    async def get_paged(self, page_number: int, page_size: int, where: Criteria = None,
                        order_by: Any = None, ascending: bool = True, includes: Includes = (),
                        include_deleted: bool = False) -> Page[T]:
        """
        Get one page of entities.

        Page number is 1-based; both arguments are clamped here. The total
        count is taken over the filtered set before paging. Without
        ``order_by`` rows are ordered by the key column.
        """
        page_number, page_size = clamp_page(page_number, page_size, settings.PAGE_SIZE_MAX)
        total_count = await self.count(where=where, include_deleted=include_deleted)

        page = Page(items=[], total_count=total_count, page_number=page_number, page_size=page_size)
        if page.offset >= total_count:
            return page

        statement = self._apply_where(self._select(include_deleted, includes), where)
        statement = statement.order_by(self._order_clause(order_by, ascending))
        statement = statement.offset(page.offset).limit(page_size)
        result = await self.session.exec(statement)
        page.items = list(result.all())
        return page

    # --- writes ---

    async def add(self, entity: T) -> T:
        """Stage insert; key must be set and unused."""
        key = self._ensure_key(entity, "adding")
        if await self.session.get(self.model, key) is not None:
            raise DuplicateKeyError(self.entity_name, key)
        populate_created(entity, self.actor)
        self.session.add(entity)
        return entity

    async def add_range(self, entities: Iterable[T]) -> List[T]:
        """Stage several inserts; all keys are validated before anything is staged."""
        if entities is None:
            raise ValueError("entities must not be None")
        entities = list(entities)
        if not entities:
            raise ValueError("entities must not be empty")
        seen = set()
        for entity in entities:
            key = self._ensure_key(entity, "adding")
            if key in seen or await self.session.get(self.model, key) is not None:
                raise DuplicateKeyError(self.entity_name, key)
            seen.add(key)
        for entity in entities:
            populate_created(entity, self.actor)
        self.session.add_all(entities)
        return entities

    async def _stage_update(self, entity: T) -> T:
        # A soft-deleted row counts as missing; update must not bring it back
        if entity in self.session:
            history = attributes.get_history(entity, "is_deleted", passive=attributes.PASSIVE_NO_INITIALIZE)
            loaded = history.deleted or history.unchanged
            if loaded and loaded[0]:
                raise EntityNotFoundError(self.entity_name, entity.entity_key())
            self.session.add(entity)
            return entity
        current = await self.session.get(self.model, entity.entity_key())
        if current is None or current.is_deleted:
            raise EntityNotFoundError(self.entity_name, entity.entity_key())
        # Creation stamp is written once
        entity.created_at = current.created_at
        entity.created_by = current.created_by
        return await self.session.merge(entity)

    async def update(self, entity: T) -> T:
        """Stage full-record update (no partial merge); returns the session-bound instance."""
        self._ensure_key(entity, "updating")
        entity.updated_at = utcnow()
        populate_updated(entity, self.actor)
        return await self._stage_update(entity)

    async def update_range(self, entities: Iterable[T]) -> List[T]:
        """Stage several full-record updates."""
        if entities is None:
            raise ValueError("entities must not be None")
        entities = list(entities)
        for entity in entities:
            self._ensure_key(entity, "updating")
        return [await self.update(entity) for entity in entities]

    async def remove(self, entity: T) -> T:
        """Soft-delete: flag the row and stage an update. Rows are never physically deleted."""
        self._ensure_key(entity, "removing")
        entity.is_deleted = True
        entity.updated_at = utcnow()
        populate_updated(entity, self.actor)
        return await self._stage_update(entity)

    async def remove_range(self, entities: Iterable[T]) -> List[T]:
        """Soft-delete several entities."""
        if entities is None:
            raise ValueError("entities must not be None")
        return [await self.remove(entity) for entity in list(entities)]

    async def soft_delete(self, key: Any) -> T:
        """Soft-delete the live row with this key; raise EntityNotFoundError if none."""
        entity = await self.get_required(key)
        return await self.remove(entity)
