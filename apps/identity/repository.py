"""Identity module repository implementations."""

from typing import List, Optional
from sqlmodel import func
from framework.repository.base import BaseRepository
from .models import Permission, SystemRole, User


class UserRepository(BaseRepository[User]):
    """User repository."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str, include_deleted: bool = False) -> Optional[User]:
        """Find user by e-mail, ignoring case."""
        users = await self.find(func.lower(User.email) == email.strip().lower(), include_deleted=include_deleted)
        return users[0] if users else None

    async def get_by_verification_token(self, token: str) -> Optional[User]:
        return await self.find_one(email_verification_token=token)


class SystemRoleRepository(BaseRepository[SystemRole]):
    """System role repository."""

    def __init__(self, session):
        super().__init__(session, SystemRole)

    async def get_by_name(self, name: str) -> Optional[SystemRole]:
        return await self.find_one(name=name)


class PermissionRepository(BaseRepository[Permission]):

    def __init__(self, session):
        super().__init__(session, Permission)

    async def get_by_code(self, code: str) -> Optional[Permission]:
        return await self.find_one(code=code)

    async def get_many(self, ids: List[str]) -> List[Permission]:
        if not ids:
            return []
        return await self.find(Permission.id.in_(ids))
