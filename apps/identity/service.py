import uuid
from datetime import timedelta
from typing import List, Optional, Tuple
from fastapi import status
from loguru import logger
from sqlmodel import col, or_
from framework.config import settings
from framework.exceptions.handler import BusinessException
from framework.notification.notifier import send_verification_email
from framework.repository import Page, UnitOfWork, generate_key
from framework.repository.entity import as_utc, utcnow
from framework.response import ResponseState
from framework.security import EXPLORE_ROLE_ID, get_password_hash, verify_password
from .models import ExploreUserAccess, Permission, SystemRole, SystemRolePermission, User, UserActionLog
from .repository import PermissionRepository, SystemRoleRepository, UserRepository
from .schemas import ExploreUserCreate, PermissionCreate, RoleCreate, RoleUpdate, UserCreate, UserUpdate

USER_SORT_FIELDS = {"name", "email", "created_at", "updated_at"}


def conflict(message: str) -> BusinessException:
    return BusinessException(message, status_code=status.HTTP_409_CONFLICT, state=ResponseState.CONFLICT)


def issue_verification(user: User) -> str:
    """Give the user a fresh verification token; the caller persists it."""
    user.email_verification_token = uuid.uuid4().hex
    user.email_verification_expires_at = utcnow() + timedelta(hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS)
    return user.email_verification_token


async def new_user(uow: UnitOfWork, name: str, email: str, password: str, system_role_id: int,
                   arabic_name: Optional[str] = None, phone_number: Optional[str] = None) -> User:
    """Stage a new unverified user; e-mail must not be taken, deleted accounts included."""
    users = uow.get_repository(User, UserRepository)
    roles = uow.get_repository(SystemRole, SystemRoleRepository)

    if await users.get_by_email(email, include_deleted=True):
        raise conflict("Email already registered")
    if not await roles.exists(system_role_id):
        raise BusinessException(f"System role {system_role_id} does not exist")

    user = User(
        id=generate_key(),
        name=name,
        arabic_name=arabic_name,
        email=email.strip(),
        password=get_password_hash(password),
        system_role_id=system_role_id,
        phone_number=phone_number,
    )
    issue_verification(user)
    await users.add(user)
    return user


class IdentityService:
    def __init__(self, uow: UnitOfWork):
        """Initialize Identity Service with UnitOfWork."""
        self.uow = uow

    @property
    def users(self) -> UserRepository:
        return self.uow.get_repository(User, UserRepository)

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials, require a verified e-mail and record the login."""
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.password):
            raise BusinessException(
                "Invalid email or password",
                status_code=status.HTTP_401_UNAUTHORIZED,
                state=ResponseState.UNAUTHORIZED,
            )
        if not user.is_email_verified:
            raise BusinessException(
                "Email address has not been verified",
                status_code=status.HTTP_403_FORBIDDEN,
                state=ResponseState.FORBIDDEN,
            )

        logs = self.uow.get_repository(UserActionLog)
        await logs.add(UserActionLog(id=generate_key(), user_id=user.id, action="login", context="User logged in"))
        await self.uow.save_changes()

        logger.info(f"User {user.id} authenticated successfully")
        return user

    async def verify_email(self, token: str) -> User:
        user = await self.users.get_by_verification_token(token) if token else None
        if user is None or as_utc(user.email_verification_expires_at) is None \
                or as_utc(user.email_verification_expires_at) < utcnow():
            raise BusinessException("Invalid or expired verification token")

        user.is_email_verified = True
        user.email_verification_token = None
        user.email_verification_expires_at = None
        await self.users.update(user)
        await self.uow.save_changes()
        logger.info(f"User {user.id} verified e-mail")
        return user

    async def resend_verification(self, email: str) -> None:
        user = await self.users.get_by_email(email)
        if user is None:
            raise BusinessException("User not found", status_code=status.HTTP_404_NOT_FOUND,
                                    state=ResponseState.NOT_FOUND)
        if user.is_email_verified:
            raise BusinessException("Email is already verified")

        token = issue_verification(user)
        await self.users.update(user)
        await self.uow.save_changes()
        await send_verification_email(user.email, user.name, token)


class UserService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def users(self) -> UserRepository:
        return self.uow.get_repository(User, UserRepository)

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.users.get_by_id(user_id)

    async def list_users(self, page_number: int, page_size: int, search: Optional[str] = None,
                         system_role_id: Optional[int] = None, sort_by: Optional[str] = None,
                         descending: bool = True) -> Page[User]:
        """Paged user list with free-text search, role filter and a whitelisted sort field."""
        sort_by = sort_by or "created_at"
        if sort_by not in USER_SORT_FIELDS:
            raise BusinessException(f"Cannot sort users by '{sort_by}'")

        where = []
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            where.append(or_(
                col(User.name).ilike(pattern),
                col(User.arabic_name).ilike(pattern),
                col(User.email).ilike(pattern),
                col(User.phone_number).ilike(pattern),
            ))
        if system_role_id is not None:
            where.append(User.system_role_id == system_role_id)

        return await self.users.get_paged(
            page_number, page_size, where=where or None, order_by=sort_by, ascending=not descending
        )

    async def create_user(self, data: UserCreate) -> User:
        user = await new_user(
            self.uow, data.name, data.email, data.password, data.system_role_id,
            arabic_name=data.arabic_name, phone_number=data.phone_number,
        )
        await self.uow.save_changes()
        logger.info(f"User {user.id} created")
        await send_verification_email(user.email, user.name, user.email_verification_token)
        return user

    async def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = await self.users.get_required(user_id)

        if data.email.lower() != user.email.lower():
            other = await self.users.get_by_email(data.email, include_deleted=True)
            if other is not None and other.id != user.id:
                raise conflict("Email already registered")
        if data.system_role_id != user.system_role_id:
            roles = self.uow.get_repository(SystemRole, SystemRoleRepository)
            if not await roles.exists(data.system_role_id):
                raise BusinessException(f"System role {data.system_role_id} does not exist")

        user.name = data.name
        user.arabic_name = data.arabic_name
        user.email = data.email
        user.system_role_id = data.system_role_id
        user.phone_number = data.phone_number
        if data.password:
            user.password = get_password_hash(data.password)

        user = await self.users.update(user)
        await self.uow.save_changes()
        return user

    async def delete_user(self, user_id: str) -> None:
        await self.users.soft_delete(user_id)
        await self.uow.save_changes()
        logger.info(f"User {user_id} deleted")

    async def create_explore_user(self, data: ExploreUserCreate) -> ExploreUserAccess:
        """Explore user plus its trial window."""
        user = await new_user(
            self.uow, data.name, data.email, data.password, EXPLORE_ROLE_ID,
            arabic_name=data.arabic_name, phone_number=data.phone_number,
        )
        start = utcnow()
        access = ExploreUserAccess(
            user_id=user.id,
            trial_start=start,
            trial_end=start + timedelta(days=settings.EXPLORE_TRIAL_DAYS),
        )
        await self.uow.get_repository(ExploreUserAccess).add(access)
        await self.uow.save_changes()
        access.user = user
        await send_verification_email(user.email, user.name, user.email_verification_token)
        return access

    async def get_explore_user(self, user_id: str) -> ExploreUserAccess:
        accesses = self.uow.get_repository(ExploreUserAccess)
        return await accesses.get_required(user_id, includes=["user"])


class RoleService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def roles(self) -> SystemRoleRepository:
        return self.uow.get_repository(SystemRole, SystemRoleRepository)

    @property
    def permissions(self) -> PermissionRepository:
        return self.uow.get_repository(Permission, PermissionRepository)

    async def list_roles(self) -> List[SystemRole]:
        return await self.roles.get_all(order_by="id")

    async def get_role(self, role_id: int) -> Tuple[SystemRole, List[Permission]]:
        role = await self.roles.get_required(role_id)
        return role, await self.role_permissions(role_id)

    async def role_permissions(self, role_id: int) -> List[Permission]:
        links = await self.uow.get_repository(SystemRolePermission).find_all(system_role_id=role_id)
        return await self.permissions.get_many([link.permission_id for link in links])

    async def create_role(self, data: RoleCreate) -> SystemRole:
        if await self.roles.get_by_name(data.name):
            raise conflict(f"Role '{data.name}' already exists")
        role = SystemRole(id=await self.roles.next_int_key(), name=data.name)
        await self.roles.add(role)
        await self.uow.save_changes()
        return role

    async def update_role(self, role_id: int, data: RoleUpdate) -> SystemRole:
        role = await self.roles.get_required(role_id)
        other = await self.roles.get_by_name(data.name)
        if other is not None and other.id != role_id:
            raise conflict(f"Role '{data.name}' already exists")
        role.name = data.name
        role = await self.roles.update(role)
        await self.uow.save_changes()
        return role

    async def list_permissions(self) -> List[Permission]:
        return await self.permissions.get_all(order_by="code")

    async def create_permission(self, data: PermissionCreate) -> Permission:
        if await self.permissions.get_by_code(data.code):
            raise conflict(f"Permission '{data.code}' already exists")
        permission = Permission(id=generate_key(), code=data.code, description=data.description)
        await self.permissions.add(permission)
        await self.uow.save_changes()
        return permission

    async def grant_permission(self, role_id: int, permission_id: str) -> Permission:
        await self.roles.get_required(role_id)
        permission = await self.permissions.get_required(permission_id)

        links = self.uow.get_repository(SystemRolePermission)
        if await links.find_one(system_role_id=role_id, permission_id=permission_id):
            raise conflict(f"Role {role_id} already has permission '{permission.code}'")
        await links.add(SystemRolePermission(id=generate_key(), system_role_id=role_id, permission_id=permission_id))
        await self.uow.save_changes()
        logger.info(f"Granted permission {permission.code} to role {role_id}")
        return permission
