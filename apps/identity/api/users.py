from typing import Optional
from fastapi import APIRouter, Depends, Query
from framework.dependencies import PageParams, get_uow
from framework.exceptions.errors import EntityNotFoundError
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.mappers import mapper
from ..models import User
from ..schemas import ExploreUserCreate, ExploreUserDto, UserCreate, UserDto, UserUpdate
from ..service import UserService

router = APIRouter()

def get_user_service(uow: UnitOfWork = Depends(get_uow)) -> UserService:
    return UserService(uow)

@router.get("/")
async def list_users(
    paging: PageParams = Depends(),
    search: Optional[str] = Query(None),
    system_role_id: Optional[int] = Query(None, alias="systemRoleId"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    descending: bool = Query(True),
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Paged user list with search and sort."""
    page = await service.list_users(
        paging.page_number, paging.page_size, search=search,
        system_role_id=system_role_id, sort_by=sort_by, descending=descending,
    )
    return ResponseModel.paginated(page, mapper.map_many(page.items, UserDto))

@router.post("/explore")
async def create_explore_user(
    data: ExploreUserCreate,
    service: UserService = Depends(get_user_service)
):
    """Self sign-up for a trial account."""
    access = await service.create_explore_user(data)
    return ResponseModel.success(data=mapper.map(access, ExploreUserDto), message="Explore user created")

@router.get("/explore/{user_id}")
async def get_explore_user(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    access = await service.get_explore_user(user_id)
    return ResponseModel.success(data=mapper.map(access, ExploreUserDto))

@router.get("/{user_id}")
async def get_user(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    entity = await service.get_user(user_id)
    if entity is None:
        raise EntityNotFoundError(User.__name__, user_id)
    return ResponseModel.success(data=mapper.map(entity, UserDto))

@router.post("/")
async def create_user(
    data: UserCreate,
    admin: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    entity = await service.create_user(data)
    return ResponseModel.success(data=mapper.map(entity, UserDto), message="User created")

@router.put("/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    entity = await service.update_user(user_id, data)
    return ResponseModel.success(data=mapper.map(entity, UserDto), message="User updated")

@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    await service.delete_user(user_id)
    return ResponseModel.success(message="User deleted")
