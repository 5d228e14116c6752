from fastapi import APIRouter, Depends
from framework.dependencies import get_uow
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.mappers import mapper
from ..schemas import GrantPermissionSchema, PermissionCreate, PermissionDto, RoleCreate, RoleDto, RoleUpdate
from ..service import RoleService

router = APIRouter()

def get_role_service(uow: UnitOfWork = Depends(get_uow)) -> RoleService:
    return RoleService(uow)

@router.get("/")
async def list_roles(
    user: CurrentUser = Depends(get_current_user),
    service: RoleService = Depends(get_role_service)
):
    roles = await service.list_roles()
    return ResponseModel.success(data=mapper.map_many(roles, RoleDto))

# Declared before /{role_id} so "permissions" is not taken for a role id
@router.get("/permissions")
async def list_permissions(
    user: CurrentUser = Depends(get_current_user),
    service: RoleService = Depends(get_role_service)
):
    permissions = await service.list_permissions()
    return ResponseModel.success(data=mapper.map_many(permissions, PermissionDto))

@router.post("/permissions")
async def create_permission(
    data: PermissionCreate,
    admin: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    permission = await service.create_permission(data)
    return ResponseModel.success(data=mapper.map(permission, PermissionDto), message="Permission created")

@router.get("/{role_id}")
async def get_role(
    role_id: int,
    user: CurrentUser = Depends(get_current_user),
    service: RoleService = Depends(get_role_service)
):
    role, permissions = await service.get_role(role_id)
    dto = mapper.map(role, RoleDto)
    dto.permissions = mapper.map_many(permissions, PermissionDto)
    return ResponseModel.success(data=dto)

@router.post("/")
async def create_role(
    data: RoleCreate,
    admin: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    role = await service.create_role(data)
    return ResponseModel.success(data=mapper.map(role, RoleDto), message="Role created")

@router.put("/{role_id}")
async def update_role(
    role_id: int,
    data: RoleUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    role = await service.update_role(role_id, data)
    return ResponseModel.success(data=mapper.map(role, RoleDto), message="Role updated")

@router.post("/{role_id}/permissions")
async def grant_permission(
    role_id: int,
    data: GrantPermissionSchema,
    admin: CurrentUser = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    permission = await service.grant_permission(role_id, data.permission_id)
    return ResponseModel.success(data=mapper.map(permission, PermissionDto), message="Permission granted")
