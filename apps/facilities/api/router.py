from typing import Optional
from fastapi import APIRouter, Depends, Query
from framework.dependencies import PageParams, get_uow
from framework.exceptions.errors import EntityNotFoundError
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.mappers import mapper
from ..models import Facility
from ..schemas import FacilityDto, FacilityRegister, FacilityTypeCreate, FacilityTypeDto, FacilityUserCreate, FacilityUserDto
from ..service import FacilityService

router = APIRouter()

def get_facility_service(uow: UnitOfWork = Depends(get_uow)) -> FacilityService:
    return FacilityService(uow)

@router.post("/register")
async def register_facility(
    data: FacilityRegister,
    service: FacilityService = Depends(get_facility_service)
):
    """Public facility sign-up; the account stays pending until an administrator approves it."""
    facility = await service.register(data)
    return ResponseModel.success(
        data=mapper.map(facility, FacilityDto),
        message="Facility registered. Please verify your e-mail; approval is pending."
    )

@router.get("/")
async def list_facilities(
    paging: PageParams = Depends(),
    search: Optional[str] = Query(None),
    approved: Optional[bool] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service)
):
    page = await service.list_facilities(paging.page_number, paging.page_size, search=search, approved=approved)
    return ResponseModel.paginated(page, mapper.map_many(page.items, FacilityDto))

@router.get("/pending")
async def pending_facilities(
    admin: CurrentUser = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service)
):
    facilities = await service.pending()
    return ResponseModel.success(data=mapper.map_many(facilities, FacilityDto))

@router.get("/types")
async def list_facility_types(service: FacilityService = Depends(get_facility_service)):
    """Facility types are public so the sign-up form can offer them."""
    types = await service.list_types()
    return ResponseModel.success(data=mapper.map_many(types, FacilityTypeDto))

@router.post("/types")
async def create_facility_type(
    data: FacilityTypeCreate,
    admin: CurrentUser = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service)
):
    facility_type = await service.create_type(data)
    return ResponseModel.success(data=mapper.map(facility_type, FacilityTypeDto), message="Facility type created")

@router.get("/users/{user_id}")
async def get_facility_user(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service)
):
    facility_user = await service.get_facility_user(user_id)
    return ResponseModel.success(data=mapper.map(facility_user, FacilityUserDto))

@router.get("/{facility_id}")
async def get_facility(
    facility_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service)
):
    facility = await service.get_facility(facility_id)
    if facility is None:
        raise EntityNotFoundError(Facility.__name__, facility_id)
    return ResponseModel.success(data=mapper.map(facility, FacilityDto))

@router.post("/{facility_id}/approve")
async def approve_facility(
    facility_id: str,
    admin: CurrentUser = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service)
):
    facility = await service.approve(facility_id, admin)
    return ResponseModel.success(data=mapper.map(facility, FacilityDto), message="Facility approved")

@router.post("/{facility_id}/users")
async def add_facility_user(
    facility_id: str,
    data: FacilityUserCreate,
    admin: CurrentUser = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service)
):
    facility_user = await service.add_staff_user(facility_id, data)
    return ResponseModel.success(data=mapper.map(facility_user, FacilityUserDto), message="Staff user created")

@router.get("/{facility_id}/users")
async def list_facility_users(
    facility_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service)
):
    staff = await service.list_staff(facility_id)
    return ResponseModel.success(data=mapper.map_many(staff, FacilityUserDto))
