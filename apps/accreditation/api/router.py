from typing import Optional
from fastapi import APIRouter, Depends, Query
from framework.dependencies import PageParams, get_uow
from framework.exceptions.errors import EntityNotFoundError
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.mappers import mapper
from ..models import Accreditation
from ..schemas import AccreditationCreate, AccreditationDto, AccreditationUpdate, StandardDto
from ..service import AccreditationService

router = APIRouter()

def get_accreditation_service(uow: UnitOfWork = Depends(get_uow)) -> AccreditationService:
    return AccreditationService(uow)

@router.get("/")
async def list_accreditations(
    paging: PageParams = Depends(),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    ascending: bool = Query(True),
    service: AccreditationService = Depends(get_accreditation_service)
):
    """Paged accreditation catalogue; public so facilities can pick one at sign-up."""
    page = await service.list_accreditations(
        paging.page_number, paging.page_size, search=search, sort_by=sort_by, ascending=ascending
    )
    return ResponseModel.paginated(page, mapper.map_many(page.items, AccreditationDto))

@router.get("/{accreditation_id}")
async def get_accreditation(
    accreditation_id: str,
    service: AccreditationService = Depends(get_accreditation_service)
):
    accreditation = await service.get_accreditation(accreditation_id)
    if accreditation is None:
        raise EntityNotFoundError(Accreditation.__name__, accreditation_id)
    return ResponseModel.success(data=mapper.map(accreditation, AccreditationDto))

@router.get("/{accreditation_id}/standards")
async def list_standards(
    accreditation_id: str,
    facility_type_id: Optional[int] = Query(None, alias="facilityTypeId"),
    user: CurrentUser = Depends(get_current_user),
    service: AccreditationService = Depends(get_accreditation_service)
):
    standards = await service.list_standards(accreditation_id, facility_type_id)
    return ResponseModel.success(data=mapper.map_many(standards, StandardDto))

@router.post("/")
async def create_accreditation(
    data: AccreditationCreate,
    admin: CurrentUser = Depends(require_admin),
    service: AccreditationService = Depends(get_accreditation_service)
):
    accreditation = await service.create_accreditation(data)
    return ResponseModel.success(data=mapper.map(accreditation, AccreditationDto), message="Accreditation created")

@router.put("/{accreditation_id}")
async def update_accreditation(
    accreditation_id: str,
    data: AccreditationUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: AccreditationService = Depends(get_accreditation_service)
):
    accreditation = await service.update_accreditation(accreditation_id, data)
    return ResponseModel.success(data=mapper.map(accreditation, AccreditationDto), message="Accreditation updated")

@router.delete("/{accreditation_id}")
async def delete_accreditation(
    accreditation_id: str,
    admin: CurrentUser = Depends(require_admin),
    service: AccreditationService = Depends(get_accreditation_service)
):
    await service.delete_accreditation(accreditation_id)
    return ResponseModel.success(message="Accreditation deleted")
