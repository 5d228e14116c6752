from fastapi import APIRouter, Depends
from framework.dependencies import PageParams, get_uow
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from apps.mappers import mapper
from ..schemas import ActionPlanComponentDto, AnswerRecord, SessionComponentDto, SessionDto, SessionStart
from ..service import GapAnalysisService, SessionDetail

router = APIRouter()

def get_gap_analysis_service(uow: UnitOfWork = Depends(get_uow)) -> GapAnalysisService:
    return GapAnalysisService(uow)

def session_dto(detail: SessionDetail) -> SessionDto:
    dto = mapper.map(detail.session, SessionDto)
    dto.components = mapper.map_many(detail.components, SessionComponentDto)
    dto.action_plan = mapper.map_many(detail.action_plan, ActionPlanComponentDto)
    return dto

@router.post("/")
async def start_session(
    data: SessionStart,
    user: CurrentUser = Depends(get_current_user),
    service: GapAnalysisService = Depends(get_gap_analysis_service)
):
    session = await service.start_session(data.facility_id)
    return ResponseModel.success(data=mapper.map(session, SessionDto), message="Session started")

@router.get("/facility/{facility_id}")
async def list_facility_sessions(
    facility_id: str,
    paging: PageParams = Depends(),
    user: CurrentUser = Depends(get_current_user),
    service: GapAnalysisService = Depends(get_gap_analysis_service)
):
    page = await service.list_for_facility(facility_id, paging.page_number, paging.page_size)
    return ResponseModel.paginated(page, mapper.map_many(page.items, SessionDto))

@router.get("/{session_id}")
async def get_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: GapAnalysisService = Depends(get_gap_analysis_service)
):
    return ResponseModel.success(data=session_dto(await service.get_session(session_id)))

@router.post("/{session_id}/answers")
async def record_answer(
    session_id: str,
    data: AnswerRecord,
    user: CurrentUser = Depends(get_current_user),
    service: GapAnalysisService = Depends(get_gap_analysis_service)
):
    component = await service.record_answer(session_id, data)
    return ResponseModel.success(data=mapper.map(component, SessionComponentDto), message="Answer recorded")

@router.post("/{session_id}/close")
async def close_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: GapAnalysisService = Depends(get_gap_analysis_service)
):
    session = await service.close_session(session_id)
    return ResponseModel.success(data=mapper.map(session, SessionDto), message="Session closed")
