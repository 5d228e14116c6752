from fastapi import APIRouter, Depends
from framework.dependencies import get_uow
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user, require_admin
from apps.mappers import mapper
from ..schemas import FeatureCreate, FeatureDto, PlanCreate, PlanDto, PlanUpdate
from ..service import BillingService, PlanWithFeatures

router = APIRouter()

def get_billing_service(uow: UnitOfWork = Depends(get_uow)) -> BillingService:
    return BillingService(uow)

def plan_dto(plan_with_features: PlanWithFeatures) -> PlanDto:
    plan, features = plan_with_features
    dto = mapper.map(plan, PlanDto)
    dto.features = mapper.map_many(features, FeatureDto)
    return dto

@router.get("/plans")
async def list_plans(service: BillingService = Depends(get_billing_service)):
    """Plans are public so the pricing page can show them."""
    plans = await service.list_plans()
    return ResponseModel.success(data=[plan_dto(plan) for plan in plans])

@router.get("/plans/{plan_id}")
async def get_plan(plan_id: str, service: BillingService = Depends(get_billing_service)):
    return ResponseModel.success(data=plan_dto(await service.get_plan(plan_id)))

@router.post("/plans")
async def create_plan(
    data: PlanCreate,
    admin: CurrentUser = Depends(require_admin),
    service: BillingService = Depends(get_billing_service)
):
    plan = await service.create_plan(data)
    return ResponseModel.success(data=plan_dto(plan), message="Subscription plan created")

@router.put("/plans/{plan_id}")
async def update_plan(
    plan_id: str,
    data: PlanUpdate,
    admin: CurrentUser = Depends(require_admin),
    service: BillingService = Depends(get_billing_service)
):
    plan = await service.update_plan(plan_id, data)
    return ResponseModel.success(data=plan_dto(plan), message="Subscription plan updated")

@router.delete("/plans/{plan_id}")
async def delete_plan(
    plan_id: str,
    admin: CurrentUser = Depends(require_admin),
    service: BillingService = Depends(get_billing_service)
):
    await service.delete_plan(plan_id)
    return ResponseModel.success(message="Subscription plan deleted")

@router.get("/features")
async def list_features(
    user: CurrentUser = Depends(get_current_user),
    service: BillingService = Depends(get_billing_service)
):
    features = await service.list_features()
    return ResponseModel.success(data=mapper.map_many(features, FeatureDto))

@router.post("/features")
async def create_feature(
    data: FeatureCreate,
    admin: CurrentUser = Depends(require_admin),
    service: BillingService = Depends(get_billing_service)
):
    feature = await service.create_feature(data)
    return ResponseModel.success(data=mapper.map(feature, FeatureDto), message="Feature created")
