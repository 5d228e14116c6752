"""
Entity -> DTO mappings. Every pair the API returns is registered here, once.
"""
from framework.mapping import copy_fields, mapper
from framework.repository.entity import as_utc, utcnow
from apps.identity.models import ExploreUserAccess, Permission, SystemRole, User
from apps.identity.schemas import ExploreUserDto, PermissionDto, RoleDto, UserDto
from apps.facilities.models import Facility, FacilityType, FacilityUser
from apps.facilities.schemas import FacilityDto, FacilityTypeDto, FacilityUserDto
from apps.accreditation.models import Accreditation, Standard
from apps.accreditation.schemas import AccreditationDto, StandardDto
from apps.billing.models import Feature, SubscriptionPlan
from apps.billing.schemas import FeatureDto, PlanDto
from apps.sessions.models import ActionPlanComponent, GapAnalysisSession, SessionComponent
from apps.sessions.schemas import ActionPlanComponentDto, SessionComponentDto, SessionDto

# --- Identity ---

@mapper.register(User, UserDto)
def user_to_dto(user: User) -> UserDto:
    return copy_fields(user, UserDto)

@mapper.register(ExploreUserAccess, ExploreUserDto)
def explore_user_to_dto(access: ExploreUserAccess) -> ExploreUserDto:
    return ExploreUserDto(
        user_id=access.user_id,
        name=access.user.name,
        email=access.user.email,
        trial_start=access.trial_start,
        trial_end=access.trial_end,
        is_trial_active=as_utc(access.trial_end) > utcnow(),
    )

@mapper.register(SystemRole, RoleDto)
def role_to_dto(role: SystemRole) -> RoleDto:
    return copy_fields(role, RoleDto)

@mapper.register(Permission, PermissionDto)
def permission_to_dto(permission: Permission) -> PermissionDto:
    return copy_fields(permission, PermissionDto)

# --- Facilities ---

@mapper.register(Facility, FacilityDto)
def facility_to_dto(facility: Facility) -> FacilityDto:
    return copy_fields(facility, FacilityDto)

@mapper.register(FacilityType, FacilityTypeDto)
def facility_type_to_dto(facility_type: FacilityType) -> FacilityTypeDto:
    return copy_fields(facility_type, FacilityTypeDto)

@mapper.register(FacilityUser, FacilityUserDto)
def facility_user_to_dto(facility_user: FacilityUser) -> FacilityUserDto:
    user = facility_user.user
    return copy_fields(
        facility_user, FacilityUserDto,
        name=user.name,
        arabic_name=user.arabic_name,
        email=user.email,
        phone=user.phone_number,
        system_role_id=user.system_role_id,
    )

# --- Accreditation ---

@mapper.register(Accreditation, AccreditationDto)
def accreditation_to_dto(accreditation: Accreditation) -> AccreditationDto:
    return copy_fields(accreditation, AccreditationDto)

@mapper.register(Standard, StandardDto)
def standard_to_dto(standard: Standard) -> StandardDto:
    return copy_fields(standard, StandardDto)

# --- Billing ---

@mapper.register(SubscriptionPlan, PlanDto)
def plan_to_dto(plan: SubscriptionPlan) -> PlanDto:
    return copy_fields(plan, PlanDto)

@mapper.register(Feature, FeatureDto)
def feature_to_dto(feature: Feature) -> FeatureDto:
    return copy_fields(feature, FeatureDto)

# --- Sessions ---

@mapper.register(GapAnalysisSession, SessionDto)
def session_to_dto(session: GapAnalysisSession) -> SessionDto:
    return copy_fields(session, SessionDto, is_closed=session.end is not None)

@mapper.register(SessionComponent, SessionComponentDto)
def session_component_to_dto(component: SessionComponent) -> SessionComponentDto:
    return copy_fields(component, SessionComponentDto)

@mapper.register(ActionPlanComponent, ActionPlanComponentDto)
def action_plan_component_to_dto(component: ActionPlanComponent) -> ActionPlanComponentDto:
    return copy_fields(component, ActionPlanComponentDto)
