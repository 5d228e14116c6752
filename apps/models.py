"""
Model registration for migrations and metadata.create_all: import every table model here.
When adding/removing apps, add/remove the corresponding imports here.
"""
from apps.identity.models import (
    ExploreUserAccess, Permission, SystemRole, SystemRolePermission, User, UserActionLog,
)
from apps.facilities.models import Facility, FacilityRole, FacilityRolePermission, FacilityType, FacilityUser
from apps.accreditation.models import (
    Accreditation, AnswerOption, Chapter, ChapterAccreditationFacilityType, EoC,
    ImprovementScenario, Question, Standard,
)
from apps.billing.models import Feature, Payment, Subscription, SubscriptionPlan, SubscriptionPlanFeature
from apps.sessions.models import ActionPlanComponent, GapAnalysisSession, SessionComponent

__all__ = [
    "SystemRole", "Permission", "SystemRolePermission", "User", "ExploreUserAccess", "UserActionLog",
    "FacilityType", "Facility", "FacilityRole", "FacilityRolePermission", "FacilityUser",
    "Accreditation", "Chapter", "ChapterAccreditationFacilityType", "Standard", "EoC",
    "Question", "AnswerOption", "ImprovementScenario",
    "Feature", "SubscriptionPlan", "SubscriptionPlanFeature", "Subscription", "Payment",
    "GapAnalysisSession", "SessionComponent", "ActionPlanComponent",
]
