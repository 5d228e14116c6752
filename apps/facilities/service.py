from typing import List, Optional
from loguru import logger
from sqlmodel import col, or_
from framework.exceptions.handler import BusinessException
from framework.notification.notifier import send_facility_approved_email, send_verification_email
from framework.repository import Page, UnitOfWork
from framework.repository.entity import utcnow
from framework.security import FACILITY_ROLE_ID, STAFF_ROLE_ID, CurrentUser
from apps.accreditation.models import Accreditation
from apps.identity.service import conflict, new_user
from .models import Facility, FacilityRole, FacilityType, FacilityUser
from .repository import FacilityRepository, FacilityUserRepository
from .schemas import FacilityRegister, FacilityTypeCreate, FacilityUserCreate


class FacilityService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def facilities(self) -> FacilityRepository:
        return self.uow.get_repository(Facility, FacilityRepository)

    @property
    def types(self):
        return self.uow.get_repository(FacilityType)

    async def register(self, data: FacilityRegister) -> Facility:
        """Create the owning user and an unapproved facility in one commit."""
        if not await self.types.exists(data.facility_type_id):
            raise BusinessException(f"Facility type {data.facility_type_id} does not exist")
        if not await self.uow.get_repository(Accreditation).exists(data.accreditation_id):
            raise BusinessException(f"Accreditation {data.accreditation_id} does not exist")

        user = await new_user(
            self.uow, data.name, data.email, data.password, FACILITY_ROLE_ID,
            arabic_name=data.arabic_name, phone_number=data.phone,
        )
        facility = Facility(
            user_id=user.id,
            name=data.name,
            arabic_name=data.arabic_name,
            location=data.location,
            arabic_location=data.arabic_location,
            company_size=data.company_size,
            email=user.email,
            phone=data.phone,
            tel=data.tel,
            accreditation_id=data.accreditation_id,
            facility_type_id=data.facility_type_id,
        )
        await self.facilities.add(facility)
        await self.uow.save_changes()
        logger.info(f"Facility {facility.user_id} registered, pending approval")

        await send_verification_email(user.email, user.name, user.email_verification_token)
        return facility

    async def get_facility(self, facility_id: str) -> Optional[Facility]:
        return await self.facilities.get_by_id(facility_id)

    async def list_facilities(self, page_number: int, page_size: int, search: Optional[str] = None,
                              approved: Optional[bool] = None) -> Page[Facility]:
        where = []
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            where.append(or_(
                col(Facility.name).ilike(pattern),
                col(Facility.arabic_name).ilike(pattern),
                col(Facility.email).ilike(pattern),
                col(Facility.location).ilike(pattern),
            ))
        if approved is not None:
            where.append(Facility.is_approved == approved)
        return await self.facilities.get_paged(page_number, page_size, where=where or None, order_by="name")

    async def pending(self) -> List[Facility]:
        return await self.facilities.get_pending()

    async def approve(self, facility_id: str, approver: CurrentUser) -> Facility:
        facility = await self.facilities.get_required(facility_id)
        if facility.is_approved:
            raise BusinessException("Facility is already approved")

        facility.is_approved = True
        facility.approved_at = utcnow()
        facility.approved_by = approver.id
        facility = await self.facilities.update(facility)
        await self.uow.save_changes()
        logger.info(f"Facility {facility_id} approved by {approver.id}")

        await send_facility_approved_email(facility.email, facility.name)
        return facility

    async def list_types(self) -> List[FacilityType]:
        return await self.types.get_all(order_by="id")

    async def create_type(self, data: FacilityTypeCreate) -> FacilityType:
        if await self.types.find_one(type_name=data.type_name):
            raise conflict(f"Facility type '{data.type_name}' already exists")
        facility_type = FacilityType(
            id=await self.types.next_int_key(),
            type_name=data.type_name,
            arabic_type_name=data.arabic_type_name,
        )
        await self.types.add(facility_type)
        await self.uow.save_changes()
        return facility_type

    async def add_staff_user(self, facility_id: str, data: FacilityUserCreate) -> FacilityUser:
        """Create a staff user and attach it to the facility."""
        await self.facilities.get_required(facility_id)
        if data.facility_role_id is not None \
                and not await self.uow.get_repository(FacilityRole).exists(data.facility_role_id):
            raise BusinessException(f"Facility role {data.facility_role_id} does not exist")

        user = await new_user(
            self.uow, data.name, data.email, data.password, STAFF_ROLE_ID,
            arabic_name=data.arabic_name, phone_number=data.phone,
        )
        facility_user = FacilityUser(user_id=user.id, facility_id=facility_id, facility_role_id=data.facility_role_id)
        await self.uow.get_repository(FacilityUser, FacilityUserRepository).add(facility_user)
        await self.uow.save_changes()
        logger.info(f"Staff user {user.id} added to facility {facility_id}")

        facility_user.user = user
        await send_verification_email(user.email, user.name, user.email_verification_token)
        return facility_user

    async def list_staff(self, facility_id: str) -> List[FacilityUser]:
        await self.facilities.get_required(facility_id)
        return await self.uow.get_repository(FacilityUser, FacilityUserRepository).get_by_facility(facility_id)

    async def get_facility_user(self, user_id: str) -> FacilityUser:
        facility_users = self.uow.get_repository(FacilityUser, FacilityUserRepository)
        return await facility_users.get_required(user_id, includes=["user"])
