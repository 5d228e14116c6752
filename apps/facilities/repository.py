"""Facility module repository implementations."""

from typing import List
from framework.repository.base import BaseRepository
from .models import Facility, FacilityUser


class FacilityRepository(BaseRepository[Facility]):
    """Facility repository."""

    def __init__(self, session):
        super().__init__(session, Facility)

    async def get_pending(self) -> List[Facility]:
        """Facilities waiting for approval, oldest first."""
        return await self.get_all(where=Facility.is_approved == False, order_by="created_at")


class FacilityUserRepository(BaseRepository[FacilityUser]):

    def __init__(self, session):
        super().__init__(session, FacilityUser)

    async def get_by_facility(self, facility_id: str) -> List[FacilityUser]:
        return await self.find(FacilityUser.facility_id == facility_id, includes=["user"])
