from typing import List, Optional
from loguru import logger
from sqlmodel import col, or_
from framework.exceptions.handler import BusinessException
from framework.repository import BaseRepository, Page, UnitOfWork, generate_key
from .models import Accreditation, ChapterAccreditationFacilityType, Standard
from .schemas import AccreditationCreate, AccreditationUpdate

ACCREDITATION_SORT_FIELDS = {"name", "arabic_name", "description", "arabic_description", "created_at"}


class AccreditationService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def accreditations(self) -> BaseRepository[Accreditation]:
        return self.uow.get_repository(Accreditation)

    async def list_accreditations(self, page_number: int, page_size: int, search: Optional[str] = None,
                                  sort_by: Optional[str] = None, ascending: bool = True) -> Page[Accreditation]:
        sort_by = sort_by or "name"
        if sort_by not in ACCREDITATION_SORT_FIELDS:
            raise BusinessException(f"Cannot sort accreditations by '{sort_by}'")

        where = None
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            where = or_(col(Accreditation.name).ilike(pattern), col(Accreditation.arabic_name).ilike(pattern))

        page = await self.accreditations.get_paged(
            page_number, page_size, where=where, order_by=sort_by, ascending=ascending
        )
        logger.debug(f"Retrieved {len(page.items)} accreditation(s) of {page.total_count}")
        return page

    async def get_accreditation(self, accreditation_id: str) -> Optional[Accreditation]:
        return await self.accreditations.get_by_id(accreditation_id)

    async def create_accreditation(self, data: AccreditationCreate) -> Accreditation:
        accreditation = Accreditation(id=generate_key(), **data.model_dump())
        await self.accreditations.add(accreditation)
        await self.uow.save_changes()
        logger.info(f"Accreditation {accreditation.id} created")
        return accreditation

    async def update_accreditation(self, accreditation_id: str, data: AccreditationUpdate) -> Accreditation:
        accreditation = await self.accreditations.get_required(accreditation_id)
        for field, value in data.model_dump().items():
            setattr(accreditation, field, value)
        accreditation = await self.accreditations.update(accreditation)
        await self.uow.save_changes()
        return accreditation

    async def delete_accreditation(self, accreditation_id: str) -> None:
        await self.accreditations.soft_delete(accreditation_id)
        await self.uow.save_changes()
        logger.info(f"Accreditation {accreditation_id} deleted")

    async def list_standards(self, accreditation_id: str, facility_type_id: Optional[int] = None) -> List[Standard]:
        """Standards reached through the accreditation's chapter assignments."""
        await self.accreditations.get_required(accreditation_id)

        links = self.uow.get_repository(ChapterAccreditationFacilityType)
        filters = {"accreditation_id": accreditation_id}
        if facility_type_id is not None:
            filters["facility_type_id"] = facility_type_id
        link_ids = [link.id for link in await links.find_all(**filters)]
        if not link_ids:
            return []

        standards = self.uow.get_repository(Standard)
        return await standards.get_all(
            where=col(Standard.chapter_accreditation_facility_type_id).in_(link_ids), order_by="code"
        )
