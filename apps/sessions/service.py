from dataclasses import dataclass, field
from typing import List
from loguru import logger
from framework.exceptions.handler import BusinessException
from framework.repository import BaseRepository, Page, UnitOfWork, generate_key
from framework.repository.entity import utcnow
from apps.accreditation.models import AnswerOption, ComplianceStatus, Question
from apps.facilities.models import Facility, FacilityUser
from .models import ActionPlanComponent, GapAnalysisSession, SessionComponent
from .schemas import AnswerRecord

# Answers with these statuses put the option's improvement scenario on the action plan
NEEDS_ACTION = {ComplianceStatus.PARTIAL, ComplianceStatus.NON_COMPLIANT}


@dataclass
class SessionDetail:
    session: GapAnalysisSession
    components: List[SessionComponent] = field(default_factory=list)
    action_plan: List[ActionPlanComponent] = field(default_factory=list)


class GapAnalysisService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def sessions(self) -> BaseRepository[GapAnalysisSession]:
        return self.uow.get_repository(GapAnalysisSession)

    @property
    def components(self) -> BaseRepository[SessionComponent]:
        return self.uow.get_repository(SessionComponent)

    @property
    def action_plan(self) -> BaseRepository[ActionPlanComponent]:
        return self.uow.get_repository(ActionPlanComponent)

    async def start_session(self, facility_id: str) -> GapAnalysisSession:
        facility = await self.uow.get_repository(Facility).get_required(facility_id)
        if not facility.is_approved:
            raise BusinessException("Facility is not approved yet")

        session = GapAnalysisSession(id=generate_key(), facility_id=facility_id, start=utcnow())
        await self.sessions.add(session)
        await self.uow.save_changes()
        logger.info(f"Gap analysis session {session.id} started for facility {facility_id}")
        return session

    async def get_session(self, session_id: str) -> SessionDetail:
        session = await self.sessions.get_required(session_id)
        return SessionDetail(
            session=session,
            components=await self.components.get_all(
                where=SessionComponent.session_id == session_id, order_by="created_at"
            ),
            action_plan=await self.action_plan.get_all(
                where=ActionPlanComponent.session_id == session_id, order_by="created_at"
            ),
        )

    async def list_for_facility(self, facility_id: str, page_number: int, page_size: int) -> Page[GapAnalysisSession]:
        await self.uow.get_repository(Facility).get_required(facility_id)
        return await self.sessions.get_paged(
            page_number, page_size,
            where=GapAnalysisSession.facility_id == facility_id,
            order_by="start", ascending=False,
        )

    async def record_answer(self, session_id: str, data: AnswerRecord) -> SessionComponent:
        """Store the answer; scenario of a failing option goes on the action plan."""
        session = await self.sessions.get_required(session_id)
        if session.end is not None:
            raise BusinessException("Session is closed")
        if not await self.uow.get_repository(Question).exists(data.question_id):
            raise BusinessException(f"Question {data.question_id} does not exist")

        component = await self.components.find_one(session_id=session_id, question_id=data.question_id)
        if component is None:
            component = SessionComponent(
                id=generate_key(),
                session_id=session_id,
                question_id=data.question_id,
                answer=data.answer,
                answer_status=data.answer_status,
            )
            await self.components.add(component)
        else:
            component.answer = data.answer
            component.answer_status = data.answer_status
            component = await self.components.update(component)

        if data.answer_option_id and data.answer_status in NEEDS_ACTION:
            await self._plan_improvement(session, data)

        await self.uow.save_changes()
        return component

    async def _plan_improvement(self, session: GapAnalysisSession, data: AnswerRecord) -> None:
        option = await self.uow.get_repository(AnswerOption).get_by_id(data.answer_option_id)
        if option is None or option.question_id != data.question_id:
            raise BusinessException(f"Answer option {data.answer_option_id} does not belong to question {data.question_id}")
        if not option.improvement_scenario_id:
            return
        if data.assigned_to:
            assignee = await self.uow.get_repository(FacilityUser).get_by_id(data.assigned_to)
            if assignee is None or assignee.facility_id != session.facility_id:
                raise BusinessException(f"User {data.assigned_to} is not staff of this facility")
        if await self.action_plan.find_one(session_id=session.id, scenario_id=option.improvement_scenario_id):
            return

        await self.action_plan.add(ActionPlanComponent(
            id=generate_key(),
            session_id=session.id,
            scenario_id=option.improvement_scenario_id,
            assigned_to=data.assigned_to,
        ))

    async def close_session(self, session_id: str) -> GapAnalysisSession:
        session = await self.sessions.get_required(session_id)
        if session.end is not None:
            raise BusinessException("Session is already closed")
        session.end = utcnow()
        session = await self.sessions.update(session)
        await self.uow.save_changes()
        logger.info(f"Gap analysis session {session_id} closed")
        return session
