"""Gap analysis sessions: answers, action plan and closing."""
import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession
from apps.accreditation.models import AnswerOption, EoC, ImprovementScenario, Question, Standard
from apps.facilities.models import Facility, FacilityUser
from apps.identity.models import User
from apps.sessions.models import ActionPlanComponent

SESSIONS = "/api/v1/sessions"


def facility_owner(user_id: str, approved: bool) -> list:
    return [
        User(id=user_id, name=user_id, email=f"{user_id}@accredigo.com", password="hash", system_role_id=2),
        Facility(
            user_id=user_id, name=f"Facility {user_id}", accreditation_id="acc-1",
            facility_type_id=1, is_approved=approved,
        ),
    ]


@pytest.fixture
async def facility(async_session: AsyncSession, roles, accreditation, facility_type) -> str:
    """Approved facility with one staff member, plus a pending one."""
    async_session.add_all(facility_owner("fac-1", approved=True) + facility_owner("fac-2", approved=False) + [
        User(id="staff-9", name="Officer", email="officer@accredigo.com", password="hash", system_role_id=3),
        FacilityUser(user_id="staff-9", facility_id="fac-1"),
        User(id="staff-other", name="Other", email="other@accredigo.com", password="hash", system_role_id=3),
        FacilityUser(user_id="staff-other", facility_id="fac-2"),
    ])
    await async_session.commit()
    return "fac-1"


@pytest.fixture
async def questions(async_session: AsyncSession):
    """One question whose 'No' option leads to an improvement scenario."""
    async_session.add_all([
        Standard(id="st-1", chapter_accreditation_facility_type_id="link-1", code="LD.1"),
        EoC(id="eoc-1", standard_id="st-1", text="Leaders are appointed"),
        Question(id="q-1", eoc_id="eoc-1", text="Is there an appointed director?"),
        Question(id="q-2", eoc_id="eoc-1", text="Is the appointment documented?"),
        AnswerOption(id="opt-yes", question_id="q-1", option_text="Yes"),
        AnswerOption(id="opt-no", question_id="q-1", option_text="No", improvement_scenario_id="sc-1"),
        ImprovementScenario(id="sc-1", answer_option_id="opt-no", scenario_text="Appoint a director"),
    ])
    await async_session.commit()


async def start(client: AsyncClient, headers: dict, facility_id: str = "fac-1") -> str:
    response = await client.post(f"{SESSIONS}/", headers=headers, json={"facility_id": facility_id})
    assert response.status_code == 200
    return response.json()["data"]["id"]


async def test_start_session(client: AsyncClient, facility, staff_headers):
    response = await client.post(f"{SESSIONS}/", headers=staff_headers, json={"facility_id": facility})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["facility_id"] == "fac-1"
    assert data["is_closed"] is False
    assert data["end"] is None


async def test_unapproved_facility_cannot_start(client: AsyncClient, facility, staff_headers):
    response = await client.post(f"{SESSIONS}/", headers=staff_headers, json={"facility_id": "fac-2"})
    assert response.status_code == 400


async def test_unknown_facility(client: AsyncClient, staff_headers):
    response = await client.post(f"{SESSIONS}/", headers=staff_headers, json={"facility_id": "nope"})
    assert response.status_code == 404


async def test_requires_login(client: AsyncClient, facility):
    response = await client.post(f"{SESSIONS}/", json={"facility_id": facility})
    assert response.status_code == 401


class TestAnswers:

    async def test_failing_answer_adds_action_plan(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-1", "answer": "No", "answer_status": "non_compliant",
            "answer_option_id": "opt-no", "assigned_to": "staff-9",
        })
        assert response.status_code == 200
        assert response.json()["data"]["answer_status"] == "non_compliant"

        detail = (await client.get(f"{SESSIONS}/{session_id}", headers=staff_headers)).json()["data"]
        assert [c["question_id"] for c in detail["components"]] == ["q-1"]
        assert len(detail["action_plan"]) == 1
        plan = detail["action_plan"][0]
        assert plan["scenario_id"] == "sc-1"
        assert plan["assigned_to"] == "staff-9"
        assert plan["progress_status"] == "not_started"

    async def test_compliant_answer_adds_nothing(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-1", "answer": "No", "answer_status": "compliant", "answer_option_id": "opt-no",
        })
        detail = (await client.get(f"{SESSIONS}/{session_id}", headers=staff_headers)).json()["data"]
        assert len(detail["components"]) == 1
        assert detail["action_plan"] == []

    async def test_reanswer_replaces_and_does_not_duplicate_plan(self, client: AsyncClient, facility, questions,
                                                                 staff_headers, uow_factory):
        session_id = await start(client, staff_headers)
        answer = {"question_id": "q-1", "answer": "No", "answer_status": "partial", "answer_option_id": "opt-no"}
        await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json=answer)
        answer["answer"] = "Still no"
        await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json=answer)

        detail = (await client.get(f"{SESSIONS}/{session_id}", headers=staff_headers)).json()["data"]
        assert [c["answer"] for c in detail["components"]] == ["Still no"]

        unit = uow_factory()
        try:
            assert await unit.get_repository(ActionPlanComponent).count(session_id=session_id) == 1
        finally:
            await unit.dispose()

    async def test_option_of_another_question(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-2", "answer": "No", "answer_status": "partial", "answer_option_id": "opt-no",
        })
        assert response.status_code == 400
        detail = (await client.get(f"{SESSIONS}/{session_id}", headers=staff_headers)).json()["data"]
        assert detail["components"] == []

    async def test_assignee_must_work_at_facility(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-1", "answer": "No", "answer_status": "partial",
            "answer_option_id": "opt-no", "assigned_to": "staff-other",
        })
        assert response.status_code == 400

    async def test_unknown_question(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-404", "answer": "Yes", "answer_status": "compliant",
        })
        assert response.status_code == 400

    async def test_invalid_status(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-1", "answer": "Yes", "answer_status": "maybe",
        })
        assert response.status_code == 422


class TestClosing:

    async def test_close_then_answers_are_refused(self, client: AsyncClient, facility, questions, staff_headers):
        session_id = await start(client, staff_headers)
        response = await client.post(f"{SESSIONS}/{session_id}/close", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["data"]["is_closed"] is True

        response = await client.post(f"{SESSIONS}/{session_id}/answers", headers=staff_headers, json={
            "question_id": "q-1", "answer": "Yes", "answer_status": "compliant",
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Session is closed"

    async def test_close_twice(self, client: AsyncClient, facility, staff_headers):
        session_id = await start(client, staff_headers)
        assert (await client.post(f"{SESSIONS}/{session_id}/close", headers=staff_headers)).status_code == 200
        response = await client.post(f"{SESSIONS}/{session_id}/close", headers=staff_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Session is already closed"

    async def test_close_unknown(self, client: AsyncClient, staff_headers):
        assert (await client.post(f"{SESSIONS}/nope/close", headers=staff_headers)).status_code == 404


async def test_facility_sessions_newest_first(client: AsyncClient, facility, staff_headers):
    first = await start(client, staff_headers)
    second = await start(client, staff_headers)

    response = await client.get(f"{SESSIONS}/facility/fac-1", headers=staff_headers, params={"pageSize": 1})
    body = response.json()
    assert body["totalCount"] == 2
    assert [s["id"] for s in body["data"]] == [second]

    body = (await client.get(
        f"{SESSIONS}/facility/fac-1", headers=staff_headers, params={"pageSize": 1, "pageNumber": 2}
    )).json()
    assert [s["id"] for s in body["data"]] == [first]

    assert (await client.get(f"{SESSIONS}/facility/nope", headers=staff_headers)).status_code == 404
