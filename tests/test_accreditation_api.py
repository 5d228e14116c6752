"""Accreditation catalogue and standards lookup."""
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession
from apps.accreditation.models import Chapter, ChapterAccreditationFacilityType, Standard
from apps.facilities.models import FacilityType

ACCREDITATIONS = "/api/v1/accreditations"


class TestCatalogue:

    async def test_list_is_public_and_paged(self, client: AsyncClient, admin_headers):
        for name in ["JCI", "CBAHI 2", "ISO 9001"]:
            response = await client.post(f"{ACCREDITATIONS}/", headers=admin_headers, json={"name": name})
            assert response.status_code == 200

        response = await client.get(f"{ACCREDITATIONS}/", params={"pageSize": 2})
        assert response.status_code == 200
        body = response.json()
        assert [a["name"] for a in body["data"]] == ["CBAHI 2", "ISO 9001"]
        assert body["totalCount"] == 3
        assert body["pageSize"] == 2
        assert body["hasNextPage"] is True

        body = (await client.get(f"{ACCREDITATIONS}/", params={"search": "iso"})).json()
        assert [a["name"] for a in body["data"]] == ["ISO 9001"]

    async def test_oversized_page_is_clamped(self, client: AsyncClient, accreditation):
        body = (await client.get(f"{ACCREDITATIONS}/", params={"pageSize": 1000, "pageNumber": 0})).json()
        assert body["pageSize"] == 100
        assert body["pageNumber"] == 1

    async def test_unknown_sort_field(self, client: AsyncClient):
        response = await client.get(f"{ACCREDITATIONS}/", params={"sortBy": "weight"})
        assert response.status_code == 400

    async def test_get(self, client: AsyncClient, accreditation):
        response = await client.get(f"{ACCREDITATIONS}/acc-1")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "CBAHI"

    async def test_get_missing(self, client: AsyncClient):
        response = await client.get(f"{ACCREDITATIONS}/nope")
        assert response.status_code == 404
        assert response.json()["state"] == "not_found"


class TestAdministration:

    async def test_writes_need_admin(self, client: AsyncClient, accreditation, staff_headers):
        assert (await client.post(
            f"{ACCREDITATIONS}/", headers=staff_headers, json={"name": "JCI"}
        )).status_code == 403
        assert (await client.delete(f"{ACCREDITATIONS}/acc-1", headers=staff_headers)).status_code == 403
        assert (await client.post(f"{ACCREDITATIONS}/", json={"name": "JCI"})).status_code == 401

    async def test_update(self, client: AsyncClient, accreditation, admin_headers):
        response = await client.put(f"{ACCREDITATIONS}/acc-1", headers=admin_headers, json={
            "name": "CBAHI 2024", "arabic_name": "سباهي",
        })
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "CBAHI 2024"
        assert data["description"] is None

    async def test_update_missing(self, client: AsyncClient, admin_headers):
        response = await client.put(f"{ACCREDITATIONS}/nope", headers=admin_headers, json={"name": "X"})
        assert response.status_code == 404

    async def test_delete_hides_from_catalogue(self, client: AsyncClient, accreditation, admin_headers):
        assert (await client.delete(f"{ACCREDITATIONS}/acc-1", headers=admin_headers)).status_code == 200
        assert (await client.get(f"{ACCREDITATIONS}/acc-1")).status_code == 404
        assert (await client.get(f"{ACCREDITATIONS}/")).json()["totalCount"] == 0
        assert (await client.delete(f"{ACCREDITATIONS}/acc-1", headers=admin_headers)).status_code == 404

    async def test_blank_name_rejected(self, client: AsyncClient, admin_headers):
        response = await client.post(f"{ACCREDITATIONS}/", headers=admin_headers, json={"name": ""})
        assert response.status_code == 422


async def test_standards_by_facility_type(client: AsyncClient, async_session: AsyncSession, accreditation,
                                          facility_type, staff_headers):
    async_session.add_all([
        FacilityType(id=2, type_name="Clinic"),
        Chapter(id="ch-1", title="Leadership"),
        ChapterAccreditationFacilityType(id="link-h", chapter_id="ch-1", accreditation_id="acc-1", facility_type_id=1),
        ChapterAccreditationFacilityType(id="link-c", chapter_id="ch-1", accreditation_id="acc-1", facility_type_id=2),
        Standard(id="st-2", chapter_accreditation_facility_type_id="link-h", code="LD.2"),
        Standard(id="st-1", chapter_accreditation_facility_type_id="link-h", code="LD.1"),
        Standard(id="st-3", chapter_accreditation_facility_type_id="link-c", code="LD.3"),
    ])
    await async_session.commit()

    response = await client.get(f"{ACCREDITATIONS}/acc-1/standards", headers=staff_headers)
    assert [s["code"] for s in response.json()["data"]] == ["LD.1", "LD.2", "LD.3"]

    response = await client.get(
        f"{ACCREDITATIONS}/acc-1/standards", headers=staff_headers, params={"facilityTypeId": 1}
    )
    assert [s["code"] for s in response.json()["data"]] == ["LD.1", "LD.2"]

    response = await client.get(
        f"{ACCREDITATIONS}/acc-1/standards", headers=staff_headers, params={"facilityTypeId": 9}
    )
    assert response.json()["data"] == []
