"""
API Tests for departments, rooms and the software catalog
"""
from httpx import AsyncClient

API = "/api/v1"


class TestDepartmentEndpoints:

    async def test_admin_creates_department(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{API}/departments", json={"name": "Mathematics", "code": "MATH"}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["code"] == "MATH"

    async def test_duplicate_department(self, client: AsyncClient, department, admin_headers):
        response = await client.post(
            f"{API}/departments", json={"name": "Informatics", "code": "CS"}, headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"
        assert response.json()["details"] == {"field": "code"}

    async def test_teacher_cannot_create_department(self, client: AsyncClient, teacher_headers):
        response = await client.post(
            f"{API}/departments", json={"name": "Mathematics", "code": "MATH"}, headers=teacher_headers
        )

        assert response.status_code == 403

    async def test_delete_with_rooms_conflicts(self, client: AsyncClient, department, rooms, admin_headers):
        response = await client.delete(f"{API}/departments/{department.id}", headers=admin_headers)

        assert response.status_code == 409

    async def test_department_rooms(self, client: AsyncClient, department, rooms, teacher_headers):
        response = await client.get(f"{API}/departments/{department.id}/rooms", headers=teacher_headers)

        assert response.status_code == 200
        assert [room["name"] for room in response.json()] == ["Lab A", "Lab B"]


class TestRoomEndpoints:

    async def test_shared_room_with_department_is_rejected(
        self, client: AsyncClient, department, admin_headers
    ):
        response = await client.post(f"{API}/rooms", json={
            "name": "Amphi 2",
            "capacity": 150,
            "type": "shared",
            "department_id": department.id,
        }, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "BUSINESS_RULE_VIOLATION"
        assert response.json()["details"] == {"rule": "room_department_pairing"}

    async def test_create_room_with_software(self, client: AsyncClient, department, software, admin_headers):
        response = await client.post(f"{API}/rooms", json={
            "name": "Lab C",
            "capacity": 20,
            "type": "departmental",
            "department_id": department.id,
            "software_ids": [software.id],
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["department"]["code"] == "CS"
        assert data["software_ids"] == [software.id]

    async def test_filter_rooms_by_type(self, client: AsyncClient, rooms, teacher_headers):
        response = await client.get(f"{API}/rooms", params={"type": "shared"}, headers=teacher_headers)

        assert response.status_code == 200
        assert [room["name"] for room in response.json()] == ["Amphi 1"]


class TestSoftwareEndpoints:

    async def test_invalid_version(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{API}/software", json={"name": "Octave", "version": "8.x.1"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "version"}

    async def test_delete_deactivates(self, client: AsyncClient, software, admin_headers, teacher_headers):
        response = await client.delete(f"{API}/software/{software.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["active"] is False

        listed = await client.get(f"{API}/software", params={"active": "true"}, headers=teacher_headers)
        assert listed.json() == []

    async def test_installed_in(self, client: AsyncClient, software, rooms, teacher_headers):
        response = await client.get(
            f"{API}/software/{software.id}/installed-in/{rooms[0].id}", headers=teacher_headers
        )

        assert response.status_code == 200
        assert response.json()["installed"] is False
