"""
API Tests for attestation and history endpoints
"""
from httpx import AsyncClient

from app.services.installation_service import installation_service

API = "/api/v1"


class TestAttestationEndpoints:

    async def test_create_and_confirm(self, client: AsyncClient, make_request, teacher_headers):
        request = await make_request()

        created = await client.post(f"{API}/attestations", json={
            "request_id": request.id,
            "academic_year": "2025",
            "period_start": "2025-09-01",
            "period_end": "2026-06-30",
        }, headers=teacher_headers)
        assert created.status_code == 201
        attestation_id = created.json()["id"]

        confirmed = await client.post(f"{API}/attestations/{attestation_id}/confirm", headers=teacher_headers)
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        again = await client.post(f"{API}/attestations/{attestation_id}/confirm", headers=teacher_headers)
        assert again.status_code == 400
        assert again.json()["code"] == "INVALID_TRANSITION"

        by_request = await client.get(f"{API}/attestations/request/{request.id}", headers=teacher_headers)
        assert by_request.json()["id"] == attestation_id

    async def test_campaign_and_listing(
        self, client: AsyncClient, db_session, make_request, it_user, it_headers
    ):
        request = await make_request()
        await installation_service.install_all_rooms(db_session, request.id, request.items[0].id, it_user.id)

        campaign = await client.post(f"{API}/attestations/campaign/2025", headers=it_headers)
        assert campaign.status_code == 200
        assert campaign.json()["processed"] == 1

        listed = await client.get(f"{API}/attestations", params={"status": "pending"}, headers=it_headers)
        assert listed.status_code == 200
        assert listed.json()["total"] == 1
        assert listed.json()["attestations"][0]["request_id"] == request.id

    async def test_batch_jobs_need_it_staff(self, client: AsyncClient, teacher_headers, it_headers):
        forbidden = await client.post(f"{API}/attestations/expire-due", headers=teacher_headers)
        allowed = await client.post(f"{API}/attestations/expire-due", headers=it_headers)

        assert forbidden.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["processed"] == 0

    async def test_reminders_route(self, client: AsyncClient, it_headers):
        response = await client.get(f"{API}/attestations/reminders", params={"window_days": 10}, headers=it_headers)

        assert response.status_code == 200
        assert response.json() == []


class TestHistoryEndpoints:

    async def test_request_history(self, client: AsyncClient, make_request, teacher_headers):
        request = await make_request()

        response = await client.get(f"{API}/history/requests/{request.id}", headers=teacher_headers)

        assert response.status_code == 200
        assert [entry["action"] for entry in response.json()] == ["request_creation"]

    async def test_paginated_list(self, client: AsyncClient, make_request, teacher_headers):
        await make_request()
        await make_request()

        response = await client.get(f"{API}/history", params={"page_size": 1}, headers=teacher_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["total_pages"] == 2
        assert len(data["entries"]) == 1

    async def test_statistics(self, client: AsyncClient, make_request, teacher_headers):
        await make_request()

        response = await client.get(f"{API}/history/statistics", headers=teacher_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["by_action"]["request_creation"] == 1
