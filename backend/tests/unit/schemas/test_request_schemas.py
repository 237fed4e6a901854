"""
Unit Tests for request body schemas
"""
import pytest
from pydantic import ValidationError

from app.schemas.request import RequestCreate, RequestClose, RequestSoftwareEntry
from app.schemas.installation import RoomInstallationUpdate, RequestItemInstallationUpdate
from app.schemas.attestation import AttestationCreate
from app.models.enums import AttestationStatus, InstallationStatus


class TestRequestCreateSchema:

    def test_valid_request(self):
        data = RequestCreate(
            academic_year="2025",
            desired_date="2025-09-15",
            software=[{"software_id": "s1", "room_ids": ["r1", "r2"]}],
        )
        assert data.teacher_id is None
        assert data.software[0].room_ids == ["r1", "r2"]

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            RequestCreate(
                academic_year="2025",
                desired_date="2025-09-15",
                software=[{"software_id": "s1", "room_ids": ["r1"]}],
                priority="high",
            )

    def test_desired_date_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            RequestCreate(
                academic_year="2025",
                software=[{"software_id": "s1", "room_ids": ["r1"]}],
            )
        assert exc_info.value.errors()[0]["loc"] == ("desired_date",)

    def test_software_list_cannot_be_empty(self):
        with pytest.raises(ValidationError):
            RequestCreate(academic_year="2025", desired_date="2025-09-15", software=[])

    def test_room_list_cannot_be_empty(self):
        with pytest.raises(ValidationError):
            RequestSoftwareEntry(software_id="s1", room_ids=[])

    def test_duplicate_rooms_in_one_entry_collapse(self):
        entry = RequestSoftwareEntry(software_id="s1", room_ids=["r1", "r2", "r1"])
        assert entry.room_ids == ["r1", "r2"]


class TestRequestCloseSchema:

    def test_closure_comment_minimum_length(self):
        with pytest.raises(ValidationError):
            RequestClose(closure_comment="ok")

    def test_closure_comment_is_stripped(self):
        with pytest.raises(ValidationError):
            RequestClose(closure_comment="  a  ")
        assert RequestClose(closure_comment="  no longer needed ").closure_comment == "no longer needed"


class TestInstallationSchemas:

    def test_room_update_uses_single_installed_field(self):
        assert RoomInstallationUpdate(installed=True).installed is True
        with pytest.raises(ValidationError):
            RoomInstallationUpdate(installed=True, installe=True)

    def test_item_override_status_is_optional(self):
        assert RequestItemInstallationUpdate().installation_status is None
        update = RequestItemInstallationUpdate(installation_status="problem", comment="license server down")
        assert update.installation_status == InstallationStatus.PROBLEM


class TestAttestationSchema:

    def test_default_status_is_pending(self):
        data = AttestationCreate(
            request_id="r1",
            academic_year="2025",
            period_start="2025-09-01",
            period_end="2026-08-31",
        )
        assert data.status == AttestationStatus.PENDING
