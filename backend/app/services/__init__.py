from app.services.history_service import HistoryService, history_service
from app.services.department_service import DepartmentService, department_service
from app.services.room_service import RoomService, room_service
from app.services.software_service import SoftwareService, software_service
from app.services.user_service import UserService, user_service
from app.services.installation_sync_service import InstallationSyncService, installation_sync_service
from app.services.installation_service import InstallationService, installation_service
from app.services.request_item_service import RequestItemService, request_item_service
from app.services.request_service import RequestService, request_service
from app.services.attestation_service import AttestationService, attestation_service
from app.services.attestation_jobs import AttestationJobs, attestation_jobs

__all__ = [
    # Audit trail
    "HistoryService",
    "history_service",
    # Catalog and users
    "DepartmentService",
    "department_service",
    "RoomService",
    "room_service",
    "SoftwareService",
    "software_service",
    "UserService",
    "user_service",
    # Requests and installation progress
    "InstallationSyncService",
    "installation_sync_service",
    "InstallationService",
    "installation_service",
    "RequestItemService",
    "request_item_service",
    "RequestService",
    "request_service",
    # Attestations
    "AttestationService",
    "attestation_service",
    "AttestationJobs",
    "attestation_jobs",
]
