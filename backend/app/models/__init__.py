# Re-export all models for convenient imports
from app.models.enums import (
    UserRole,
    RoomType,
    RequestStatus,
    InstallationStatus,
    StatusPin,
    AttestationStatus,
    HistoryAction,
)
from app.models.user import User, Teacher, ITServiceMember, Administrator
from app.models.infrastructure import Department, Room, room_software
from app.models.software import Software
from app.models.request import Request, RequestItem, RoomInstallation
from app.models.attestation import Attestation
from app.models.history import HistoryEntry

__all__ = [
    # Enums
    "UserRole",
    "RoomType",
    "RequestStatus",
    "InstallationStatus",
    "StatusPin",
    "AttestationStatus",
    "HistoryAction",
    # Users
    "User",
    "Teacher",
    "ITServiceMember",
    "Administrator",
    # Infrastructure
    "Department",
    "Room",
    "room_software",
    # Catalog
    "Software",
    # Requests
    "Request",
    "RequestItem",
    "RoomInstallation",
    # Attestations
    "Attestation",
    # Audit trail
    "HistoryEntry",
]
