# Pydantic schemas
from app.schemas.common import InputModel, OrmModel, MessageResponse
from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    TeacherCreate,
    TeacherResponse,
)
from app.schemas.auth import UserLogin, RefreshTokenRequest, Token, LoginResponse
from app.schemas.infrastructure import (
    DepartmentCreate,
    DepartmentUpdate,
    DepartmentResponse,
    RoomCreate,
    RoomUpdate,
    RoomResponse,
    RoomDetailResponse,
)
from app.schemas.software import SoftwareCreate, SoftwareUpdate, SoftwareResponse, InstalledInResponse
from app.schemas.request import (
    RequestSoftwareEntry,
    RequestCreate,
    RequestUpdate,
    RequestClose,
    RequestResponse,
    RequestSummaryResponse,
    RequestListResponse,
    RequestItemResponse,
    RoomInstallationResponse,
)
from app.schemas.installation import (
    RoomInstallationUpdate,
    InstallAllRooms,
    RequestItemInstallationUpdate,
    InstallationSummaryResponse,
    InstallationDetailsResponse,
    ConsistencyReport,
    SyncResult,
)
from app.schemas.attestation import (
    AttestationCreate,
    AttestationResponse,
    AttestationListResponse,
    BatchResult,
)
from app.schemas.history import (
    HistoryEntryCreate,
    HistoryFilter,
    HistoryEntryResponse,
    HistoryListResponse,
    HistoryStatistics,
)
