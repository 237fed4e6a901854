"""
Domain enumerations and the small rules attached to them.

The request transition table and the installation status formula live here
so that services, schemas and tests share one definition.
"""
import enum
from typing import Dict, FrozenSet, List


class UserRole(str, enum.Enum):
    """User roles"""
    TEACHER = "teacher"
    DEPARTMENT_HEAD = "department_head"
    ROOM_MANAGER = "room_manager"
    IT_SERVICE = "it_service"
    ADMIN = "admin"


class RoomType(str, enum.Enum):
    """Departmental rooms belong to one department, shared rooms to none"""
    DEPARTMENTAL = "departmental"
    SHARED = "shared"

    @property
    def requires_department(self) -> bool:
        return self is RoomType.DEPARTMENTAL


class RequestStatus(str, enum.Enum):
    """Lifecycle of an installation request"""
    NEW = "new"
    IN_PROGRESS = "in_progress"
    INSTALLED = "installed"
    EXPIRED = "expired"
    CLOSED = "closed"


class InstallationStatus(str, enum.Enum):
    """Installation state of one software item across its rooms"""
    PENDING = "pending"
    ALL_INSTALLED = "all_installed"
    PARTIALLY_INSTALLED = "partially_installed"
    PROBLEM = "problem"
    CHANGED = "changed"


class StatusPin(str, enum.Enum):
    """Explicit override that freezes an item's installation status"""
    NONE = "none"
    PROBLEM = "problem"
    CHANGED = "changed"


class AttestationStatus(str, enum.Enum):
    """Yearly re-confirmation state"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"
    NOT_REQUIRED = "not_required"


class HistoryAction(str, enum.Enum):
    """Kinds of audit trail entries"""
    INSTALLATION = "installation"
    UNINSTALLATION = "uninstallation"
    REQUEST_UPDATE = "request_update"
    SOFTWARE_UPDATE = "software_update"
    STATUS_CHANGE = "status_change"
    INSTALLATION_STATUS_CHANGE = "installation_status_change"
    CLOSURE = "closure"
    REQUEST_CREATION = "request_creation"


# Manual request transitions; automatic reconciliation does not consult this.
REQUEST_STATUS_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.NEW: frozenset({RequestStatus.IN_PROGRESS, RequestStatus.CLOSED}),
    RequestStatus.IN_PROGRESS: frozenset({
        RequestStatus.INSTALLED,
        RequestStatus.EXPIRED,
        RequestStatus.CLOSED,
    }),
    RequestStatus.INSTALLED: frozenset({RequestStatus.EXPIRED}),
    RequestStatus.EXPIRED: frozenset(),
    RequestStatus.CLOSED: frozenset(),
}

# Statuses reconciliation never moves a request out of
RECONCILIATION_TERMINAL_STATUSES = frozenset({RequestStatus.CLOSED, RequestStatus.EXPIRED})

# Statuses in which a teacher may no longer edit a request
LOCKED_REQUEST_STATUSES = frozenset({
    RequestStatus.INSTALLED,
    RequestStatus.EXPIRED,
    RequestStatus.CLOSED,
})

CLOSABLE_REQUEST_STATUSES = frozenset({RequestStatus.NEW, RequestStatus.IN_PROGRESS})


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in REQUEST_STATUS_TRANSITIONS.get(current, frozenset())


def calculate_installation_status(
    total_rooms: int,
    installed_rooms: int,
    pin: StatusPin = StatusPin.NONE,
) -> InstallationStatus:
    """
    Installation status of an item from its room counts.

    A pinned item keeps its pinned status whatever the counts are.
    """
    if pin is StatusPin.PROBLEM:
        return InstallationStatus.PROBLEM
    if pin is StatusPin.CHANGED:
        return InstallationStatus.CHANGED
    if total_rooms == 0 or installed_rooms == 0:
        return InstallationStatus.PENDING
    if installed_rooms == total_rooms:
        return InstallationStatus.ALL_INSTALLED
    return InstallationStatus.PARTIALLY_INSTALLED


def pin_for_status(status: InstallationStatus) -> StatusPin:
    """Pin implied by an explicitly requested installation status"""
    if status is InstallationStatus.PROBLEM:
        return StatusPin.PROBLEM
    if status is InstallationStatus.CHANGED:
        return StatusPin.CHANGED
    return StatusPin.NONE


def calculate_request_status(
    current: RequestStatus,
    item_statuses: List[InstallationStatus],
) -> RequestStatus:
    """
    Request status implied by its items' installation statuses.

    Closed and expired requests, and requests without items, keep their status.
    """
    if current in RECONCILIATION_TERMINAL_STATUSES or not item_statuses:
        return current
    if all(status is InstallationStatus.ALL_INSTALLED for status in item_statuses):
        return RequestStatus.INSTALLED
    if all(status is InstallationStatus.PENDING for status in item_statuses):
        return RequestStatus.NEW if current is RequestStatus.NEW else RequestStatus.IN_PROGRESS
    return RequestStatus.IN_PROGRESS
