"""
Custom Exceptions for CampusSoft
================================

Services raise these instead of HTTPException so the same rules hold when
they are called outside a request (batch jobs, tests). The API layer turns
them into JSON responses through a single exception handler registered in
app.main, using the status_code carried by each class.

Usage:
    from app.core.exceptions import NotFoundError, BusinessRuleViolation

    if not room:
        raise NotFoundError("Room", room_id)

    if request.status == RequestStatus.CLOSED:
        raise BusinessRuleViolation("A closed request cannot be edited")
"""

from typing import Optional, Any, Dict


class CampusSoftError(Exception):
    """Base exception for all CampusSoft errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Input Errors (400-type)
# ============================================

class ValidationError(CampusSoftError):
    """Input validation failed (bad version string, bad academic year...)"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class BusinessRuleViolation(CampusSoftError):
    """A domain invariant would be broken by the requested change"""

    status_code = 400

    def __init__(self, message: str, rule: Optional[str] = None):
        details = {"rule": rule} if rule else {}
        super().__init__(message, code="BUSINESS_RULE_VIOLATION", details=details)


class InvalidTransitionError(CampusSoftError):
    """Lifecycle transition not present in the allowed table"""

    status_code = 400

    def __init__(self, current_status: Any, requested_status: Any, entity: str = "Request"):
        current = getattr(current_status, "value", current_status)
        requested = getattr(requested_status, "value", requested_status)
        super().__init__(
            f"Invalid {entity.lower()} transition from '{current}' to '{requested}'",
            code="INVALID_TRANSITION",
            details={
                "entity": entity,
                "current_status": current,
                "requested_status": requested,
            }
        )
        self.current_status = current_status
        self.requested_status = requested_status


# ============================================
# Authorization Errors (403-type)
# ============================================

class ForbiddenError(CampusSoftError):
    """Actor is not allowed to act on this aggregate"""

    status_code = 403

    def __init__(self, message: str = "Not allowed to modify this resource"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(CampusSoftError):
    """Referenced aggregate does not exist"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(CampusSoftError):
    """Uniqueness violation (duplicate code, email, name+version, attestation)"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFLICT", details=details)


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CampusSoftError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "detail": error.message,
        "code": error.code,
        "details": error.details,
    }
