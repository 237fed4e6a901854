"""
Unit Tests for the exception hierarchy
"""
from app.core.exceptions import (
    CampusSoftError,
    ValidationError,
    BusinessRuleViolation,
    InvalidTransitionError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    error_response,
)
from app.models.enums import RequestStatus


class TestExceptionStatusCodes:
    """Each error kind maps to one HTTP status"""

    def test_status_codes(self):
        assert ValidationError("bad").status_code == 400
        assert BusinessRuleViolation("no").status_code == 400
        assert InvalidTransitionError("a", "b").status_code == 400
        assert ForbiddenError().status_code == 403
        assert NotFoundError("Room", "x").status_code == 404
        assert ConflictError("dup").status_code == 409

    def test_all_derive_from_base(self):
        for error in (
            ValidationError("bad"),
            BusinessRuleViolation("no"),
            InvalidTransitionError("a", "b"),
            ForbiddenError(),
            NotFoundError("Room", "x"),
            ConflictError("dup"),
        ):
            assert isinstance(error, CampusSoftError)


class TestExceptionPayloads:

    def test_not_found_code_names_the_resource(self):
        error = NotFoundError("Request item", "abc")

        assert error.code == "REQUEST_ITEM_NOT_FOUND"
        assert "abc" in error.message
        assert error.details == {"resource_type": "Request item", "resource_id": "abc"}

    def test_invalid_transition_names_both_states(self):
        error = InvalidTransitionError(RequestStatus.INSTALLED, RequestStatus.NEW)

        assert "installed" in error.message
        assert "new" in error.message
        assert error.details["current_status"] == "installed"
        assert error.details["requested_status"] == "new"
        assert error.current_status == RequestStatus.INSTALLED

    def test_error_response_shape(self):
        body = error_response(ConflictError("Duplicate code", field="code"))

        assert body == {
            "detail": "Duplicate code",
            "code": "CONFLICT",
            "details": {"field": "code"},
        }
