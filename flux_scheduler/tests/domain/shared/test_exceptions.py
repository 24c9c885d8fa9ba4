"""Tests for the typed domain error hierarchy."""

from flux_scheduler.domain.shared.exceptions import (
    ConcurrencyError,
    DomainError,
    EntityNotFoundError,
    ErrorType,
    UnresolvableScheduleError,
    ValidationError,
)


class TestDomainErrors:
    def test_to_dict(self):
        error = EntityNotFoundError("Task", "t-1")

        assert error.to_dict() == {
            "type": "not_found",
            "message": "Task not found: t-1",
            "details": {"entity_type": "Task", "entity_id": "t-1"},
        }

    def test_hierarchy(self):
        for error in (
            ValidationError("horizon_hours", 0, "must be positive"),
            UnresolvableScheduleError("s1", 10),
            ConcurrencyError(1, 2),
        ):
            assert isinstance(error, DomainError)

    def test_unresolvable_message_includes_reason(self):
        error = UnresolvableScheduleError("s1", 10, "station never opens")

        assert error.error_type == ErrorType.UNRESOLVABLE_SCHEDULE
        assert str(error).endswith("station never opens")

    def test_validation_error_details(self):
        error = ValidationError("horizon_hours", -1, "must be positive")

        assert error.details == {"field": "horizon_hours", "value": "-1"}
        assert "horizon_hours" in error.message
