"""
Domain Exceptions

Typed errors raised by the scheduling engine. Business-rule violations are
never raised; they are returned as ScheduleConflict values. Exceptions cover
invalid input, unresolvable schedules and optimistic-concurrency failures.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNRESOLVABLE_SCHEDULE = "unresolvable_schedule"
    CONCURRENCY = "concurrency"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when an operation receives an argument it cannot work with."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
    ) -> None:
        self.field_name = field_name
        self.value = value
        details: dict[str, str | int | bool | None] = {
            "field": field_name,
            "value": str(value) if value is not None else None,
        }
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            details,
        )


class EntityNotFoundError(DomainError):
    """Raised when a caller addresses an entity missing from the snapshot."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class UnresolvableScheduleError(DomainError):
    """
    Raised when no valid end time exists for a task.

    Typically a resource whose calendar never opens. This is an operational
    failure, distinct from a scheduling conflict.
    """

    def __init__(self, resource_id: str, iterations: int, reason: str = "") -> None:
        message = (
            f"Cannot resolve an end time on resource {resource_id} "
            f"after {iterations} iterations"
        )
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorType.UNRESOLVABLE_SCHEDULE,
            {"resource_id": resource_id, "iterations": iterations},
        )
        self.resource_id = resource_id
        self.iterations = iterations


class ConcurrencyError(DomainError):
    """Raised when a mutation is based on a stale snapshot version."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Snapshot version {expected_version} is stale; current version is "
            f"{actual_version}. Re-fetch and retry.",
            ErrorType.CONCURRENCY,
            {
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )
        self.expected_version = expected_version
        self.actual_version = actual_version
