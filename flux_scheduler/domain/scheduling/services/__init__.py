"""Scheduling engine services."""

from .conflict_validators import (
    VALIDATORS,
    has_precedence_violation,
    validate_approval_gates,
    validate_availability,
    validate_deadline,
    validate_group_capacity,
    validate_precedence,
    validate_resource_overlap,
)
from .constraint_validation_service import ConstraintValidationService
from .end_time_calculator import calculate_end_time, calculate_outsourced_end_time
from .group_capacity import find_exceeded_groups, group_usage_at, max_group_usage
from .operating_calendar import resolve_open_intervals, stretch_end_time
from .push_down import PushDownResult, apply_push_down, would_cause_overlap
from .quick_placement import available_task_for_station, stations_with_available_tasks
from .subcolumn_layout import (
    SubcolumnLayout,
    calculate_subcolumn_layout,
    get_subcolumn_layout,
)
from .swap import SwapResult, apply_swap, find_adjacent_assignment
from .timeline_compactor import COMPACT_HORIZONS, CompactionResult, compact_timeline

__all__ = [
    # Calendar
    "resolve_open_intervals",
    "stretch_end_time",
    "calculate_end_time",
    "calculate_outsourced_end_time",
    # Validation
    "VALIDATORS",
    "ConstraintValidationService",
    "has_precedence_violation",
    "validate_approval_gates",
    "validate_availability",
    "validate_deadline",
    "validate_group_capacity",
    "validate_precedence",
    "validate_resource_overlap",
    # Rebalancing
    "COMPACT_HORIZONS",
    "CompactionResult",
    "PushDownResult",
    "SwapResult",
    "apply_push_down",
    "apply_swap",
    "compact_timeline",
    "find_adjacent_assignment",
    "would_cause_overlap",
    # Views and helpers
    "SubcolumnLayout",
    "available_task_for_station",
    "calculate_subcolumn_layout",
    "find_exceeded_groups",
    "get_subcolumn_layout",
    "group_usage_at",
    "max_group_usage",
    "stations_with_available_tasks",
]
