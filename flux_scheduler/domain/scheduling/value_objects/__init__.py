"""Value objects for the scheduling domain."""

from .conflicts import ProposedPlacement, ScheduleConflict, ValidationResult
from .durations import InternalDuration, OutsourcedDuration
from .enums import (
    ApprovalGate,
    ConflictType,
    JobStatus,
    PaperPurchaseStatus,
    PlacementVerdict,
    PlatesStatus,
    ProofStatus,
    StationStatus,
    SwapDirection,
    TaskStatus,
    TaskType,
)
from .operating_schedule import (
    DaySchedule,
    ScheduleException,
    TimeSlot,
    WeeklySchedule,
    parse_clock,
)
from .time_window import (
    OpenInterval,
    TimeRange,
    count_active_at,
    max_concurrent,
    ranges_overlap,
)

__all__ = [
    # Conflicts
    "ProposedPlacement",
    "ScheduleConflict",
    "ValidationResult",
    # Durations
    "InternalDuration",
    "OutsourcedDuration",
    # Enums
    "ApprovalGate",
    "ConflictType",
    "JobStatus",
    "PaperPurchaseStatus",
    "PlacementVerdict",
    "PlatesStatus",
    "ProofStatus",
    "StationStatus",
    "SwapDirection",
    "TaskStatus",
    "TaskType",
    # Operating hours
    "DaySchedule",
    "ScheduleException",
    "TimeSlot",
    "WeeklySchedule",
    "parse_clock",
    # Time ranges
    "OpenInterval",
    "TimeRange",
    "count_active_at",
    "max_concurrent",
    "ranges_overlap",
]
