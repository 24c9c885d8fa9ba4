"""Domain enums for scheduling."""

from enum import Enum


class JobStatus(str, Enum):
    """Job status enumeration."""

    DRAFT = "draft"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    DELAYED = "delayed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    """Task status enumeration. Informational only to the engine."""

    DEFINED = "defined"
    READY = "ready"
    ASSIGNED = "assigned"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TaskType(str, Enum):
    """Discriminator for the task variants."""

    INTERNAL = "internal"
    OUTSOURCED = "outsourced"


class StationStatus(str, Enum):
    """Station operating status."""

    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"

    @property
    def is_available_for_work(self) -> bool:
        """Check if station can receive new placements."""
        return self == StationStatus.AVAILABLE


class ProofStatus(str, Enum):
    """Proof (BAT) approval gate status."""

    PENDING = "pending"
    AWAITING_FILE = "awaiting_file"
    NOT_REQUIRED = "not_required"
    SENT = "sent"
    APPROVED = "approved"


class PaperPurchaseStatus(str, Enum):
    """Paper procurement status. Informational, never validated."""

    IN_STOCK = "in_stock"
    TO_ORDER = "to_order"
    ORDERED = "ordered"
    RECEIVED = "received"


class PlatesStatus(str, Enum):
    """Printing plates preparation status."""

    TODO = "todo"
    DONE = "done"


class ApprovalGate(str, Enum):
    """Approval gates evaluated by the approval rule."""

    BAT = "bat"
    PLATES = "plates"


class ConflictType(str, Enum):
    """Closed taxonomy of schedule conflicts."""

    PRECEDENCE = "Precedence"
    AVAILABILITY = "Availability"
    APPROVAL_GATE = "ApprovalGate"
    GROUP_CAPACITY = "GroupCapacity"
    RESOURCE_OVERLAP = "ResourceOverlap"
    DEADLINE = "Deadline"


class PlacementVerdict(str, Enum):
    """Composite outcome of validating a proposed placement."""

    CLEAN = "clean"
    ACCEPTED_WITH_CONFLICT = "accepted_with_conflict"
    BLOCKED = "blocked"


class SwapDirection(str, Enum):
    """Swap a placement with its earlier (up) or later (down) neighbour."""

    UP = "up"
    DOWN = "down"
