"""
Job Entity

A print order made of an ordered chain of tasks, carrying the approval
gates that condition scheduling.
"""

from datetime import date

from pydantic import Field

from ...shared.base import DomainRecord, UtcDatetime, ValueObject, utc_now
from ..value_objects.enums import (
    JobStatus,
    PaperPurchaseStatus,
    PlatesStatus,
    ProofStatus,
)


class ProofApproval(ValueObject):
    """Proof (BAT) gate: status plus the sent / approved timestamps."""

    status: ProofStatus = ProofStatus.PENDING
    sent_at: UtcDatetime | None = None
    approved_at: UtcDatetime | None = None

    @property
    def is_satisfied(self) -> bool:
        """Approved, or no proof is required for this job."""
        return self.status in {ProofStatus.APPROVED, ProofStatus.NOT_REQUIRED}


class Job(DomainRecord):
    reference: str
    client: str = ""
    description: str = ""
    status: JobStatus = JobStatus.PLANNED
    workshop_exit_date: date
    # Presentation only
    color: str = "#3B82F6"
    paper_type: str | None = None
    paper_format: str | None = None
    paper_purchase_status: PaperPurchaseStatus = PaperPurchaseStatus.IN_STOCK
    proof_approval: ProofApproval = Field(default_factory=ProofApproval)
    plates_status: PlatesStatus = PlatesStatus.TODO
    task_ids: tuple[str, ...] = ()
    created_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime = Field(default_factory=utc_now)
