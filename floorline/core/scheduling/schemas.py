import enum
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from floorline.core.finance.schemas import FinancialSummary
from floorline.core.scheduling.draft import JobDraft


class RejectionReason(str, enum.Enum):
    MISSING_START_DATE = "missing_start_date"
    UNLINKED_APPOINTMENT = "unlinked_appointment"
    DEPOSIT_CONTRACTS_MISSING = "deposit_contracts_missing"
    FINAL_PAYMENT_LOCKED = "final_payment_locked"
    FINAL_PAYMENT_MISSING = "final_payment_missing"
    NOT_SCHEDULED = "not_scheduled"


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.MISSING_START_DATE: (
        "Please enter a Start Date for the first appointment to schedule the job."
    ),
    RejectionReason.UNLINKED_APPOINTMENT: (
        "All appointments must be linked to an Accepted Quote (Scope of Work)."
    ),
    RejectionReason.DEPOSIT_CONTRACTS_MISSING: (
        "Deposit and Contracts must be marked as received before scheduling a Managed Job."
    ),
    RejectionReason.FINAL_PAYMENT_LOCKED: (
        "Final payment cannot be marked received until the last appointment has ended."
    ),
    RejectionReason.FINAL_PAYMENT_MISSING: (
        "Final payment must be marked as received before completing the job."
    ),
    RejectionReason.NOT_SCHEDULED: "Only a scheduled job can be marked as complete.",
}


class GateDecision(BaseModel):
    attempt_transition: bool
    allowed: bool
    reason: RejectionReason | None = None
    message: str | None = None

    @property
    def schedules_project(self) -> bool:
        return self.allowed and self.attempt_transition


class FinalPaymentGate(BaseModel):
    unlock_date: datetime | None
    can_receive: bool


class ScheduleEntry(BaseModel):
    installer_id: uuid.UUID
    project_id: uuid.UUID
    project_name: str | None = None
    appointment_name: str | None = None
    start_date: datetime
    end_date: datetime | None = None


class ScheduleConflict(BaseModel):
    appointment_name: str
    installer_id: uuid.UUID
    project_id: uuid.UUID
    project_name: str | None
    scheduled_start_date: datetime
    scheduled_end_date: datetime | None


class JobState(BaseModel):
    """Everything the job screen needs, computed from one consistent read."""

    project_id: uuid.UUID
    project_status: str
    job_id: uuid.UUID | None
    deposit_amount: Decimal | None
    draft: JobDraft
    summary: FinancialSummary
    scheduling_applicable: bool
    managed_job: bool
    flags_locked: bool
    final_payment: FinalPaymentGate
    conflicts: list[ScheduleConflict] = []
    transitioned: bool = False
