"""Rules deciding whether a job save may move a project to Scheduled."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from floorline.common.enums import (
    LOCKED_STATUSES,
    SCHEDULABLE_INSTALLATION_TYPES,
    InstallationType,
    ProjectStatus,
)
from floorline.common.logging import get_logger
from floorline.core.scheduling.draft import JobDraft, parse_appointment_datetime
from floorline.core.scheduling.schemas import (
    REJECTION_MESSAGES,
    FinalPaymentGate,
    GateDecision,
    RejectionReason,
)

logger = get_logger("scheduling.gate")

_SCHEDULABLE = {t.value for t in SCHEDULABLE_INSTALLATION_TYPES}
_LOCKED = {s.value for s in LOCKED_STATUSES}


def _value(field: Any) -> Any:
    return getattr(field, "value", field)


def is_scheduling_applicable(accepted_quotes: Iterable[Any]) -> bool:
    return any(_value(q.installation_type) in _SCHEDULABLE for q in accepted_quotes)


def is_managed_job(accepted_quotes: Iterable[Any]) -> bool:
    return any(
        _value(q.installation_type) == InstallationType.MANAGED.value for q in accepted_quotes
    )


def flags_locked(project_status: Any) -> bool:
    """Deposit and contracts flags are read-only once the job is scheduled."""
    return _value(project_status) in _LOCKED


def _reject(attempt: bool, reason: RejectionReason) -> GateDecision:
    return GateDecision(
        attempt_transition=attempt,
        allowed=False,
        reason=reason,
        message=REJECTION_MESSAGES[reason],
    )


def evaluate(
    project_status: Any,
    draft: JobDraft,
    accepted_quotes: Sequence[Any],
    final_payment_already_received: bool = False,
    now: datetime | None = None,
) -> GateDecision:
    applicable = is_scheduling_applicable(accepted_quotes)
    attempt = _value(project_status) == ProjectStatus.ACCEPTED.value and applicable
    appointments = draft.appointments

    if attempt and (not appointments or not appointments[0].has_start_date):
        return _reject(attempt, RejectionReason.MISSING_START_DATE)

    if applicable and any(a.quote_id is None for a in appointments):
        return _reject(attempt, RejectionReason.UNLINKED_APPOINTMENT)

    if attempt and is_managed_job(accepted_quotes):
        if not (draft.deposit_received and draft.contracts_received):
            return _reject(attempt, RejectionReason.DEPOSIT_CONTRACTS_MISSING)

    if draft.final_payment_received and not final_payment_already_received:
        gate = final_payment_gate(appointments, now=now)
        if not (flags_locked(project_status) and gate.can_receive):
            return _reject(attempt, RejectionReason.FINAL_PAYMENT_LOCKED)

    return GateDecision(attempt_transition=attempt, allowed=True)


def final_payment_unlock_date(appointments: Iterable[Any]) -> datetime | None:
    ends = [parse_appointment_datetime(a.end_date) for a in appointments]
    ends = [e for e in ends if e is not None]
    return max(ends) if ends else None


def final_payment_gate(appointments: Iterable[Any], now: datetime | None = None) -> FinalPaymentGate:
    unlock = final_payment_unlock_date(appointments)
    now = now or datetime.now()
    return FinalPaymentGate(unlock_date=unlock, can_receive=unlock is not None and now >= unlock)


def can_receive_final_payment(appointments: Iterable[Any], now: datetime | None = None) -> bool:
    return final_payment_gate(appointments, now=now).can_receive


def apply_post_schedule_lock(draft: JobDraft, job: Any | None, project_status: Any) -> JobDraft:
    """Keep stored deposit/contracts flags when the project is past scheduling."""
    if job is None or not flags_locked(project_status):
        return draft
    if (
        draft.deposit_received == job.deposit_received
        and draft.contracts_received == job.contracts_received
    ):
        return draft
    logger.debug("Ignoring deposit/contracts edits on locked job %s", job.id)
    return draft.model_copy(
        update={
            "deposit_received": job.deposit_received,
            "contracts_received": job.contracts_received,
        }
    )
