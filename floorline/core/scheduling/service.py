"""Load, validate and persist job details for a project.

All writes for one save go through the request's ``AsyncSession`` so the job,
its appointments and the project status commit together or not at all.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.common.enums import ProjectStatus
from floorline.common.exceptions import NotFoundError, PersistenceError, SchedulingRejection
from floorline.common.logging import get_logger
from floorline.common.money import to_money
from floorline.core.finance.calculator import accepted_quotes, calculate_financial_summary
from floorline.core.finance.schemas import ChangeOrderLine, FinancialSummary, QuoteLine
from floorline.core.scheduling import gate
from floorline.core.scheduling.conflicts import find_schedule_conflicts
from floorline.core.scheduling.draft import JobDraft, parse_appointment_datetime
from floorline.core.scheduling.schemas import (
    REJECTION_MESSAGES,
    JobState,
    RejectionReason,
    ScheduleConflict,
    ScheduleEntry,
)
from floorline.db.models.change_order import ChangeOrder
from floorline.db.models.job import Job, JobAppointment
from floorline.db.models.project import Project
from floorline.db.models.quote import Quote

logger = get_logger("scheduling.service")


async def get_project(project_id: uuid.UUID, db: AsyncSession) -> Project:
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.active())
    )
    project = result.scalar_one_or_none()
    if not project:
        raise NotFoundError("Project", str(project_id))
    return project


async def get_job(project_id: uuid.UUID, db: AsyncSession) -> Job | None:
    result = await db.execute(
        select(Job).where(Job.project_id == project_id, Job.active())
    )
    return result.scalar_one_or_none()


async def get_accepted_quotes(project_id: uuid.UUID, db: AsyncSession) -> list[QuoteLine]:
    result = await db.execute(
        select(Quote)
        .where(Quote.project_id == project_id, Quote.active())
        .order_by(Quote.date_sent.asc())
    )
    return accepted_quotes(QuoteLine.model_validate(q) for q in result.scalars().all())


async def get_change_orders(project_id: uuid.UUID, db: AsyncSession) -> list[ChangeOrderLine]:
    result = await db.execute(
        select(ChangeOrder)
        .where(ChangeOrder.project_id == project_id, ChangeOrder.active())
        .order_by(ChangeOrder.created_at.asc())
    )
    return [ChangeOrderLine.model_validate(co) for co in result.scalars().all()]


async def get_financial_summary(project_id: uuid.UUID, db: AsyncSession) -> FinancialSummary:
    quotes = await get_accepted_quotes(project_id, db)
    change_orders = await get_change_orders(project_id, db)
    return calculate_financial_summary(quotes, change_orders)


async def ensure_job(project: Project, db: AsyncSession) -> Job:
    job = await get_job(project.id, db)
    if job:
        return job
    job = Job(project_id=project.id, appointments=[])
    db.add(job)
    await db.flush()
    logger.info("Created job for project %s", project.id)
    return job


async def sync_deposit_amount(project_id: uuid.UUID, db: AsyncSession) -> Job | None:
    """Re-write ``deposit_amount`` after quotes or change orders move."""
    job = await get_job(project_id, db)
    if not job:
        return None
    summary = await get_financial_summary(project_id, db)
    if to_money(job.deposit_amount) != summary.total_deposit:
        logger.info(
            "Deposit for project %s changed %s -> %s",
            project_id, job.deposit_amount, summary.total_deposit,
        )
        job.deposit_amount = summary.total_deposit
        await db.flush()
    return job


async def installer_schedule(
    installer_id: uuid.UUID,
    db: AsyncSession,
    exclude_project_id: uuid.UUID | None = None,
) -> list[ScheduleEntry]:
    query = (
        select(JobAppointment, Job.project_id, Project.project_name)
        .join(Job, JobAppointment.job_id == Job.id)
        .join(Project, Job.project_id == Project.id)
        .where(
            JobAppointment.installer_id == installer_id,
            JobAppointment.start_date.is_not(None),
            JobAppointment.active(),
            Job.active(),
            Project.active(),
        )
        .order_by(JobAppointment.start_date.asc())
    )
    if exclude_project_id:
        query = query.where(Job.project_id != exclude_project_id)

    result = await db.execute(query)
    return [
        ScheduleEntry(
            installer_id=installer_id,
            project_id=project_id,
            project_name=project_name,
            appointment_name=appt.appointment_name,
            start_date=appt.start_date,
            end_date=appt.end_date,
        )
        for appt, project_id, project_name in result.all()
    ]


async def _conflicts_for(draft: JobDraft, db: AsyncSession) -> list[ScheduleConflict]:
    installer_ids = {a.installer_id for a in draft.appointments if a.installer_id}
    existing: list[ScheduleEntry] = []
    for installer_id in installer_ids:
        existing.extend(await installer_schedule(installer_id, db, draft.project_id))
    return find_schedule_conflicts(draft.appointments, existing)


async def get_job_state(
    project_id: uuid.UUID, db: AsyncSession, now: datetime | None = None
) -> JobState:
    project = await get_project(project_id, db)
    job = await get_job(project_id, db)
    quotes = await get_accepted_quotes(project_id, db)
    change_orders = await get_change_orders(project_id, db)

    draft = JobDraft.from_job(project_id, job).link_to_quotes(quotes)
    return JobState(
        project_id=project_id,
        project_status=project.status,
        job_id=job.id if job else None,
        deposit_amount=job.deposit_amount if job else None,
        draft=draft,
        summary=calculate_financial_summary(quotes, change_orders),
        scheduling_applicable=gate.is_scheduling_applicable(quotes),
        managed_job=gate.is_managed_job(quotes),
        flags_locked=gate.flags_locked(project.status),
        final_payment=gate.final_payment_gate(draft.appointments, now=now),
        conflicts=await _conflicts_for(draft, db),
    )


def _apply_draft(job: Job, draft: JobDraft, summary: FinancialSummary) -> None:
    job.po_number = draft.po_number
    job.deposit_received = draft.deposit_received
    job.contracts_received = draft.contracts_received
    job.final_payment_received = draft.final_payment_received
    job.is_on_hold = draft.is_on_hold
    job.notes = draft.notes
    job.deposit_amount = summary.total_deposit

    existing = {a.id: a for a in job.appointments}
    appointments = []
    for position, appt in enumerate(draft.appointments):
        record = existing.get(appt.id) or JobAppointment()
        record.appointment_name = appt.appointment_name
        record.quote_id = appt.quote_id
        record.installer_id = appt.installer_id
        record.start_date = parse_appointment_datetime(appt.start_date)
        record.end_date = parse_appointment_datetime(appt.end_date)
        record.position = position
        appointments.append(record)
    job.appointments = appointments


async def save_job_details(
    project_id: uuid.UUID,
    draft: JobDraft,
    db: AsyncSession,
    now: datetime | None = None,
) -> JobState:
    """Validate ``draft`` through the scheduling gate and persist it.

    Raises ``SchedulingRejection`` before touching the session when a rule
    fails. On success the job's deposit amount is the freshly computed total
    deposit and, when the gate allows it, the project becomes Scheduled.
    """
    project = await get_project(project_id, db)
    job = await get_job(project_id, db)
    quotes = await get_accepted_quotes(project_id, db)
    change_orders = await get_change_orders(project_id, db)

    draft = draft.model_copy(update={"project_id": project_id}).link_to_quotes(quotes)
    draft = gate.apply_post_schedule_lock(draft, job, project.status)

    decision = gate.evaluate(
        project.status,
        draft,
        quotes,
        final_payment_already_received=bool(job and job.final_payment_received),
        now=now,
    )
    if not decision.allowed:
        logger.info("Job save for project %s rejected: %s", project_id, decision.reason.value)
        raise SchedulingRejection(decision.message, reason=decision.reason.value)

    summary = calculate_financial_summary(quotes, change_orders)

    try:
        if job is None:
            job = Job(project_id=project_id, appointments=[])
            db.add(job)
        _apply_draft(job, draft, summary)
        if decision.schedules_project:
            project.status = ProjectStatus.SCHEDULED.value
        await db.flush()
    except SQLAlchemyError as e:
        logger.error("Failed to save job details for project %s: %s", project_id, e)
        raise PersistenceError("save job details") from e

    if decision.schedules_project:
        logger.info("Project %s moved to %s", project_id, ProjectStatus.SCHEDULED.value)

    saved = JobDraft.from_job(project_id, job)
    return JobState(
        project_id=project_id,
        project_status=project.status,
        job_id=job.id,
        deposit_amount=job.deposit_amount,
        draft=saved,
        summary=summary,
        scheduling_applicable=gate.is_scheduling_applicable(quotes),
        managed_job=gate.is_managed_job(quotes),
        flags_locked=gate.flags_locked(project.status),
        final_payment=gate.final_payment_gate(saved.appointments, now=now),
        conflicts=await _conflicts_for(saved, db),
        transitioned=decision.schedules_project,
    )


async def complete_job(project_id: uuid.UUID, db: AsyncSession) -> Project:
    project = await get_project(project_id, db)
    if project.status != ProjectStatus.SCHEDULED.value:
        reason = RejectionReason.NOT_SCHEDULED
        raise SchedulingRejection(REJECTION_MESSAGES[reason], reason=reason.value)

    job = await get_job(project_id, db)
    if not job or not job.final_payment_received:
        reason = RejectionReason.FINAL_PAYMENT_MISSING
        raise SchedulingRejection(REJECTION_MESSAGES[reason], reason=reason.value)

    project.status = ProjectStatus.COMPLETED.value
    await db.flush()
    await db.refresh(project)
    logger.info("Project %s moved to %s", project_id, ProjectStatus.COMPLETED.value)
    return project


async def set_on_hold(project_id: uuid.UUID, on_hold: bool, db: AsyncSession) -> Job:
    project = await get_project(project_id, db)
    job = await ensure_job(project, db)
    job.is_on_hold = on_hold
    await db.flush()
    await db.refresh(job)
    logger.info("Job for project %s %s", project_id, "put on hold" if on_hold else "released")
    return job
