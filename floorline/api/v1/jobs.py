"""Job details, financial summary and the scheduling workflow for a project."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.api.deps import get_db, valid_project
from floorline.core.finance.calculator import format_summary
from floorline.core.finance.schemas import FinancialSummary, FinancialSummaryDisplay, QuoteFinancials
from floorline.core.scheduling import service
from floorline.core.scheduling.draft import AppointmentDraft, JobDraft, parse_appointment_datetime
from floorline.core.scheduling.schemas import JobState, ScheduleConflict

router = APIRouter(prefix="/projects/{project_id}", tags=["Jobs"])


# ---------- Schemas ----------


class AppointmentPayload(BaseModel):
    id: uuid.UUID | None = None
    appointment_name: str = ""
    quote_id: uuid.UUID | None = None
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def check_date(cls, value: str | None) -> str | None:
        if value and value.strip():
            parse_appointment_datetime(value)
        return value


class JobSaveRequest(BaseModel):
    po_number: str | None = None
    deposit_received: bool = False
    contracts_received: bool = False
    final_payment_received: bool = False
    is_on_hold: bool = False
    notes: str | None = None
    appointments: list[AppointmentPayload] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_appointment_ids(self) -> "JobSaveRequest":
        ids = [a.id for a in self.appointments if a.id is not None]
        if len(ids) != len(set(ids)):
            raise ValueError("Each appointment id may appear only once")
        return self

    def to_draft(self, project_id: uuid.UUID) -> JobDraft:
        appointments = []
        for payload in self.appointments:
            data = payload.model_dump(exclude_none=True)
            appointments.append(AppointmentDraft(**data))
        return JobDraft(
            project_id=project_id,
            po_number=self.po_number,
            deposit_received=self.deposit_received,
            contracts_received=self.contracts_received,
            final_payment_received=self.final_payment_received,
            is_on_hold=self.is_on_hold,
            notes=self.notes,
            appointments=tuple(appointments),
        )


class HoldRequest(BaseModel):
    is_on_hold: bool


class AppointmentResponse(BaseModel):
    id: uuid.UUID
    appointment_name: str
    quote_id: uuid.UUID | None
    installer_id: uuid.UUID | None
    start_date: str | None
    end_date: str | None


class FinancialSummaryResponse(BaseModel):
    grand_total: Decimal
    total_deposit: Decimal
    balance_due: Decimal
    total_materials: Decimal
    total_labor: Decimal
    unassigned_change_orders_total: Decimal
    display: FinancialSummaryDisplay
    quotes: list[QuoteFinancials]

    @classmethod
    def from_summary(cls, summary: FinancialSummary) -> "FinancialSummaryResponse":
        return cls(
            grand_total=summary.grand_total,
            total_deposit=summary.total_deposit,
            balance_due=summary.balance_due,
            total_materials=summary.total_materials,
            total_labor=summary.total_labor,
            unassigned_change_orders_total=summary.unassigned_change_orders_total,
            display=format_summary(summary),
            quotes=summary.quotes,
        )


class JobResponse(BaseModel):
    project_id: uuid.UUID
    project_status: str
    job_id: uuid.UUID | None
    po_number: str | None
    deposit_amount: Decimal | None
    deposit_received: bool
    contracts_received: bool
    final_payment_received: bool
    is_on_hold: bool
    notes: str | None
    appointments: list[AppointmentResponse]
    financials: FinancialSummaryResponse
    scheduling_applicable: bool
    managed_job: bool
    flags_locked: bool
    can_receive_final_payment: bool
    final_payment_unlock_date: datetime | None
    schedule_conflicts: list[ScheduleConflict]
    transitioned: bool

    @classmethod
    def from_state(cls, state: JobState) -> "JobResponse":
        draft = state.draft
        return cls(
            project_id=state.project_id,
            project_status=state.project_status,
            job_id=state.job_id,
            po_number=draft.po_number,
            deposit_amount=state.deposit_amount,
            deposit_received=draft.deposit_received,
            contracts_received=draft.contracts_received,
            final_payment_received=draft.final_payment_received,
            is_on_hold=draft.is_on_hold,
            notes=draft.notes,
            appointments=[
                AppointmentResponse(
                    id=a.id, appointment_name=a.appointment_name, quote_id=a.quote_id,
                    installer_id=a.installer_id, start_date=a.start_date, end_date=a.end_date,
                )
                for a in draft.appointments
            ],
            financials=FinancialSummaryResponse.from_summary(state.summary),
            scheduling_applicable=state.scheduling_applicable,
            managed_job=state.managed_job,
            flags_locked=state.flags_locked,
            can_receive_final_payment=state.final_payment.can_receive,
            final_payment_unlock_date=state.final_payment.unlock_date,
            schedule_conflicts=state.conflicts,
            transitioned=state.transitioned,
        )


class JobStatusResponse(BaseModel):
    project_id: uuid.UUID
    project_status: str
    is_on_hold: bool


# ---------- Endpoints ----------


@router.get(
    "/financial-summary",
    response_model=FinancialSummaryResponse,
    dependencies=[Depends(valid_project)],
)
async def get_financial_summary(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    summary = await service.get_financial_summary(project_id, db)
    return FinancialSummaryResponse.from_summary(summary)


@router.get("/job", response_model=JobResponse)
async def get_job(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    state = await service.get_job_state(project_id, db)
    return JobResponse.from_state(state)


@router.put("/job", response_model=JobResponse)
async def save_job(
    project_id: uuid.UUID,
    body: JobSaveRequest,
    db: AsyncSession = Depends(get_db),
):
    state = await service.save_job_details(project_id, body.to_draft(project_id), db)
    return JobResponse.from_state(state)


@router.post("/job/complete", response_model=JobStatusResponse)
async def complete_job(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    project = await service.complete_job(project_id, db)
    job = await service.get_job(project_id, db)
    return JobStatusResponse(
        project_id=project.id,
        project_status=project.status,
        is_on_hold=bool(job and job.is_on_hold),
    )


@router.post("/job/hold", response_model=JobStatusResponse)
async def set_hold(
    project_id: uuid.UUID,
    body: HoldRequest,
    db: AsyncSession = Depends(get_db),
):
    job = await service.set_on_hold(project_id, body.is_on_hold, db)
    project = await service.get_project(project_id, db)
    return JobStatusResponse(
        project_id=project_id,
        project_status=project.status,
        is_on_hold=job.is_on_hold,
    )
