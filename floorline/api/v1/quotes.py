"""Installer and materials quotes for a project."""

from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.api.deps import get_db, valid_project
from floorline.common.enums import (
    PRE_ACCEPTANCE_STATUSES,
    InstallationType,
    ProjectStatus,
    QuoteStatus,
)
from floorline.common.exceptions import BadRequestError, NotFoundError
from floorline.common.logging import get_logger
from floorline.core.scheduling.service import ensure_job, get_project, sync_deposit_amount
from floorline.db.models.installer import Installer
from floorline.db.models.quote import Quote

router = APIRouter(tags=["Quotes"])
logger = get_logger("api.quotes")

VALID_TRANSITIONS = {
    QuoteStatus.SENT.value: [QuoteStatus.ACCEPTED.value, QuoteStatus.REJECTED.value],
    QuoteStatus.ACCEPTED.value: [],
    QuoteStatus.REJECTED.value: [],
}
_PRE_ACCEPTANCE = {s.value for s in PRE_ACCEPTANCE_STATUSES}


# ---------- Schemas ----------


class QuoteCreate(BaseModel):
    installer_id: uuid.UUID | None = None
    installation_type: InstallationType = InstallationType.MANAGED
    quote_details: str | None = None
    materials_amount: Decimal | None = Field(None, ge=0)
    labor_amount: Decimal | None = Field(None, ge=0)
    installer_markup: Decimal | None = None
    labor_deposit_percentage: Decimal | None = Field(Decimal("50.00"), ge=0, le=100)
    po_number: str | None = None


class QuoteUpdate(BaseModel):
    installer_id: uuid.UUID | None = None
    installation_type: InstallationType | None = None
    quote_details: str | None = None
    materials_amount: Decimal | None = Field(None, ge=0)
    labor_amount: Decimal | None = Field(None, ge=0)
    installer_markup: Decimal | None = None
    labor_deposit_percentage: Decimal | None = Field(None, ge=0, le=100)
    po_number: str | None = None


class QuoteResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    installer_id: uuid.UUID | None
    installation_type: str
    quote_details: str | None
    materials_amount: Decimal | None
    labor_amount: Decimal | None
    installer_markup: Decimal | None
    labor_deposit_percentage: Decimal | None
    po_number: str | None
    status: str
    date_sent: str


class QuoteDecisionResponse(BaseModel):
    quote: QuoteResponse
    project_status: str


# ---------- Endpoints ----------


@router.post(
    "/projects/{project_id}/quotes",
    response_model=QuoteResponse,
    status_code=201,
    dependencies=[Depends(valid_project)],
)
async def create_quote(
    project_id: uuid.UUID,
    body: QuoteCreate,
    db: AsyncSession = Depends(get_db),
):
    if body.installer_id:
        await _verify_installer(body.installer_id, db)

    quote = Quote(
        project_id=project_id,
        installer_id=body.installer_id,
        installation_type=body.installation_type.value,
        quote_details=body.quote_details,
        materials_amount=body.materials_amount,
        labor_amount=body.labor_amount,
        installer_markup=body.installer_markup,
        labor_deposit_percentage=body.labor_deposit_percentage,
        po_number=body.po_number,
        status=QuoteStatus.SENT.value,
    )
    _enforce_materials_only(quote)
    db.add(quote)
    await db.flush()
    await db.refresh(quote)
    return _quote_response(quote)


@router.get(
    "/projects/{project_id}/quotes",
    response_model=list[QuoteResponse],
    dependencies=[Depends(valid_project)],
)
async def list_quotes(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Quote)
        .where(Quote.project_id == project_id, Quote.active())
        .order_by(Quote.date_sent.desc())
    )
    return [_quote_response(q) for q in result.scalars().all()]


@router.patch("/quotes/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: uuid.UUID,
    body: QuoteUpdate,
    db: AsyncSession = Depends(get_db),
):
    quote = await _get_quote(quote_id, db)
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise BadRequestError("No fields to update provided.")
    if changes.get("installer_id"):
        await _verify_installer(changes["installer_id"], db)
    if "installation_type" in changes:
        if changes["installation_type"] is None:
            raise BadRequestError("installation_type cannot be null")
        changes["installation_type"] = changes["installation_type"].value

    for field, value in changes.items():
        setattr(quote, field, value)
    _enforce_materials_only(quote)

    await db.flush()
    if quote.status == QuoteStatus.ACCEPTED.value:
        await sync_deposit_amount(quote.project_id, db)
    await db.refresh(quote)
    return _quote_response(quote)


@router.post("/quotes/{quote_id}/accept", response_model=QuoteDecisionResponse)
async def accept_quote(
    quote_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    quote = await _get_quote(quote_id, db)
    _transition(quote, QuoteStatus.ACCEPTED)

    project = await get_project(quote.project_id, db)
    if project.status in _PRE_ACCEPTANCE:
        logger.info("Project %s moved to %s", project.id, ProjectStatus.ACCEPTED.value)
        project.status = ProjectStatus.ACCEPTED.value

    await db.flush()
    await ensure_job(project, db)
    await sync_deposit_amount(project.id, db)
    await db.refresh(quote)
    return QuoteDecisionResponse(quote=_quote_response(quote), project_status=project.status)


@router.post("/quotes/{quote_id}/reject", response_model=QuoteDecisionResponse)
async def reject_quote(
    quote_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    quote = await _get_quote(quote_id, db)
    _transition(quote, QuoteStatus.REJECTED)
    await db.flush()
    await db.refresh(quote)

    project = await get_project(quote.project_id, db)
    return QuoteDecisionResponse(quote=_quote_response(quote), project_status=project.status)


def _transition(quote: Quote, target: QuoteStatus) -> None:
    allowed = VALID_TRANSITIONS.get(quote.status, [])
    if target.value not in allowed:
        raise BadRequestError(f"Cannot transition from '{quote.status}' to '{target.value}'")
    quote.status = target.value


def _enforce_materials_only(quote: Quote) -> None:
    if quote.installation_type == InstallationType.MATERIALS_ONLY.value:
        quote.installer_id = None
        quote.labor_amount = None
        quote.labor_deposit_percentage = None


def _quote_response(quote: Quote) -> QuoteResponse:
    return QuoteResponse(
        id=quote.id, project_id=quote.project_id, installer_id=quote.installer_id,
        installation_type=quote.installation_type, quote_details=quote.quote_details,
        materials_amount=quote.materials_amount, labor_amount=quote.labor_amount,
        installer_markup=quote.installer_markup,
        labor_deposit_percentage=quote.labor_deposit_percentage,
        po_number=quote.po_number, status=quote.status,
        date_sent=quote.date_sent.isoformat(),
    )


async def _get_quote(quote_id: uuid.UUID, db: AsyncSession) -> Quote:
    result = await db.execute(
        select(Quote).where(Quote.id == quote_id, Quote.active())
    )
    quote = result.scalar_one_or_none()
    if not quote:
        raise NotFoundError("Quote", str(quote_id))
    return quote


async def _verify_installer(installer_id: uuid.UUID, db: AsyncSession) -> None:
    result = await db.execute(
        select(Installer.id).where(Installer.id == installer_id, Installer.active())
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Installer", str(installer_id))
