"""Change orders adjusting a project's cost, optionally tied to one quote."""

from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.api.deps import get_db, valid_project
from floorline.common.enums import ChangeOrderType
from floorline.common.exceptions import BadRequestError, NotFoundError
from floorline.common.logging import get_logger
from floorline.common.pagination import PaginatedResponse, PaginationParams, paginate
from floorline.core.scheduling.service import sync_deposit_amount
from floorline.db.models.change_order import ChangeOrder
from floorline.db.models.quote import Quote

router = APIRouter(tags=["Change Orders"])
logger = get_logger("api.change_orders")


# ---------- Schemas ----------

class ChangeOrderCreate(BaseModel):
    description: str
    amount: Decimal
    type: ChangeOrderType
    quote_id: uuid.UUID | None = None


class ChangeOrderUpdate(BaseModel):
    description: str
    amount: Decimal
    type: ChangeOrderType
    quote_id: uuid.UUID | None = None


class ChangeOrderResponse(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    quote_id: uuid.UUID | None
    description: str
    amount: Decimal
    type: str
    created_at: str
    model_config = {"from_attributes": True}


class ChangeOrderListResponse(PaginatedResponse[ChangeOrderResponse]):
    pass


# ---------- Endpoints ----------

@router.post(
    "/projects/{project_id}/change-orders",
    response_model=ChangeOrderResponse,
    status_code=201,
    dependencies=[Depends(valid_project)],
)
async def create_change_order(
    project_id: uuid.UUID,
    body: ChangeOrderCreate,
    db: AsyncSession = Depends(get_db),
):
    if not body.description.strip():
        raise BadRequestError("description is required")
    await _verify_quote(project_id, body.quote_id, db)

    co = ChangeOrder(
        project_id=project_id,
        quote_id=body.quote_id,
        description=body.description,
        amount=body.amount,
        type=body.type.value,
    )
    db.add(co)
    await db.flush()
    await db.refresh(co)
    await sync_deposit_amount(project_id, db)

    logger.info("Change order %s (%s %s) added to project %s", co.id, co.type, co.amount, project_id)
    return _co_response(co)


@router.get(
    "/projects/{project_id}/change-orders",
    response_model=ChangeOrderListResponse,
    dependencies=[Depends(valid_project)],
)
async def list_change_orders(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    params: PaginationParams = Depends(),
):
    query = (
        select(ChangeOrder)
        .where(ChangeOrder.project_id == project_id, ChangeOrder.active())
        .order_by(ChangeOrder.created_at.asc())
    )
    items, total = await paginate(
        db,
        query,
        params,
        sortable={
            "created_at": ChangeOrder.created_at,
            "amount": ChangeOrder.amount,
            "type": ChangeOrder.type,
        },
        searchable=(ChangeOrder.description,),
    )
    return ChangeOrderListResponse(
        items=[_co_response(c) for c in items],
        total=total, page=params.page, page_size=params.page_size,
        total_pages=params.total_pages(total),
    )


@router.put("/change-orders/{co_id}", response_model=ChangeOrderResponse)
async def update_change_order(
    co_id: uuid.UUID,
    body: ChangeOrderUpdate,
    db: AsyncSession = Depends(get_db),
):
    co = await _get_change_order(co_id, db)
    if not body.description.strip():
        raise BadRequestError("description is required")
    await _verify_quote(co.project_id, body.quote_id, db)

    co.description = body.description
    co.amount = body.amount
    co.type = body.type.value
    co.quote_id = body.quote_id

    await db.flush()
    await db.refresh(co)
    await sync_deposit_amount(co.project_id, db)
    return _co_response(co)


@router.delete("/change-orders/{co_id}", status_code=204)
async def delete_change_order(
    co_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    co = await _get_change_order(co_id, db)
    co.soft_delete()
    await db.flush()
    await sync_deposit_amount(co.project_id, db)

    logger.info("Change order %s removed from project %s", co.id, co.project_id)
    return Response(status_code=204)


def _co_response(co: ChangeOrder) -> ChangeOrderResponse:
    return ChangeOrderResponse(
        id=co.id, project_id=co.project_id, quote_id=co.quote_id,
        description=co.description, amount=co.amount, type=co.type,
        created_at=co.created_at.isoformat(),
    )


async def _get_change_order(co_id: uuid.UUID, db: AsyncSession) -> ChangeOrder:
    result = await db.execute(
        select(ChangeOrder).where(ChangeOrder.id == co_id, ChangeOrder.active())
    )
    co = result.scalar_one_or_none()
    if not co:
        raise NotFoundError("Change order", str(co_id))
    return co


async def _verify_quote(project_id: uuid.UUID, quote_id: uuid.UUID | None, db: AsyncSession) -> None:
    if quote_id is None:
        return
    result = await db.execute(
        select(Quote.id).where(
            Quote.id == quote_id,
            Quote.project_id == project_id,
            Quote.active(),
        )
    )
    if result.scalar_one_or_none() is None:
        raise BadRequestError("quote_id must reference a quote on the same project")
