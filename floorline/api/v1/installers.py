import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.api.deps import get_db
from floorline.common.exceptions import NotFoundError
from floorline.core.scheduling.schemas import ScheduleEntry
from floorline.core.scheduling.service import installer_schedule
from floorline.db.models.installer import Installer

router = APIRouter(prefix="/installers", tags=["Installers"])


# ---------- Schemas ----------


class InstallerCreate(BaseModel):
    installer_name: str
    contact_email: str | None = None
    contact_phone: str | None = None
    color: str | None = Field(None, pattern="^#[0-9A-Fa-f]{6}$")


class InstallerResponse(BaseModel):
    id: uuid.UUID
    installer_name: str
    contact_email: str | None
    contact_phone: str | None
    color: str | None

    model_config = {"from_attributes": True}


# ---------- Endpoints ----------


@router.post("", response_model=InstallerResponse, status_code=201)
async def create_installer(
    body: InstallerCreate,
    db: AsyncSession = Depends(get_db),
):
    installer = Installer(**body.model_dump())
    db.add(installer)
    await db.flush()
    await db.refresh(installer)
    return InstallerResponse.model_validate(installer)


@router.get("", response_model=list[InstallerResponse])
async def list_installers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Installer)
        .where(Installer.active())
        .order_by(Installer.installer_name.asc())
    )
    return [InstallerResponse.model_validate(i) for i in result.scalars().all()]


@router.get("/{installer_id}/schedule", response_model=list[ScheduleEntry])
async def get_installer_schedule(
    installer_id: uuid.UUID,
    exclude_project_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Installer.id).where(Installer.id == installer_id, Installer.active())
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Installer", str(installer_id))
    return await installer_schedule(installer_id, db, exclude_project_id)
