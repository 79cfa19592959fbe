import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floorline.api.deps import get_db, valid_project
from floorline.common.enums import ProjectStatus, ProjectType
from floorline.common.exceptions import BadRequestError
from floorline.db.models.project import Project

router = APIRouter(prefix="/projects", tags=["Projects"])

# Manual transitions only. Accepted, Scheduled and Completed are reached
# through quote acceptance and the job endpoints.
VALID_TRANSITIONS = {
    ProjectStatus.NEW: [
        ProjectStatus.SAMPLE_CHECKOUT,
        ProjectStatus.AWAITING_DECISION,
        ProjectStatus.QUOTING,
        ProjectStatus.CANCELLED,
    ],
    ProjectStatus.SAMPLE_CHECKOUT: [
        ProjectStatus.NEW,
        ProjectStatus.AWAITING_DECISION,
        ProjectStatus.QUOTING,
        ProjectStatus.CANCELLED,
    ],
    ProjectStatus.AWAITING_DECISION: [
        ProjectStatus.SAMPLE_CHECKOUT,
        ProjectStatus.QUOTING,
        ProjectStatus.CANCELLED,
    ],
    ProjectStatus.QUOTING: [ProjectStatus.AWAITING_DECISION, ProjectStatus.CANCELLED],
    ProjectStatus.ACCEPTED: [ProjectStatus.CANCELLED],
    ProjectStatus.SCHEDULED: [ProjectStatus.CANCELLED],
    ProjectStatus.COMPLETED: [ProjectStatus.CLOSED],
    ProjectStatus.CANCELLED: [],
    ProjectStatus.CLOSED: [],
}


# ---------- Schemas ----------


class ProjectCreateRequest(BaseModel):
    project_name: str
    project_type: ProjectType | None = None
    customer_name: str | None = None


class ProjectUpdateRequest(BaseModel):
    project_name: str | None = None
    project_type: ProjectType | None = None
    customer_name: str | None = None
    final_choice: str | None = None
    status: ProjectStatus | None = None


class ProjectResponse(BaseModel):
    id: uuid.UUID
    project_name: str
    project_type: str | None
    customer_name: str | None
    status: str
    final_choice: str | None
    created_at: str

    model_config = {"from_attributes": True}

    @classmethod
    def from_orm_instance(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            project_name=project.project_name,
            project_type=project.project_type,
            customer_name=project.customer_name,
            status=project.status,
            final_choice=project.final_choice,
            created_at=project.created_at.isoformat(),
        )


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


# ---------- Endpoints ----------


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    body: ProjectCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    project = Project(
        project_name=body.project_name,
        project_type=body.project_type.value if body.project_type else None,
        customer_name=body.customer_name,
        status=ProjectStatus.NEW.value,
    )
    db.add(project)
    await db.flush()
    await db.refresh(project)
    return ProjectResponse.from_orm_instance(project)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    status: ProjectStatus | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(Project).where(Project.active())
    if status is not None:
        query = query.where(Project.status == status.value)

    result = await db.execute(query.order_by(Project.created_at.desc()))
    projects = result.scalars().all()

    return ProjectListResponse(
        projects=[ProjectResponse.from_orm_instance(p) for p in projects],
        total=len(projects),
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project_detail(project: Project = Depends(valid_project)):
    return ProjectResponse.from_orm_instance(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    body: ProjectUpdateRequest,
    project: Project = Depends(valid_project),
    db: AsyncSession = Depends(get_db),
):
    if body.project_name is not None:
        project.project_name = body.project_name
    if body.project_type is not None:
        project.project_type = body.project_type.value
    if body.customer_name is not None:
        project.customer_name = body.customer_name
    if body.final_choice is not None:
        project.final_choice = body.final_choice

    if body.status is not None:
        current_status = ProjectStatus(project.status)
        allowed = VALID_TRANSITIONS.get(current_status, [])
        if body.status not in allowed:
            raise BadRequestError(
                f"Cannot transition from '{current_status.value}' to '{body.status.value}'"
            )
        project.status = body.status.value

    await db.flush()
    await db.refresh(project)
    return ProjectResponse.from_orm_instance(project)
