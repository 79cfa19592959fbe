from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorline.common.enums import ProjectStatus
from floorline.db.base import BaseModel


class Project(BaseModel):
    __tablename__ = "projects"

    project_name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        String(30), nullable=False, default=ProjectStatus.NEW
    )
    final_choice: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    quotes = relationship("Quote", back_populates="project", lazy="selectin")
    change_orders = relationship("ChangeOrder", back_populates="project", lazy="selectin")
    job = relationship("Job", back_populates="project", uselist=False, lazy="selectin")
