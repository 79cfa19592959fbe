import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorline.db.base import BaseModel


class Job(BaseModel):
    __tablename__ = "jobs"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False, unique=True, index=True
    )
    po_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # Written only from the financial summary, never edited directly.
    deposit_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    deposit_received: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    contracts_received: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    final_payment_received: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_on_hold: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    project = relationship("Project", back_populates="job", lazy="selectin")
    appointments = relationship(
        "JobAppointment",
        back_populates="job",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="JobAppointment.position",
    )


class JobAppointment(BaseModel):
    __tablename__ = "job_appointments"

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quote_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True
    )
    installer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("installers.id"), nullable=True, index=True
    )
    appointment_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Local wall-clock times; date-only input is stored at a fixed hour.
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    job = relationship("Job", back_populates="appointments", lazy="selectin")
