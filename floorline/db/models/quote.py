import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorline.common.enums import InstallationType, QuoteStatus
from floorline.db.base import BaseModel


class Quote(BaseModel):
    __tablename__ = "quotes"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True
    )
    installer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("installers.id"), nullable=True
    )
    installation_type: Mapped[InstallationType] = mapped_column(
        String(50), nullable=False, default=InstallationType.MANAGED
    )
    quote_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    materials_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    labor_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    installer_markup: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2), nullable=True, default=Decimal("0.00")
    )
    labor_deposit_percentage: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=True, default=Decimal("50.00")
    )
    po_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_sent: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status: Mapped[QuoteStatus] = mapped_column(
        String(20), nullable=False, default=QuoteStatus.SENT
    )

    # Relationships
    project = relationship("Project", back_populates="quotes", lazy="selectin")
    installer = relationship("Installer", lazy="selectin")
