import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from floorline.common.enums import ChangeOrderType
from floorline.db.base import BaseModel


class ChangeOrder(BaseModel):
    __tablename__ = "change_orders"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False, index=True
    )
    # Null means the change order is general to the project.
    quote_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    type: Mapped[ChangeOrderType] = mapped_column(String(20), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="change_orders", lazy="selectin")
