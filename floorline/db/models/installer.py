from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from floorline.db.base import BaseModel


class Installer(BaseModel):
    __tablename__ = "installers"

    installer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)
