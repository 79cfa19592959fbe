"""Initial schema - projects, installers, quotes, change orders, jobs

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    # Projects
    op.create_table(
        "projects",
        *_base_columns(),
        sa.Column("project_name", sa.String(255), nullable=False),
        sa.Column("project_type", sa.String(100), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="New"),
        sa.Column("final_choice", sa.String(255), nullable=True),
    )

    # Installers
    op.create_table(
        "installers",
        *_base_columns(),
        sa.Column("installer_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column("color", sa.String(7), nullable=True),
    )

    # Quotes
    op.create_table(
        "quotes",
        *_base_columns(),
        sa.Column(
            "project_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("projects.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "installer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("installers.id"),
            nullable=True,
        ),
        sa.Column(
            "installation_type",
            sa.String(50),
            nullable=False,
            server_default="Managed Installation",
        ),
        sa.Column("quote_details", sa.Text, nullable=True),
        sa.Column("materials_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("labor_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("installer_markup", sa.Numeric(10, 2), server_default=sa.text("0.00")),
        sa.Column("labor_deposit_percentage", sa.Numeric(5, 2), server_default=sa.text("50.00")),
        sa.Column("po_number", sa.String(255), nullable=True),
        sa.Column(
            "date_sent",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="Sent"),
    )

    # Change orders
    op.create_table(
        "change_orders",
        *_base_columns(),
        sa.Column(
            "project_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("projects.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "quote_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("quotes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0.00")),
        sa.Column("type", sa.String(20), nullable=False),
    )

    # Jobs
    op.create_table(
        "jobs",
        *_base_columns(),
        sa.Column(
            "project_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("projects.id"),
            nullable=False,
            unique=True,
            index=True,
        ),
        sa.Column("po_number", sa.String(255), nullable=True),
        sa.Column("deposit_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("deposit_received", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("contracts_received", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column(
            "final_payment_received", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column("is_on_hold", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("notes", sa.Text, nullable=True),
    )

    # Job appointments
    op.create_table(
        "job_appointments",
        *_base_columns(),
        sa.Column(
            "job_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("jobs.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "quote_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("quotes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "installer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("installers.id"),
            nullable=True,
            index=True,
        ),
        sa.Column("appointment_name", sa.String(255), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=False), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=False), nullable=True),
        sa.Column("position", sa.Integer, nullable=False, server_default=sa.text("0")),
    )


def downgrade() -> None:
    op.drop_table("job_appointments")
    op.drop_table("jobs")
    op.drop_table("change_orders")
    op.drop_table("quotes")
    op.drop_table("installers")
    op.drop_table("projects")
