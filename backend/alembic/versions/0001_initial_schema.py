"""Initial quote schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "settings_documents",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("data", JSON_TYPE, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, server_default=""),
        sa.Column("company", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_clients_email", "clients", ["email"])

    service_type_enum = sa.Enum("WEB", "DESIGN", "VIDEO", name="servicetype")
    quote_status_enum = sa.Enum(
        "PENDING", "ACCEPTED", "REJECTED", "COMPLETED", name="quotestatus"
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("project_name", sa.String(length=255), nullable=False),
        sa.Column("quoted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("service_type", service_type_enum, nullable=False),
        sa.Column("request", JSON_TYPE, nullable=False),
        sa.Column("breakdown", JSON_TYPE, nullable=False),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False),
        sa.Column("original_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("total", sa.Numeric(14, 2), nullable=False),
        sa.Column("recurring_monthly", sa.Numeric(14, 2), nullable=False),
        sa.Column("discount", JSON_TYPE, nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("status", quote_status_enum, nullable=False),
        sa.Column("client_notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("internal_notes", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_quotes_client_id", "quotes", ["client_id"])

    op.create_table(
        "team_members",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, server_default=""),
        sa.Column("country", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("timezone", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("role", sa.String(length=120), nullable=False, server_default=""),
        sa.Column("hourly_rate", sa.Numeric(12, 2), nullable=False),
        sa.Column("share_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("skills", JSON_TYPE, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "projects_completed", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "total_earnings", sa.Numeric(14, 2), nullable=False, server_default="0"
        ),
        sa.Column("project_history", JSON_TYPE, nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("team_members")
    op.drop_index("ix_quotes_client_id", table_name="quotes")
    op.drop_table("quotes")
    op.drop_index("ix_clients_email", table_name="clients")
    op.drop_table("clients")
    op.drop_table("settings_documents")
    sa.Enum(name="quotestatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="servicetype").drop(op.get_bind(), checkfirst=True)
