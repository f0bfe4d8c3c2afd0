"""Initial schema — clients and phones.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-18

Tables created:
  clients
  phones    (client_id → clients.id ON DELETE CASCADE)
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── clients ───────────────────────────────────────────────
    op.create_table(
        "clients",
        sa.Column("id",         sa.Integer(),    primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(50),   nullable=True),
        sa.Column("last_name",  sa.String(50),   nullable=True),
        sa.Column("email",      sa.String(100),  nullable=True),
        sa.CheckConstraint("length(first_name) <= 50", name="len_first_name"),
        sa.CheckConstraint("length(last_name) <= 50",  name="len_last_name"),
        sa.CheckConstraint("length(email) <= 100",     name="len_email"),
        sqlite_autoincrement=True,
    )

    # ── phones ────────────────────────────────────────────────
    op.create_table(
        "phones",
        sa.Column("id",           sa.Integer(),  primary_key=True, autoincrement=True),
        sa.Column("client_id",    sa.Integer(),
                  sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.CheckConstraint("length(phone_number) <= 20", name="len_phone_number"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_phones_client_id", "phones", ["client_id"])


def downgrade() -> None:
    op.drop_index("ix_phones_client_id", table_name="phones")
    op.drop_table("phones")
    op.drop_table("clients")
