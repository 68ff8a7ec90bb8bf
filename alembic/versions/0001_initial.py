"""users, support areas, tickets and services

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default=sa.text("'user'")),
        *_timestamps(),
        sa.CheckConstraint("role in ('admin','attendant','support','user')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "support_areas",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("service_area", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_support_areas_user_id_users", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_support_areas"),
        sa.UniqueConstraint("user_id", "service_area", name="uq_support_areas_user_area"),
    )
    op.create_index("ix_support_areas_user_id", "support_areas", ["user_id"], unique=False)

    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("client", sa.String(length=255), nullable=False),
        sa.Column("occupation_area", sa.String(length=255), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_tickets"),
    )
    op.create_index("ix_tickets_deleted_at", "tickets", ["deleted_at"], unique=False)

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("requester_name", sa.String(length=255), nullable=False),
        sa.Column("ticket_id", sa.Integer(), nullable=False),
        sa.Column("service_area", sa.String(length=255), nullable=False),
        sa.Column("support_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["ticket_id"], ["tickets.id"], name="fk_services_ticket_id_tickets"),
        sa.ForeignKeyConstraint(["support_id"], ["users.id"], name="fk_services_support_id_users"),
        sa.PrimaryKeyConstraint("id", name="pk_services"),
    )
    op.create_index("ix_services_ticket_id", "services", ["ticket_id"], unique=False)
    op.create_index("ix_services_support_id", "services", ["support_id"], unique=False)
    op.create_index("ix_services_deleted_at", "services", ["deleted_at"], unique=False)
    op.create_index("ix_services_support_status", "services", ["support_id", "status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_services_support_status", table_name="services")
    op.drop_index("ix_services_deleted_at", table_name="services")
    op.drop_index("ix_services_support_id", table_name="services")
    op.drop_index("ix_services_ticket_id", table_name="services")
    op.drop_table("services")
    op.drop_index("ix_tickets_deleted_at", table_name="tickets")
    op.drop_table("tickets")
    op.drop_index("ix_support_areas_user_id", table_name="support_areas")
    op.drop_table("support_areas")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
