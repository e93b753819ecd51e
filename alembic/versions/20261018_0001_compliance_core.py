"""Compliance core schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates the tables backing the compliance core:
- credentials: Credentials and their built-in requirements
- credential_rule_packs: Versioned, time-bounded rule packs
- members: Users and their firm
- user_credentials: Credential holdings with hours and deadlines
- cpd_activities: Logged CPD activities
- benchmark_snapshots: Materialized cohort statistics
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ==========================================================================
    # credentials table
    # ==========================================================================
    op.create_table(
        "credentials",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("body", sa.String(255), nullable=True),
        sa.Column("region", sa.String(64), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("hours_required", sa.Float(), nullable=True),
        sa.Column("ethics_hours", sa.Float(), nullable=True),
        sa.Column("structured_hours", sa.Float(), nullable=True),
        sa.Column("cycle_length_years", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("category_rules", postgresql.JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # ==========================================================================
    # credential_rule_packs table
    # ==========================================================================
    op.create_table(
        "credential_rule_packs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("credential_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_to", sa.Date(), nullable=True),
        sa.Column("rules", postgresql.JSONB(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["credential_id"], ["credentials.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("credential_id", "version", name="uq_rule_packs_credential_version"),
    )
    op.create_index(
        "ix_rule_packs_credential_from",
        "credential_rule_packs",
        ["credential_id", "effective_from"],
    )

    # ==========================================================================
    # members table
    # ==========================================================================
    op.create_table(
        "members",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("firm_id", sa.String(64), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_members_firm", "members", ["firm_id"])

    # ==========================================================================
    # user_credentials table
    # ==========================================================================
    op.create_table(
        "user_credentials",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("credential_id", sa.String(64), nullable=False),
        sa.Column("jurisdiction", sa.String(64), nullable=False),
        sa.Column("hours_completed", sa.Float(), nullable=False, server_default="0"),
        sa.Column("ethics_hours_completed", sa.Float(), nullable=False, server_default="0"),
        sa.Column("structured_hours_completed", sa.Float(), nullable=False, server_default="0"),
        sa.Column("renewal_deadline", sa.Date(), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["members.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["credential_id"], ["credentials.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("user_id", "credential_id", name="uq_user_credentials_user_credential"),
    )
    op.create_index(
        "ix_user_credentials_cohort",
        "user_credentials",
        ["credential_id", "jurisdiction"],
    )

    # ==========================================================================
    # cpd_activities table
    # ==========================================================================
    op.create_table(
        "cpd_activities",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="completed"),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("activity_type", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["members.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_cpd_activities_user_date", "cpd_activities", ["user_id", "activity_date"])

    # ==========================================================================
    # benchmark_snapshots table
    # ==========================================================================
    op.create_table(
        "benchmark_snapshots",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("credential_id", sa.String(64), nullable=False),
        sa.Column("period", sa.String(32), nullable=False),
        sa.Column("jurisdiction", sa.String(64), nullable=False),
        sa.Column("total_peers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_hours", sa.Float(), nullable=True),
        sa.Column("median_hours", sa.Float(), nullable=True),
        sa.Column("p25_hours", sa.Float(), nullable=True),
        sa.Column("p75_hours", sa.Float(), nullable=True),
        sa.Column("p90_hours", sa.Float(), nullable=True),
        sa.Column("avg_ethics_hours", sa.Float(), nullable=True),
        sa.Column("avg_structured_hours", sa.Float(), nullable=True),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["credential_id"], ["credentials.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "credential_id", "period", "jurisdiction",
            name="uq_benchmark_snapshots_key",
        ),
    )


def downgrade() -> None:
    op.drop_table("benchmark_snapshots")
    op.drop_table("cpd_activities")
    op.drop_table("user_credentials")
    op.drop_table("members")
    op.drop_table("credential_rule_packs")
    op.drop_table("credentials")
