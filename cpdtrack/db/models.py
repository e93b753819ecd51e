"""
Database Models
===============

SQLAlchemy ORM models for the compliance core tables.

Tables:
    - credentials: Credentials and their default requirements
    - credential_rule_packs: Versioned, time-bounded rule sets
    - members: Firm members (users)
    - user_credentials: A member's enrollment in a credential
    - cpd_activities: Logged CPD activities (drive last-activity dates)
    - benchmark_snapshots: Materialized cohort statistics

Author: cpdtrack Team
Version: 1.0.0
"""

from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cpdtrack.db.base import Base, TimestampMixin, generate_uuid, utc_now


class CredentialDB(Base, TimestampMixin):
    """A credential and its built-in requirements."""

    __tablename__ = "credentials"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[Optional[str]] = mapped_column(String(255))
    region: Mapped[Optional[str]] = mapped_column(String(64))
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    hours_required: Mapped[Optional[float]] = mapped_column(Float)
    ethics_hours: Mapped[Optional[float]] = mapped_column(Float)
    structured_hours: Mapped[Optional[float]] = mapped_column(Float)
    cycle_length_years: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    category_rules: Mapped[Optional[Any]] = mapped_column(JSONB)

    rule_packs: Mapped[List["CredentialRulePackDB"]] = relationship(
        back_populates="credential",
    )


class CredentialRulePackDB(Base, TimestampMixin):
    """
    A published rule pack.

    Rows are never deleted; superseding a pack only closes its
    ``effective_to`` so historical resolution stays reproducible.
    """

    __tablename__ = "credential_rule_packs"
    __table_args__ = (
        UniqueConstraint("credential_id", "version", name="uq_rule_packs_credential_version"),
        Index("ix_rule_packs_credential_from", "credential_id", "effective_from"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    credential_id: Mapped[str] = mapped_column(
        ForeignKey("credentials.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[Optional[date]] = mapped_column(Date)
    rules: Mapped[Any] = mapped_column(JSONB, nullable=False, default=dict)

    credential: Mapped[CredentialDB] = relationship(back_populates="rule_packs")


class MemberDB(Base, TimestampMixin):
    """A user, optionally belonging to a firm."""

    __tablename__ = "members"
    __table_args__ = (
        Index("ix_members_firm", "firm_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    firm_id: Mapped[Optional[str]] = mapped_column(String(64))
    name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    credentials: Mapped[List["UserCredentialDB"]] = relationship(
        back_populates="member",
    )


class UserCredentialDB(Base, TimestampMixin):
    """A member's enrollment in a credential within a jurisdiction."""

    __tablename__ = "user_credentials"
    __table_args__ = (
        UniqueConstraint("user_id", "credential_id", name="uq_user_credentials_user_credential"),
        Index("ix_user_credentials_cohort", "credential_id", "jurisdiction"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    credential_id: Mapped[str] = mapped_column(
        ForeignKey("credentials.id", ondelete="RESTRICT"), nullable=False
    )
    jurisdiction: Mapped[str] = mapped_column(String(64), nullable=False)
    hours_completed: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    ethics_hours_completed: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    structured_hours_completed: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    renewal_deadline: Mapped[Optional[date]] = mapped_column(Date)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    member: Mapped[MemberDB] = relationship(back_populates="credentials")
    credential: Mapped[CredentialDB] = relationship()


class CpdActivityDB(Base, TimestampMixin):
    """A logged CPD activity."""

    __tablename__ = "cpd_activities"
    __table_args__ = (
        Index("ix_cpd_activities_user_date", "user_id", "activity_date"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    hours: Mapped[float] = mapped_column(Float, nullable=False)
    activity_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="completed", nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(64))
    activity_type: Mapped[Optional[str]] = mapped_column(String(64))


class BenchmarkSnapshotDB(Base):
    """Materialized cohort statistics, one row per upsert key."""

    __tablename__ = "benchmark_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "credential_id", "period", "jurisdiction",
            name="uq_benchmark_snapshots_key",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_uuid)
    credential_id: Mapped[str] = mapped_column(
        ForeignKey("credentials.id", ondelete="CASCADE"), nullable=False
    )
    period: Mapped[str] = mapped_column(String(32), nullable=False)
    jurisdiction: Mapped[str] = mapped_column(String(64), nullable=False)
    total_peers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    avg_hours: Mapped[Optional[float]] = mapped_column(Float)
    median_hours: Mapped[Optional[float]] = mapped_column(Float)
    p25_hours: Mapped[Optional[float]] = mapped_column(Float)
    p75_hours: Mapped[Optional[float]] = mapped_column(Float)
    p90_hours: Mapped[Optional[float]] = mapped_column(Float)
    avg_ethics_hours: Mapped[Optional[float]] = mapped_column(Float)
    avg_structured_hours: Mapped[Optional[float]] = mapped_column(Float)
    calculated_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
