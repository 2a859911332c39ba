# caseguard/models/case.py
from __future__ import annotations

import enum
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from caseguard.models.base import Base


class CaseStatus(str, enum.Enum):
    active = "active"
    resolved = "resolved"
    canceled = "canceled"


ONE_ACTIVE_CASE_INDEX = "uq_cases_one_active_per_customer"

_ACTIVE_ONLY = text("status = 'active'")


class Case(Base):
    __tablename__ = "cases"
    __table_args__ = (
        # one active case per customer_id, whatever the customer_kind
        Index(
            ONE_ACTIVE_CASE_INDEX,
            "customer_id",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        Index("ix_cases_customer_status", "customer_id", "status"),
        CheckConstraint("status IN ('active', 'resolved', 'canceled')", name="ck_cases_status"),
        CheckConstraint("customer_kind IN ('organization', 'individual')", name="ck_cases_customer_kind"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String, nullable=False, default=CaseStatus.active.value)

    # Polymorphic customer reference: no FK, customer_kind says which table.
    customer_kind: Mapped[str] = mapped_column(String, nullable=False)
    customer_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    created_by: Mapped[UUID] = mapped_column(Uuid, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    row_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
