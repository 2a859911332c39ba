# caseguard/models/customer.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from caseguard.models.base import Base


class CustomerKind(str, enum.Enum):
    """Which table a customer reference points at."""
    organization = "organization"
    individual = "individual"


class Individual(Base):
    __tablename__ = "individuals"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    first_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)

    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)

    # контактное лицо организации (опционально)
    primary_contact_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("individuals.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


@dataclass(frozen=True)
class CustomerRef:
    """Tagged customer reference stored on a case: kind + id of the referenced row."""

    kind: CustomerKind
    id: UUID
