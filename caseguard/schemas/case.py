# caseguard/schemas/case.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from caseguard.models.case import CaseStatus
from caseguard.models.customer import CustomerKind, CustomerRef


class CustomerRefIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: CustomerKind
    id: UUID

    def to_ref(self) -> CustomerRef:
        return CustomerRef(kind=self.kind, id=self.id)


class CaseCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=4000)

    # Optional on the wire: a missing reference is reported by the uniqueness guard
    # with its own data-integrity error.
    customer: CustomerRefIn | None = None


class CaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: CaseStatus
    customer_kind: CustomerKind
    customer_id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None
    row_version: int


class CaseCloseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    expected_row_version: int = Field(..., ge=1)
