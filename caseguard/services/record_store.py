# caseguard/services/record_store.py
from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from caseguard.core.logging import log_event
from caseguard.core.rbac import Forbidden, ensure_allowed
from caseguard.models.case import Case, CaseStatus
from caseguard.models.customer import CustomerKind, CustomerRef, Individual, Organization

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def find_active_cases(self, customer_id: UUID, *, limit: int = 1) -> list[Case]: ...


class SqlRecordStore:
    """
    Read access to cases/customers on behalf of one caller.

    Permission denials are logged with the caller's user_id and re-raised as
    rbac.Forbidden; database errors are SQLAlchemy's own and pass through.
    """

    def __init__(self, db: Session, *, user_id: UUID, role: str):
        self.db = db
        self.user_id = user_id
        self.role = role

    def find_active_cases(self, customer_id: UUID, *, limit: int = 1) -> list[Case]:
        self._ensure_allowed("case.read")

        stmt = (
            select(Case)
            .where(
                Case.status == CaseStatus.active.value,
                Case.customer_id == customer_id,
            )
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars())

    def customer_exists(self, ref: CustomerRef) -> bool:
        self._ensure_allowed("customer.read")

        model = Organization if ref.kind == CustomerKind.organization else Individual
        return self.db.get(model, ref.id) is not None

    def _ensure_allowed(self, permission: str) -> None:
        try:
            ensure_allowed(permission, self.role)
        except Forbidden:
            log_event(
                logger,
                "Record store access denied",
                level="WARNING",
                user_id=str(self.user_id),
                role=self.role,
                permission=permission,
            )
            raise


class RecordStoreFactory:
    """Creates record stores scoped to the calling user."""

    def __init__(self, db: Session):
        self.db = db

    def create_record_store(self, user_id: UUID, role: str) -> SqlRecordStore:
        return SqlRecordStore(self.db, user_id=user_id, role=role)
