# caseguard/services/case_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from caseguard.core.logging import log_event
from caseguard.core.rbac import ensure_allowed
from caseguard.models.case import Case, CaseStatus
from caseguard.pipeline.context import CASE_ENTITY, CUSTOMER_ATTR, PendingRecord
from caseguard.pipeline.host import CreatePipeline
from caseguard.pipeline.plugin import CaseValidatorPlugin
from caseguard.services.case_guard import (
    INVALID_CUSTOMER_MESSAGE,
    ActiveCaseExists,
    CaseUniquenessGuard,
    InvalidCustomerReference,
    resolve_customer_ref,
)
from caseguard.services.record_store import RecordStoreFactory, SqlRecordStore

logger = logging.getLogger(__name__)


class CaseNotFound(KeyError):
    pass


class VersionConflict(Exception):
    pass


class CaseTransitionNotAllowed(Exception):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


# action -> (permission, to status); only active cases can be closed
CLOSE_ACTIONS: dict[str, tuple[str, CaseStatus]] = {
    "resolve": ("case.resolve", CaseStatus.resolved),
    "cancel": ("case.cancel", CaseStatus.canceled),
}


class CaseService:
    """
    Единственная точка создания case.
    Инвариант: не больше одного active case на customer_id.
    """

    def __init__(self, db: Session, store_factory: RecordStoreFactory | None = None):
        self.db = db
        self.store_factory = store_factory or RecordStoreFactory(db)
        self.pipeline = CreatePipeline(self.store_factory, plugins=[CaseValidatorPlugin()])

    # ---------- Public API ----------

    def create_case(
        self,
        *,
        actor_user_id: UUID,
        role: str,
        customer: Any,
        title: str,
        description: str | None = None,
    ) -> Case:
        """
        1) referenced customer must be well-formed and exist
        2) pre-operation plugins (uniqueness guard) on the pending record
        3) insert + commit; the partial unique index is the backstop for races
        """
        ensure_allowed("case.create", role)

        record = PendingRecord(
            CASE_ENTITY,
            {CUSTOMER_ATTR: customer, "title": title, "description": description},
        )

        ref = resolve_customer_ref(record)
        store = SqlRecordStore(self.db, user_id=actor_user_id, role=role)
        if not store.customer_exists(ref):
            raise InvalidCustomerReference(INVALID_CUSTOMER_MESSAGE)

        self.pipeline.run_pre_operation(record, user_id=actor_user_id, role=role)

        case = Case(
            id=record.id,
            title=title,
            description=description,
            status=CaseStatus.active.value,
            customer_kind=ref.kind.value,
            customer_id=ref.id,
            created_by=actor_user_id,
        )
        self.db.add(case)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()

            # a concurrent create committed first: report it as the same business-rule error
            if CaseUniquenessGuard(store).has_active_case(ref.id):
                log_event(
                    logger,
                    "Active case index violation on commit",
                    level="WARNING",
                    customer_id=str(ref.id),
                )
                raise ActiveCaseExists(ref.id) from e
            raise

        self.db.refresh(case)
        log_event(logger, "Case created", case_id=str(case.id), customer_id=str(ref.id))
        return case

    def get_case(self, case_id: UUID, *, role: str) -> Case:
        ensure_allowed("case.read", role)
        case = self.db.get(Case, case_id)
        if case is None:
            raise CaseNotFound("Case not found")
        return case

    def list_cases(
        self,
        *,
        role: str,
        customer_id: UUID | None = None,
        status: CaseStatus | None = None,
    ) -> list[Case]:
        ensure_allowed("case.read", role)

        stmt = select(Case)
        if customer_id is not None:
            stmt = stmt.where(Case.customer_id == customer_id)
        if status is not None:
            stmt = stmt.where(Case.status == status.value)

        return list(self.db.execute(stmt.order_by(Case.created_at.desc())).scalars())

    def resolve_case(self, case_id: UUID, *, actor_user_id: UUID, role: str, expected_row_version: int) -> Case:
        return self._close(case_id, "resolve", actor_user_id=actor_user_id, role=role, expected_row_version=expected_row_version)

    def cancel_case(self, case_id: UUID, *, actor_user_id: UUID, role: str, expected_row_version: int) -> Case:
        return self._close(case_id, "cancel", actor_user_id=actor_user_id, role=role, expected_row_version=expected_row_version)

    # ---------- internals ----------

    def _close(
        self,
        case_id: UUID,
        action: str,
        *,
        actor_user_id: UUID,
        role: str,
        expected_row_version: int,
    ) -> Case:
        permission, to_status = CLOSE_ACTIONS[action]
        ensure_allowed(permission, role)

        case = self.db.get(Case, case_id)
        if case is None:
            raise CaseNotFound("Case not found")

        # Optimistic lock
        if case.row_version != expected_row_version:
            raise VersionConflict(f"Expected row_version={expected_row_version}, actual={case.row_version}")

        if case.status != CaseStatus.active.value:
            raise CaseTransitionNotAllowed(f"Action '{action}' is not allowed from status '{case.status}'")

        case.status = to_status.value
        case.closed_at = _now()
        case.updated_at = _now()
        case.row_version += 1

        self.db.commit()
        self.db.refresh(case)

        log_event(
            logger,
            "Case closed",
            case_id=str(case.id),
            to_status=case.status,
            actor_user_id=str(actor_user_id),
        )
        return case
