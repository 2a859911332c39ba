# caseguard/services/case_guard.py
from __future__ import annotations

from uuid import UUID

from caseguard.models.customer import CustomerKind, CustomerRef
from caseguard.pipeline.context import CUSTOMER_ATTR, PendingRecord
from caseguard.services.record_store import RecordStore


class PluginExecutionError(Exception):
    """Aborts a create. str(exc) goes back to the caller unchanged."""
    pass


class HostConfigurationError(PluginExecutionError):
    """A required service or the execution context is missing or has the wrong type."""
    pass


class InvalidCustomerReference(PluginExecutionError):
    """Pending case has no usable customer reference (data integrity, not the business rule)."""
    pass


class ActiveCaseExists(PluginExecutionError):
    MESSAGE = "Cannot create Case. This Customer is linked to another Active Case"

    def __init__(self, customer_id: UUID | None = None):
        super().__init__(self.MESSAGE)
        self.customer_id = customer_id


INVALID_CUSTOMER_MESSAGE = "Customer ID is missing or invalid"


def resolve_customer_ref(record: PendingRecord) -> CustomerRef:
    ref = record.get(CUSTOMER_ATTR)
    if not isinstance(ref, CustomerRef):
        raise InvalidCustomerReference(INVALID_CUSTOMER_MESSAGE)
    if not isinstance(ref.kind, CustomerKind) or not isinstance(ref.id, UUID):
        raise InvalidCustomerReference(INVALID_CUSTOMER_MESSAGE)
    return ref


class CaseUniquenessGuard:
    """
    One active case per customer, checked before a case is created.

    Per call: extract reference -> query (LIMIT 1) -> decide.
    Stateless; never writes and never mutates the pending record.

    The check and the later commit are not atomic: two concurrent creates can
    both pass here. The partial unique index on cases(customer_id) WHERE
    status='active' catches the loser at commit time (see CaseService).
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def has_active_case(self, customer_id: UUID) -> bool:
        return len(self.store.find_active_cases(customer_id, limit=1)) > 0

    def check(self, record: PendingRecord) -> CustomerRef:
        ref = resolve_customer_ref(record)

        if self.has_active_case(ref.id):
            raise ActiveCaseExists(ref.id)

        return ref
