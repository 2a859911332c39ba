# caseguard/pipeline/plugin.py
from __future__ import annotations

from typing import TypeVar

from caseguard.pipeline.context import TARGET, ExecutionContext, PendingRecord, ServiceProvider, TracingService
from caseguard.services.case_guard import (
    ActiveCaseExists,
    CaseUniquenessGuard,
    HostConfigurationError,
    resolve_customer_ref,
)
from caseguard.services.record_store import RecordStoreFactory

T = TypeVar("T")


def validate_and_retrieve(provider: ServiceProvider, service_type: type[T], service_name: str) -> T:
    service = provider.get_service(service_type)
    if service is None:
        raise HostConfigurationError(f"{service_name} unavailable")
    if not isinstance(service, service_type):
        raise HostConfigurationError(f"{service_name} is not of the expected type")
    return service


def compose(provider: ServiceProvider) -> tuple[ExecutionContext, TracingService, CaseUniquenessGuard]:
    """Validate the provider once and wire the guard to a caller-scoped record store."""
    context = validate_and_retrieve(provider, ExecutionContext, "Plugin execution context")
    tracing = validate_and_retrieve(provider, TracingService, "Tracing service")
    factory = validate_and_retrieve(provider, RecordStoreFactory, "Record store factory")

    store = factory.create_record_store(context.user_id, context.role)
    return context, tracing, CaseUniquenessGuard(store)


def validate_target(context: ExecutionContext) -> PendingRecord:
    target = context.input_parameters.get(TARGET)
    if not isinstance(target, PendingRecord):
        raise HostConfigurationError("Target entity is missing or invalid")
    return target


class CaseValidatorPlugin:
    """Pre-operation plugin on case Create: blocks a second active case for a customer."""

    def execute(self, provider: ServiceProvider) -> None:
        context, tracing, guard = compose(provider)

        tracing.trace("Plugin execution started", case_id=str(context.primary_entity_id))

        try:
            target = validate_target(context)
            ref = resolve_customer_ref(target)

            tracing.trace("Checking active cases for customer", customer_id=str(ref.id))

            if guard.has_active_case(ref.id):
                tracing.trace("Active case found for customer. Blocking case creation", customer_id=str(ref.id))
                raise ActiveCaseExists(ref.id)

            tracing.trace("No active cases found. Case creation allowed", customer_id=str(ref.id))
        except Exception as e:
            tracing.trace("Error occurred", level="ERROR", error=str(e), error_type=type(e).__name__)
            raise
