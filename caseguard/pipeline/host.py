# caseguard/pipeline/host.py
from __future__ import annotations

from typing import Protocol, Sequence
from uuid import UUID

from caseguard.pipeline.context import TARGET, ExecutionContext, PendingRecord, ServiceProvider, TracingService
from caseguard.services.record_store import RecordStoreFactory


class PreOperationPlugin(Protocol):
    def execute(self, provider: ServiceProvider) -> None: ...


class CreatePipeline:
    """
    Runs pre-operation plugins for a pending record.

    Any plugin exception aborts the create: it propagates to the caller and
    nothing is written. Persisting the record is the caller's job.
    """

    MESSAGE = "Create"

    def __init__(self, store_factory: RecordStoreFactory, plugins: Sequence[PreOperationPlugin] = ()):
        self.store_factory = store_factory
        self.plugins = list(plugins)

    def build_provider(self, record: PendingRecord, *, user_id: UUID, role: str) -> ServiceProvider:
        context = ExecutionContext(
            message_name=self.MESSAGE,
            primary_entity_name=record.logical_name,
            primary_entity_id=record.id,
            user_id=user_id,
            role=role,
            input_parameters={TARGET: record},
        )
        tracing = TracingService(
            operation=self.MESSAGE,
            entity=record.logical_name,
            record_id=str(record.id),
            user_id=str(user_id),
        )
        return (
            ServiceProvider()
            .register(ExecutionContext, context)
            .register(TracingService, tracing)
            .register(RecordStoreFactory, self.store_factory)
        )

    def run_pre_operation(self, record: PendingRecord, *, user_id: UUID, role: str) -> None:
        provider = self.build_provider(record, user_id=user_id, role=role)
        for plugin in self.plugins:
            plugin.execute(provider)
