# caseguard/pipeline/context.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from uuid import UUID, uuid4

from caseguard.core.logging import log_event

"""Execution context handed to pre-operation plugins.

The create pipeline builds one ServiceProvider per attempt and registers:
  ExecutionContext   -> pending record (input parameter "Target") + caller
  TracingService     -> per-attempt diagnostic trace
  RecordStoreFactory -> record store scoped to the caller
"""

TARGET = "Target"
CASE_ENTITY = "case"

# stable attribute key of the customer reference on a pending case
CUSTOMER_ATTR = "customer"


@dataclass
class PendingRecord:
    """Record about to be created: not yet committed, attributes as a plain bag."""

    logical_name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


@dataclass(frozen=True)
class ExecutionContext:
    message_name: str
    primary_entity_name: str
    primary_entity_id: UUID
    user_id: UUID
    role: str
    input_parameters: Mapping[str, Any] = field(default_factory=dict)


class TracingService:
    """Writes plugin trace lines to the application log, tagged with the attempt."""

    def __init__(self, logger: logging.Logger | None = None, **context: Any):
        self.logger = logger or logging.getLogger("caseguard.trace")
        self.context = context

    def trace(self, message: str, level: str = "INFO", **fields: Any) -> None:
        log_event(self.logger, message, level=level, **{**self.context, **fields})


class ServiceProvider:
    """type -> instance registry; get_service returns None for unknown types."""

    def __init__(self) -> None:
        self._services: dict[type, object] = {}

    def register(self, service_type: type, service: object) -> "ServiceProvider":
        self._services[service_type] = service
        return self

    def get_service(self, service_type: type) -> object | None:
        return self._services.get(service_type)
