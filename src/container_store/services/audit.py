"""Audit event sinks."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from container_store.domain.audit import AuditEvent, AuditPhase


class AuditEventSink(Protocol):
    """Receives audit events emitted around store operations."""

    def emit(self, event: AuditEvent) -> None:
        """Handle an audit event."""


@dataclass
class LoggingAuditSink(AuditEventSink):
    """Writes audit events as structured log lines.

    Logging faults are discarded so they never reach the store caller.
    """

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(__name__)
    )

    def emit(self, event: AuditEvent) -> None:
        """Log a BEGIN or END event."""
        try:
            if event.phase is AuditPhase.BEGIN:
                self._log_begin(event)
            else:
                self._log_end(event)
        except Exception:  # noqa: BLE001, S110
            pass

    def _log_begin(self, event: AuditEvent) -> None:
        self.logger.info(
            "Starting to perform %s operation on collection %s with transactionId %s",
            event.operation.name,
            event.collection_name,
            event.transaction_id,
            extra={
                "operation": event.operation.name,
                "collection": event.collection_name,
                "transaction_id": event.transaction_id,
            },
        )

    def _log_end(self, event: AuditEvent) -> None:
        elapsed_ms = (
            event.elapsed.total_seconds() * 1000 if event.elapsed is not None else None
        )
        self.logger.info(
            "Completed %s operation on collection %s with transactionId %s "
            "time taken %s",
            event.operation.name,
            event.collection_name,
            event.transaction_id,
            _format_elapsed(elapsed_ms),
            extra={
                "operation": event.operation.name,
                "collection": event.collection_name,
                "transaction_id": event.transaction_id,
                "elapsed_ms": elapsed_ms,
            },
        )


def _format_elapsed(elapsed_ms: float | None) -> str:
    if elapsed_ms is None:
        return "unknown"
    return f"{elapsed_ms:.3f} ms"
