"""Audit event types for document store operations."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class Operation(Enum):
    """Kind of store primitive being audited."""

    EXECUTE = "EXECUTE"
    FETCH = "FETCH"
    SAVE = "SAVE"
    DELETE = "DELETE"
    UPDATE = "UPDATE"
    GROUP = "GROUP"
    AGGREGATE = "AGGREGATE"
    MAP_REDUCE = "MAP_REDUCE"
    FIND_UPDATE = "FIND_UPDATE"
    FIND_REPLACE = "FIND_REPLACE"
    FIND_REMOVE = "FIND_REMOVE"


class AuditPhase(Enum):
    """Whether an event precedes or follows the store call."""

    BEGIN = "BEGIN"
    END = "END"


@dataclass(frozen=True)
class AuditEvent:
    """A single audit notification for one store call.

    ``elapsed`` is only set on END events.
    """

    transaction_id: str
    collection_name: str
    operation: Operation
    phase: AuditPhase
    elapsed: timedelta | None = None
