"""Shared test fixtures."""

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
from pymongo.results import DeleteResult

from container_store.adapters.audited_document_store import AuditedDocumentStore
from container_store.adapters.document_store import Document, DocumentStore, Query
from container_store.adapters.mongo_container_repository import (
    MongoContainerRepository,
)
from container_store.config import Settings
from container_store.containers import AppContainer
from container_store.domain.audit import AuditEvent, AuditPhase
from container_store.services.audit import AuditEventSink
from container_store.services.containers import ContainerService


@dataclass
class RecordingAuditSink(AuditEventSink):
    """Audit sink that keeps every event in memory."""

    events: list[AuditEvent] = field(default_factory=list)

    def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

    def phases(self) -> list[AuditPhase]:
        return [event.phase for event in self.events]


@dataclass
class FailingAuditSink(AuditEventSink):
    """Audit sink that raises on the configured phases."""

    failing_phases: set[AuditPhase] = field(
        default_factory=lambda: {AuditPhase.BEGIN, AuditPhase.END}
    )
    attempts: list[AuditPhase] = field(default_factory=list)

    def emit(self, event: AuditEvent) -> None:
        self.attempts.append(event.phase)
        if event.phase in self.failing_phases:
            raise RuntimeError(f"sink down during {event.phase.name}")


class CannedDocumentStore:
    """Fake store that records calls and returns canned results per operation."""

    def __init__(
        self,
        results: dict[str, object] | None = None,
        delay_seconds: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.results = results or {}
        self.delay_seconds = delay_seconds
        self.error = error
        self.calls: list[tuple[str, tuple[object, ...], dict[str, object]]] = []

    def __getattr__(self, name: str) -> Callable[..., object]:
        if name.startswith("_"):
            raise AttributeError(name)

        def operation(*args: object, **kwargs: object) -> object:
            self.calls.append((name, args, kwargs))
            if self.delay_seconds:
                time.sleep(self.delay_seconds)
            if self.error is not None:
                raise self.error
            return self.results.get(name)

        return operation


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """Dict-backed document store supporting the repository's operations."""

    collections: dict[str, list[Document]] = field(default_factory=dict)
    error: Exception | None = None

    def _collection(self, collection_name: str) -> list[Document]:
        if self.error is not None:
            raise self.error
        return self.collections.setdefault(collection_name, [])

    @staticmethod
    def _matches(document: Document, query: Query) -> bool:
        return all(document.get(name) == value for name, value in query.items())

    def find_one(
        self, collection_name: str, query: Query, projection: Query | None = None
    ) -> Document | None:
        for document in self._collection(collection_name):
            if self._matches(document, query):
                return dict(document)
        return None

    def find_all(self, collection_name: str) -> list[Document]:
        return [dict(document) for document in self._collection(collection_name)]

    def save(self, collection_name: str, document: Mapping[str, Any]) -> Document:
        collection = self._collection(collection_name)
        payload = dict(document)
        for index, existing in enumerate(collection):
            if existing["_id"] == payload["_id"]:
                collection[index] = payload
                return dict(payload)
        collection.append(payload)
        return dict(payload)

    def insert_batch(
        self, collection_name: str, documents: Iterable[Mapping[str, Any]]
    ) -> list[Document]:
        return [self.save(collection_name, document) for document in documents]

    def remove(
        self, collection_name: str, query: Query, multi: bool = True
    ) -> DeleteResult:
        collection = self._collection(collection_name)
        kept: list[Document] = []
        removed = 0
        for document in collection:
            if self._matches(document, query) and (multi or removed == 0):
                removed += 1
                continue
            kept.append(document)
        collection[:] = kept
        return DeleteResult({"n": removed}, acknowledged=True)

    def count(self, collection_name: str, query: Query | None = None) -> int:
        return sum(
            1
            for document in self._collection(collection_name)
            if self._matches(document, query or {})
        )

    def exists(self, collection_name: str, query: Query) -> bool:
        return self.find_one(collection_name, query) is not None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        mongo_database="test-db",
    )


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def raw_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def container(
    settings: Settings,
    audit_sink: RecordingAuditSink,
    raw_store: InMemoryDocumentStore,
) -> AppContainer:
    document_store = AuditedDocumentStore(store=raw_store, sink=audit_sink)
    repository = MongoContainerRepository(
        store=document_store,
        collection_name=settings.container_collection,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        audit_sink=audit_sink,
        document_store=document_store,
        container_service=ContainerService(repository),
        close_resources=close_resources,
    )
