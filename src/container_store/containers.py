"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pymongo import MongoClient

from container_store.adapters.audited_document_store import AuditedDocumentStore
from container_store.adapters.document_store import (
    DocumentStore,
    PymongoDocumentStore,
)
from container_store.adapters.mongo_container_repository import (
    MongoContainerRepository,
)
from container_store.config import Settings, mongo_client_options
from container_store.services.audit import AuditEventSink, LoggingAuditSink
from container_store.services.containers import ContainerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    audit_sink: AuditEventSink
    document_store: DocumentStore
    container_service: ContainerService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    mongo_client: MongoClient = MongoClient(
        resolved_settings.mongo_uri, **mongo_client_options(resolved_settings)
    )
    audit_sink = LoggingAuditSink()
    document_store = AuditedDocumentStore(
        store=PymongoDocumentStore(mongo_client[resolved_settings.mongo_database]),
        sink=audit_sink,
    )
    container_repository = MongoContainerRepository(
        store=document_store,
        collection_name=resolved_settings.container_collection,
    )
    container_service = ContainerService(container_repository)

    async def close_resources() -> None:
        mongo_client.close()

    return AppContainer(
        settings=resolved_settings,
        audit_sink=audit_sink,
        document_store=document_store,
        container_service=container_service,
        close_resources=close_resources,
    )
