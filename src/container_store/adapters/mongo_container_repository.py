"""MongoDB-backed container repository."""

from dataclasses import dataclass
from typing import Any

from container_store.adapters.document_store import Document, DocumentStore
from container_store.domain.models import Container, ContainerKey
from container_store.services.containers import ContainerRepository


@dataclass
class MongoContainerRepository(ContainerRepository):
    """Container repository that reads and writes through a document store."""

    store: DocumentStore
    collection_name: str = "container"

    def save(self, container: Container) -> Container:
        """Upsert the container keyed by its composite key."""
        stored = self.store.save(self.collection_name, container_to_document(container))
        return document_to_container(stored)

    def find_by_key(self, key: ContainerKey) -> Container | None:
        """Return the container for the key, if present."""
        document = self.store.find_one(
            self.collection_name, {"_id": key_to_document(key)}
        )
        if document is None:
            return None
        return document_to_container(document)

    def find_all(self) -> list[Container]:
        """Return every stored container."""
        return [
            document_to_container(document)
            for document in self.store.find_all(self.collection_name)
        ]

    def exists_by_key(self, key: ContainerKey) -> bool:
        """Return whether the key is stored."""
        return self.store.exists(self.collection_name, {"_id": key_to_document(key)})

    def delete_by_key(self, key: ContainerKey) -> bool:
        """Delete the container for the key."""
        result = self.store.remove(
            self.collection_name, {"_id": key_to_document(key)}, multi=False
        )
        return result.deleted_count > 0

    def count(self) -> int:
        """Return the number of stored containers."""
        return self.store.count(self.collection_name)


def key_to_document(key: ContainerKey) -> dict[str, str]:
    """Render a key as the ``_id`` sub-document.

    MongoDB matches embedded documents by field order, so ``id`` must stay
    first.
    """
    return {"id": key.id, "containerType": key.container_type}


def container_to_document(container: Container) -> Document:
    """Render a container as a MongoDB document."""
    return {
        "_id": key_to_document(container.key),
        "name": container.name,
        "size": container.size,
        "unit": container.unit,
    }


def document_to_container(document: dict[str, Any]) -> Container:
    """Build a container from a stored document."""
    raw_key = document.get("_id")
    if not isinstance(raw_key, dict):
        raise ValueError(f"Container document has no composite key: {raw_key!r}")
    try:
        key = ContainerKey(id=raw_key["id"], container_type=raw_key["containerType"])
        return Container(
            key=key,
            name=document["name"],
            size=float(document.get("size", 0.0)),
            unit=document.get("unit", ""),
        )
    except KeyError as exc:
        raise ValueError(f"Container document is missing field {exc}") from exc
