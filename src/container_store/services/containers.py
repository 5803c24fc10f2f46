"""Container-related application logic."""

from dataclasses import dataclass
from typing import Protocol

from container_store.domain.models import Container, ContainerKey


class ContainerRepository(Protocol):
    """Persistence interface for container records."""

    def save(self, container: Container) -> Container:
        """Insert or replace a container and return the stored record."""

    def find_by_key(self, key: ContainerKey) -> Container | None:
        """Return the container for a key, if present."""

    def find_all(self) -> list[Container]:
        """Return every stored container."""

    def exists_by_key(self, key: ContainerKey) -> bool:
        """Return whether a container with the key is stored."""

    def delete_by_key(self, key: ContainerKey) -> bool:
        """Delete the container for a key and report whether it existed."""

    def count(self) -> int:
        """Return the number of stored containers."""


@dataclass
class ContainerService:
    """Application service for creating and looking up containers."""

    repository: ContainerRepository

    def create(self, container: Container) -> Container:
        """Persist a container and return the stored record."""
        return self.repository.save(container)

    def get(self, container_id: str, container_type: str) -> Container | None:
        """Return the container identified by id and type, if stored."""
        key = ContainerKey(id=container_id, container_type=container_type)
        return self.repository.find_by_key(key)
