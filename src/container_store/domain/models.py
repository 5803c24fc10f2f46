"""Domain models for stored containers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContainerKey:
    """Composite primary key of a container record."""

    id: str
    container_type: str


@dataclass
class Container:
    """Represents a container stored in the document database."""

    key: ContainerKey
    name: str
    size: float
    unit: str
