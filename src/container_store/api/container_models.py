"""Pydantic models for container API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from container_store.domain.models import Container, ContainerKey


class ContainerKeyPayload(BaseModel):
    """Composite key payload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    container_type: str = Field(alias="containerType")


class ContainerPayload(BaseModel):
    """Container record payload."""

    key: ContainerKeyPayload
    name: str
    size: float
    unit: str

    def to_domain(self) -> Container:
        """Convert the payload into a domain container."""
        return Container(
            key=ContainerKey(id=self.key.id, container_type=self.key.container_type),
            name=self.name,
            size=self.size,
            unit=self.unit,
        )

    @classmethod
    def from_domain(cls, container: Container) -> "ContainerPayload":
        """Build a payload from a domain container."""
        return cls(
            key=ContainerKeyPayload(
                id=container.key.id, container_type=container.key.container_type
            ),
            name=container.name,
            size=container.size,
            unit=container.unit,
        )
