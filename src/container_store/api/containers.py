"""Container REST endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, status

from container_store.api.container_models import ContainerPayload

if TYPE_CHECKING:
    from container_store.containers import AppContainer

router = APIRouter(prefix="/rest/container", tags=["containers"])


@router.post(
    "/", status_code=status.HTTP_201_CREATED, response_model=ContainerPayload
)
def add_container(payload: ContainerPayload, request: Request) -> ContainerPayload:
    """Store a container and return the stored record."""
    container: AppContainer = request.app.state.container
    stored = container.container_service.create(payload.to_domain())
    return ContainerPayload.from_domain(stored)


@router.get("/", response_model=ContainerPayload)
def find_container(
    request: Request,
    container_id: str = Query(alias="id"),
    container_type: str = Query(alias="containerType"),
) -> ContainerPayload:
    """Return the container for an id and type."""
    container: AppContainer = request.app.state.container
    found = container.container_service.get(container_id, container_type)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found"
        )
    return ContainerPayload.from_domain(found)
