"""ASGI entrypoint for the container store API."""

from container_store.api.app import create_app
from container_store.containers import build_container

app = create_app(build_container())
