"""ASGI entrypoint for the diet marketplace API."""

from diet_marketplace.api.app import create_app
from diet_marketplace.containers import build_container

app = create_app(build_container())
