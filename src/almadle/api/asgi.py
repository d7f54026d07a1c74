"""ASGI entrypoint for the Almadle API."""

from almadle.api.app import create_app
from almadle.containers import build_container

app = create_app(build_container())
