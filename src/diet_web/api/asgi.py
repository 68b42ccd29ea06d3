"""ASGI entrypoint for the diet web app."""

from diet_web.api.app import create_app
from diet_web.containers import build_container

app = create_app(build_container())
