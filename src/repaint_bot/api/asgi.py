"""ASGI entrypoint for the repaint bot API."""

from repaint_bot.api.app import create_app
from repaint_bot.containers import build_container

app = create_app(build_container())
