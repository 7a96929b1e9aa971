"""ASGI entrypoint for the MyMealMigo site API."""

from mealmigo_site.api.app import create_app
from mealmigo_site.containers import build_container

app = create_app(build_container())
