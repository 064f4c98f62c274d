"""
ASGI config for the epimonitor project.

The reporting API is plain HTTP, so the ASGI entrypoint is Django's own
application without any WebSocket routing.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "epimonitor.settings")

application = get_asgi_application()
