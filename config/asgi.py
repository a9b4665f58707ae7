# config/asgi.py
"""
ASGI config for the interview platform.

Serves the HTTP API only; notification delivery runs in Celery workers.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
