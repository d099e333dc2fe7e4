# backend/wsgi.py
"""
WSGI config for backend project.
Defaults to dev settings unless DJANGO_SETTINGS_MODULE is set externally.

Operational hardening:
- In production you MUST set DJANGO_SETTINGS_MODULE=backend.settings.prod.
- Run with threaded workers (e.g. gunicorn --threads) when clients keep the
  ledger event stream open.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "backend.settings.dev"),
)

application = get_wsgi_application()
