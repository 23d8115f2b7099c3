"""WSGI config for the LightEvent project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "lightevent.settings")

application = get_wsgi_application()
