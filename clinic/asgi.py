"""
ASGI config for the clinic project.

The application is plain request/response HTTP, so the standard Django
ASGI handler is all that is needed.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic.settings")

application = get_asgi_application()
