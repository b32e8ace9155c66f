"""
ASGI entry point for the portfolio API (``portfolio_site.asgi:application``).
"""

import os

from django.core.asgi import get_asgi_application

os.environ["DJANGO_SETTINGS_MODULE"] = (
    os.environ.get("DJANGO_SETTINGS_MODULE") or "portfolio_site.settings"
).strip()

application = get_asgi_application()
