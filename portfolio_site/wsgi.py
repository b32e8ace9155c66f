"""
WSGI entry point for the portfolio API.

Gunicorn/uWSGI should point at ``portfolio_site.wsgi:application``.
"""

import os

from django.core.wsgi import get_wsgi_application

# Hosting dashboards tend to leave trailing whitespace in env values
os.environ["DJANGO_SETTINGS_MODULE"] = (
    os.environ.get("DJANGO_SETTINGS_MODULE") or "portfolio_site.settings"
).strip()

application = get_wsgi_application()
