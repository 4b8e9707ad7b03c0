"""
WSGI config for tournamentsuk project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tournamentsuk.settings")

application = get_wsgi_application()
