"""
ASGI config for the trip diary project.
"""

import os
from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'diary.settings')

application = get_asgi_application()
