"""
WSGI config do Gerenciador de Chaves PIX.

Uso:
    gunicorn src.config.wsgi:application
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

application = get_wsgi_application()
