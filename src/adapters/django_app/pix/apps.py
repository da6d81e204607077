"""
Configuração do Django App PIX.
"""

from django.apps import AppConfig


class PixConfig(AppConfig):
    """Configuração do app de chaves PIX."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.pix'
    label = 'pix'
    verbose_name = 'Chaves PIX'
