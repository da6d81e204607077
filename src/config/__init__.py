"""
Configuração do Gerenciador de Chaves PIX.

Módulos:
- settings: Configurações Django
- urls: Rotas principais
- wsgi: WSGI application
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
"""

# App Celery carregado junto com o Django para que @shared_task o use
from .celery import app as celery_app

__all__ = ('celery_app',)
