"""
Configurações globais do Pytest para o Gerenciador de Chaves PIX.

Este arquivo é carregado automaticamente pelo pytest e:
- configura Django com SQLite em memória (pytest-django cria o
  banco de teste e aplica as migrations)
- registra markers
- fornece fixtures compartilhadas
"""

import pytest
from pathlib import Path


def pytest_configure(config):
    """Configura Django antes da coleta dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'src.adapters.django_app.pix',
            ],
            ROOT_URLCONF='src.config.urls',
            MIDDLEWARE=[],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
            PIX_LIMITE_CHAVES_POR_CONTA=5,
            EVENT_PUBLISHER_MODE='sync',
        )
        django.setup()

    config.addinivalue_line(
        "markers", "integration: testes que exigem PostgreSQL (--run-integration)"
    )


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="Integration tests require PostgreSQL")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip_integration)


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_di_container():
    """Descarta o container global entre testes."""
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()
