"""
Fixtures compartilhadas dos testes de adapters Django.

O Django já é configurado no conftest raiz (SQLite em memória);
testes que tocam o banco usam ``@pytest.mark.django_db``.
"""

import pytest
from datetime import datetime, timezone


@pytest.fixture
def chave_factory():
    """Factory de ChavePixEntity com dados válidos por padrão."""
    from src.core.pix.entities import ChavePixEntity, TipoChave, TipoConta

    def criar(**kwargs):
        dados = {
            'tipo_chave': TipoChave.CPF,
            'valor_chave': '12345678909',
            'tipo_conta': TipoConta.CORRENTE,
            'numero_agencia': 1,
            'numero_conta': 100,
            'nome_correntista': 'Maria',
        }
        dados.update(kwargs)
        return ChavePixEntity(**dados)

    return criar


@pytest.fixture
def django_repo():
    from src.adapters.django_app.pix.repositories import DjangoChavePixRepository
    return DjangoChavePixRepository()


@pytest.fixture
def event_store():
    from src.adapters.django_app.pix.repositories import DjangoEventStore
    return DjangoEventStore()


@pytest.fixture
def event_publisher():
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    return InMemoryEventPublisher()


@pytest.fixture
def evento_criacao():
    """Factory de ChavePixCriadaEvent para um agregado."""
    from src.core.pix.events import ChavePixCriadaEvent

    def criar(aggregate_id='chave-1', **kwargs):
        dados = {
            'tipo_chave': 'cpf',
            'tipo_conta': 'corrente',
            'numero_agencia': 1,
            'numero_conta': 100,
        }
        dados.update(kwargs)
        return ChavePixCriadaEvent(aggregate_id=aggregate_id, **dados)

    return criar


@pytest.fixture
def dia_referencia():
    return datetime(2024, 3, 11, 12, 0, tzinfo=timezone.utc)
