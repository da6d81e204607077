"""
Dependency Injection Container.

Configura e gerencia as dependências da aplicação com
dependency-injector.

Padrões:
- Singleton: Uma instância para toda app (repositórios, publisher)
- Factory: Nova instância por chamada (services, UoW)

Imports tardios (``_lazy``) evitam carregar models Django antes de
``django.setup()``.
"""

from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers


def _lazy(caminho: str):
    """Callable que importa ``modulo.Nome`` somente quando invocado."""
    modulo, nome = caminho.rsplit('.', 1)

    def construir(*args, **kwargs):
        return getattr(import_module(modulo), nome)(*args, **kwargs)

    return construir


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings/variáveis de ambiente
    - Infrastructure: publisher e event store
    - Repositories: Record Store de chaves
    - Unit of Work: transações
    - Services: Use Cases

    Example:
        container = Container()
        container.config.from_dict({'limite_chaves_por_conta': 5})

        service = container.criar_chave_pix_service()
        output = service.execute(input_dto)
    """

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy('src.adapters.django_app.events.publishers.get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    event_store = providers.Singleton(
        _lazy('src.adapters.django_app.pix.repositories.DjangoEventStore'),
    )

    # =========================================================================
    # Repositories
    # =========================================================================

    chave_repository = providers.Singleton(
        _lazy('src.adapters.django_app.pix.repositories.DjangoChavePixRepository'),
    )

    # =========================================================================
    # Unit of Work (nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work.DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Services / Use Cases
    # =========================================================================

    criar_chave_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.CriarChavePixService'),
        chave_repo=chave_repository,
        uow=unit_of_work,
        limite_chaves=config.limite_chaves_por_conta,
    )

    alterar_chave_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.AlterarChavePixService'),
        chave_repo=chave_repository,
        uow=unit_of_work,
    )

    inativar_chave_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.InativarChavePixService'),
        chave_repo=chave_repository,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    obter_chave_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.ObterChavePixService'),
        chave_repo=chave_repository,
    )

    buscar_chaves_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.BuscarChavesPixService'),
        chave_repo=chave_repository,
    )

    resumo_conta_chaves_pix_service = providers.Factory(
        _lazy('src.core.pix.use_cases.ResumoContaChavesPixService'),
        chave_repo=chave_repository,
        limite_chaves=config.limite_chaves_por_conta,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container, configurada a partir
    dos settings do Django.
    """
    global _container

    if _container is None:
        from django.conf import settings

        _container = Container()
        _container.config.from_dict({
            'limite_chaves_por_conta': getattr(settings, 'PIX_LIMITE_CHAVES_POR_CONTA', 5),
            'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        })

    return _container


def reset_container() -> None:
    """Descarta o container global (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def create_testing_container(limite_chaves_por_conta: int = 5) -> Container:
    """
    Container com implementações em memória.

    Repositório, Unit of Work e publisher são substituídos via
    ``override``; os services continuam os mesmos de produção.

    Example:
        container = create_testing_container()
        container.criar_chave_pix_service().execute(input_dto)
        container.event_publisher().published_events
    """
    container = Container()
    container.config.from_dict({
        'limite_chaves_por_conta': limite_chaves_por_conta,
        'event_publisher_mode': 'sync',
    })

    container.chave_repository.override(
        providers.Singleton(_lazy('src.core.pix.ports.InMemoryChavePixRepository'))
    )
    container.event_publisher.override(
        providers.Singleton(
            _lazy('src.adapters.django_app.events.publishers.InMemoryEventPublisher')
        )
    )
    container.unit_of_work.override(
        providers.Factory(
            _lazy('src.adapters.django_app.shared.unit_of_work.InMemoryUnitOfWork'),
            event_publisher=container.event_publisher,
        )
    )

    return container
