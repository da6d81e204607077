"""
Unit of Work - Implementação Django.

Gerencia a transação de cada operação de escrita do motor PIX.

Responsabilidades:
- Abrir/fechar um bloco ``transaction.atomic``
- Gravar eventos no Event Store dentro da transação
- Publicar eventos somente após commit bem-sucedido

Aninhamento:
    O bloco atomic vira savepoint quando já existe transação aberta
    (ex: ATOMIC_REQUESTS ou testes), e transação real caso contrário.
"""

from typing import List, Optional
import logging

from django.db import DatabaseError, IntegrityError, transaction

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import RepositoryError, StoreConstraintViolationError
from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Reutilizável: cada ``with uow:`` abre um novo bloco atomic.

    Example:
        with DjangoUnitOfWork(event_publisher, event_store) as uow:
            repo.count_ativas_by_conta_for_update(1, 100)
            repo.save(chave)
            uow.publish_event(ChavePixCriadaEvent(...))
        # commit + eventos publicados

        with DjangoUnitOfWork() as uow:
            repo.save(chave)
            raise DuplicateKeyError("...")
        # rollback, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
        using: Optional[str] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (log, Celery)
            event_store: Store para persistência de eventos
            using: Alias do banco (default: 'default')
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self.clear_events()

        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Persistir eventos no Event Store (dentro da transação)
        2. Commit (ou release do savepoint)
        3. Publicar eventos
        4. Limpar fila

        Raises:
            StoreConstraintViolationError: Restrição violada no commit
            RepositoryError: Falha do banco no commit
        """
        if self._atomic is None:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                for event in self._events:
                    self._event_store.append(event)
        except Exception:
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(None, None, None)
        except IntegrityError as e:
            self.clear_events()
            raise StoreConstraintViolationError(
                "Restrição do banco violada no commit",
                constraint=str(e),
            )
        except DatabaseError as e:
            self.clear_events()
            logger.error(f"Commit failed: {e}")
            raise RepositoryError("Falha ao confirmar transação")

        self._committed = True
        logger.debug("Transaction committed")

        events = self.collect_events()
        self.clear_events()
        self._publish_events(events)

    def rollback(self) -> None:
        """Desfaz a transação (ou volta ao savepoint) e descarta eventos."""
        self.clear_events()

        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        transaction.set_rollback(True, using=self._using)
        atomic.__exit__(None, None, None)

        self._rolled_back = True
        logger.debug("Transaction rolled back")

    def _publish_events(self, events: List[DomainEvent]) -> None:
        """
        Publica eventos após commit.

        Falha de publicação não desfaz a operação já confirmada: o
        evento continua no Event Store para reprocessamento.
        """
        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_id}: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self._committed = True
        events = self.collect_events()
        self.clear_events()

        self._published_events.extend(events)
        if self._event_publisher:
            self._event_publisher.publish_batch(events)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
