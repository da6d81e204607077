"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Driven ports compartilhados por todos os domínios:
- UnitOfWork: fronteira transacional das operações de escrita
- EventPublisher: entrega de eventos após o commit
- EventStore: histórico persistido de eventos

Os repositórios de cada domínio ficam no ``ports.py`` do próprio
domínio (ex: ``src.core.pix.ports.ChavePixRepository``).
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            repo.count_ativas_by_conta_for_update(agencia, conta)
            repo.save(chave)
            uow.publish_event(ChavePixCriadaEvent(...))
        # commit ao sair sem erro, rollback se exceção

    Eventos enfileirados com ``publish_event`` só são entregues depois
    de um commit bem-sucedido; em rollback são descartados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem: grava eventos no store, confirma a transação,
        publica os eventos, limpa a fila.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos pendentes."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento para publicação após commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna cópia dos eventos pendentes."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações: log síncrono, tasks Celery ou memória (testes).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica eventos em ordem; implementações podem otimizar."""
        for event in events:
            self.publish(event)


class EventStore(ABC):
    """
    Interface para persistência do histórico de eventos.

    Os eventos são gravados dentro da mesma transação da operação que
    os gerou, de modo que o histórico nunca registra uma mudança que
    sofreu rollback.
    """

    @abstractmethod
    def append(self, event: DomainEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str) -> List[dict]:
        """
        Recupera eventos de um agregado.

        Returns:
            Lista de eventos serializados (formato de ``DomainEvent.to_dict``)
            em ordem de ocorrência
        """
        raise NotImplementedError
