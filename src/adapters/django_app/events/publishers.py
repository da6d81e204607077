"""
Event Publishers - Publicadores de Eventos de Domínio.

Implementações do port ``EventPublisher``:
- LoggingEventPublisher: loga e executa handlers locais (modo sync)
- CeleryEventPublisher: envia para o roteador Celery (modo celery)
- InMemoryEventPublisher: guarda eventos para asserções em testes

Selecionados por ``EVENT_PUBLISHER_MODE`` via ``get_event_publisher``.
"""

from typing import Callable, Dict, List
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class _HandlersLocais:
    """Registro de handlers síncronos por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable[[DomainEvent], None]]] = {}

    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None]
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            handler(event)


class LoggingEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher que loga eventos.

    Usado em desenvolvimento e no modo ``sync``: não exige broker.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event._get_event_data(), default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o roteador Celery.

    Falhas do broker propagam; o Unit of Work registra e segue, pois
    o evento já está gravado no Event Store.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        from src.adapters.django_app.events.handlers import dispatch_domain_event

        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        dispatch_domain_event.delay(event.event_type, event.to_dict())


class InMemoryEventPublisher(_HandlersLocais, EventPublisher):
    """Publisher em memória para testes."""

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "sync" (log) ou "celery"; vazio equivale a "sync"

    Raises:
        ValueError: Se modo desconhecido
    """
    if mode == "celery":
        return CeleryEventPublisher()
    if mode in (None, "", "sync"):
        return LoggingEventPublisher()
    raise ValueError(f"EVENT_PUBLISHER_MODE inválido: {mode}")
