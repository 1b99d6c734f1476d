"""
Event Publishers - Publicadores de Eventos de Domínio.

Eventos chegam aqui somente após commit do UnitOfWork.

Implementações:
- LoggingEventPublisher: Loga eventos e despacha para handlers locais
- InMemoryEventPublisher: Armazena eventos para testes
"""

from typing import Callable, Dict, List
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlerRegistry:
    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra handler síncrono para um tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                # Transação já comitada: falha de handler não desfaz a operação
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que loga eventos (JSON) e executa handlers locais.

    Example:
        publisher = LoggingEventPublisher()
        publisher.register_handler("EmployeeCreatedEvent", send_welcome_email)
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict(), default=str)}"
        )
        self._dispatch_to_handlers(event)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory de publisher conforme EVENT_PUBLISHER_MODE.

    Args:
        mode: "logging" (padrão) ou "memory"
    """
    if mode == "memory":
        return InMemoryEventPublisher()
    return LoggingEventPublisher()
