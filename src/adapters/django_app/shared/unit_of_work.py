"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios, garantindo
que colaborador e conta sejam gravados juntos ou não sejam gravados.

Responsabilidades:
- Abrir/fechar bloco `transaction.atomic`
- Commit/Rollback coordenado
- Publicar eventos somente após commit bem-sucedido

O bloco atômico funciona também aninhado (savepoint), o que permite
usar o UoW dentro de transações já abertas, como nos testes.
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, UnitOfWork
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Example:
        with DjangoUnitOfWork(event_publisher) as uow:
            employee_repo.add(employee)
            account_repo.add(account)
            uow.publish_event(EmployeeCreatedEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            employee_repo.add(employee)
            raise Exception("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None, using: Optional[str] = None):
        """
        Args:
            event_publisher: Publicador de eventos pós-commit
            using: Alias do banco (padrão: default)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste mudanças e publica eventos.

        Raises:
            Exception: Se commit falhar, re-lança após descartar eventos
        """
        if self._atomic is None:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(None, None, None)
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            self.clear_events()
            raise

        self._committed = True
        logger.debug("Transaction committed")
        self._publish_events()

    def rollback(self) -> None:
        """Desfaz mudanças e descarta eventos."""
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        try:
            transaction.set_rollback(True, using=self._using)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        events: List[DomainEvent] = self.collect_events()
        self.clear_events()
        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            if self._event_publisher:
                self._event_publisher.publish(event)

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada, apenas registra commit/rollback e eventos.

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
        self._published_events.extend(self._events)
        if self._event_publisher:
            self._event_publisher.publish_batch(list(self._events))
        self.clear_events()

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
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
