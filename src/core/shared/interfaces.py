"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Este módulo define as interfaces transversais que os Adapters devem
implementar. Os ports específicos de cada domínio (stores de
colaboradores, contas, departamentos...) vivem em `<domínio>/ports.py`.

Tipos de Ports:
- UnitOfWork: fronteira transacional de um caso de uso
- EventPublisher: entrega de eventos após commit

Princípio: Core define interfaces; Adapters implementam.
O fluxo de dependência sempre aponta para o Core.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Garante que múltiplas operações de persistência sejam
    executadas como uma única unidade: ou todas são persistidas
    ou nenhuma é. Um colaborador nunca é gravado sem sua conta.

    Pattern: Context Manager
        with uow:
            employee_repo.add(employee)
            account_repo.add(account)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Responsabilidades:
    - Gerenciar início/fim de transação
    - Commit/Rollback coordenado
    - Enfileirar eventos para publicação pós-commit
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        """
        Inicia contexto de transação.

        Returns:
            Self para permitir uso como context manager
        """
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """
        Finaliza contexto de transação.

        Returns:
            False para propagar exceções
        """
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Note:
            Eventos só são publicados após commit bem-sucedido.
            Se commit falhar, eventos são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Example:
        class LoggingEventPublisher(EventPublisher):
            def publish(self, event):
                logger.info(event.to_dict())
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos em sequência."""
        for event in events:
            self.publish(event)
