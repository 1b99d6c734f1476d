"""
Domain Events - Fatos relevantes ocorridos no domínio.

Este módulo define a infraestrutura base para Domain Events,
permitindo comunicação desacoplada entre o core e os adapters.

Características:
- Auto-geração de ID e timestamp (UTC)
- Serializáveis para logging/transporte
- Rastreáveis via aggregate_id

Eventos são enfileirados no UnitOfWork e publicados apenas após commit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Um Domain Event representa algo significativo que aconteceu
    no domínio. É nomeado no passado (EmployeeCreated, não CreateEmployee).

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class EmployeeCreatedEvent(DomainEvent):
            email: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Employee"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=_utcnow)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou este evento (ex: "Employee")."""
        ...

    @property
    def event_type(self) -> str:
        """Tipo do evento (nome da classe)."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Returns:
            Dicionário com dados do evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Dados específicos do evento (campos das subclasses)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
