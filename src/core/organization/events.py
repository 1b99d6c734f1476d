"""
Domain Events do Domínio Organizacional.

Eventos:
- DepartmentCreatedEvent
- DepartmentUpdatedEvent
- DepartmentDeactivatedEvent
- JobTitleCreatedEvent
- JobTitleUpdatedEvent
"""

from dataclasses import dataclass
from typing import Optional

from src.core.shared.events import DomainEvent


@dataclass
class DepartmentCreatedEvent(DomainEvent):
    """Departamento foi criado."""

    name: str = ""
    created_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Department"


@dataclass
class DepartmentUpdatedEvent(DomainEvent):
    """Nome ou descrição do departamento foram alterados."""

    name: str = ""
    description: Optional[str] = None
    updated_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Department"


@dataclass
class DepartmentDeactivatedEvent(DomainEvent):
    """Departamento foi desativado (exclusão lógica)."""

    deactivated_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Department"


@dataclass
class JobTitleCreatedEvent(DomainEvent):
    """Cargo foi criado."""

    name: str = ""
    hierarchy_level: int = 0
    created_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "JobTitle"


@dataclass
class JobTitleUpdatedEvent(DomainEvent):
    """Cargo foi alterado."""

    name: str = ""
    hierarchy_level: int = 0
    updated_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "JobTitle"
