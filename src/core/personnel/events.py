"""
Domain Events do Domínio de Pessoal.

Eventos:
- EmployeeCreatedEvent: Colaborador e conta cadastrados
- EmployeeUpdatedEvent: Dados do colaborador alterados
- EmployeeDeactivatedEvent: Colaborador desligado (exclusão lógica)
- PasswordChangedEvent: Senha trocada (carimbo rotacionado)
- AccountLockedOutEvent: Conta bloqueada por tentativas com falha

Nenhum evento carrega senha ou hash.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class EmployeeCreatedEvent(DomainEvent):
    """
    Evento: Colaborador foi cadastrado junto com sua conta.

    Attributes:
        user_account_id: Conta criada
        email: E-mail normalizado
        role: Nome do papel atribuído
        created_by_id: Conta do ator
    """

    user_account_id: str = ""
    email: str = ""
    role: str = ""
    created_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Employee"


@dataclass
class EmployeeUpdatedEvent(DomainEvent):
    """
    Evento: Colaborador foi alterado.

    Attributes:
        updated_by_id: Conta do ator
        phones_added: Telefones (E.164) adicionados
        phones_removed: Telefones (E.164) removidos
        password_reset: Se a senha da conta foi redefinida
    """

    updated_by_id: str = ""
    phones_added: List[str] = field(default_factory=list)
    phones_removed: List[str] = field(default_factory=list)
    password_reset: bool = False

    @property
    def aggregate_type(self) -> str:
        return "Employee"


@dataclass
class EmployeeDeactivatedEvent(DomainEvent):
    deactivated_by_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Employee"


@dataclass
class PasswordChangedEvent(DomainEvent):
    """Senha da conta trocada pelo próprio usuário."""

    @property
    def aggregate_type(self) -> str:
        return "UserAccount"


@dataclass
class AccountLockedOutEvent(DomainEvent):
    lockout_end: Optional[datetime] = None

    @property
    def aggregate_type(self) -> str:
        return "UserAccount"

    def _get_event_data(self):
        return {
            "lockout_end": self.lockout_end.isoformat() if self.lockout_end else None,
        }
