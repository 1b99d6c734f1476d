"""
Ports (Interfaces) do Domínio de Controle de Acesso.

Define o contrato de persistência de papéis e sua implementação
em memória para testes.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import ConflictError

from .entities import Role


@runtime_checkable
class RoleRepository(Protocol):
    """
    Interface para persistência de papéis.

    Implementações:
    - DjangoRoleRepository (ORM)
    - InMemoryRoleRepository (testes)
    """

    def get_by_id(self, role_id: str) -> Optional[Role]:
        """Busca papel por ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Role]:
        """Busca papel pelo nome (sem diferenciar maiúsculas)."""
        ...

    def add(self, role: Role) -> None:
        """Persiste novo papel (ConflictError se o nome já existir)."""
        ...

    def list_all(self) -> List[Role]:
        """Lista papéis cadastrados."""
        ...


class InMemoryRoleRepository:
    """
    Implementação em memória do RoleRepository.

    Não usar em produção!
    """

    def __init__(self):
        self._roles: Dict[str, Role] = {}

    def get_by_id(self, role_id: str) -> Optional[Role]:
        return self._roles.get(role_id)

    def get_by_name(self, name: str) -> Optional[Role]:
        wanted = name.strip().lower()
        for role in self._roles.values():
            if role.name.lower() == wanted:
                return role
        return None

    def add(self, role: Role) -> None:
        if self.get_by_name(role.name) is not None:
            raise ConflictError(f"Papel {role.name} já existe", field="name")
        self._roles[role.id] = role

    def list_all(self) -> List[Role]:
        return list(self._roles.values())
