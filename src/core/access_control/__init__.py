"""
Domínio de Controle de Acesso.

Escala hierárquica, papéis e o predicado "igual ou inferior".
"""

from .entities import HierarchicalRole, Role, can_create_role, default_permissions_for
from .ports import RoleRepository, InMemoryRoleRepository
from .services import RoleManagementService

__all__ = [
    "HierarchicalRole",
    "Role",
    "can_create_role",
    "default_permissions_for",
    "RoleRepository",
    "InMemoryRoleRepository",
    "RoleManagementService",
]
