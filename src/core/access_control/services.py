"""
Serviços do Domínio de Controle de Acesso.
"""

import logging

from src.core.shared.exceptions import ConflictError

from .entities import HierarchicalRole, Role
from .ports import RoleRepository

logger = logging.getLogger(__name__)


class RoleManagementService:
    """
    Resolve o papel persistido correspondente a um nível hierárquico.

    O papel de cada nível é nomeado pelo próprio nível ("Manager",
    "Director"...). Se ainda não existir, é criado com as permissões
    padrão do nível. Deve ser chamado dentro do UnitOfWork do caso
    de uso para que a criação participe da mesma transação.

    Se outra requisição criar o mesmo papel entre a busca e a escrita,
    o store levanta ConflictError e o papel gravado por ela é usado.

    Example:
        service = RoleManagementService(role_repo)
        role = service.get_or_create_role_for_level(HierarchicalRole.SENIOR)
    """

    def __init__(self, role_repo: RoleRepository):
        self.role_repo = role_repo

    def get_or_create_role_for_level(self, level: HierarchicalRole) -> Role:
        role = self.role_repo.get_by_name(level.value)
        if role is not None:
            return role

        role = Role.for_level(level)
        try:
            self.role_repo.add(role)
        except ConflictError:
            existing = self.role_repo.get_by_name(level.value)
            if existing is None:
                raise
            logger.info(f"Role for level {level.value} created concurrently, reusing {existing.id}")
            return existing
        logger.info(f"Role created for level {level.value}: {role.id}")
        return role

    def get_or_create_role_by_job_title_level(self, hierarchy_level: int) -> Role:
        return self.get_or_create_role_for_level(
            HierarchicalRole.from_job_title_level(hierarchy_level)
        )
