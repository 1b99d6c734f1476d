"""
Autorização hierárquica.

Resolve o usuário atuante (identificador passado explicitamente em cada
operação, nunca lido de estado global) e aplica a regra "igual ou
inferior" usando os papéis reais carregados do repositório.
"""

import logging

from src.core.shared.exceptions import ActorNotFoundError, PermissionDeniedError
from src.core.access_control.entities import HierarchicalRole

from .entities import UserAccountEntity
from .ports import UserAccountRepository

logger = logging.getLogger(__name__)


class HierarchicalAuthorizationService:
    """
    Serviço de autorização baseado na escala hierárquica.

    Também atende ao port ActorAuthorizer do domínio organizacional.

    Example:
        authz = HierarchicalAuthorizationService(account_repo)
        actor = authz.resolve_actor(actor_id)
        authz.ensure_can_create(actor, HierarchicalRole.SENIOR)
    """

    def __init__(self, account_repo: UserAccountRepository):
        self.account_repo = account_repo

    def resolve_actor(self, actor_id: str) -> UserAccountEntity:
        """
        Raises:
            ActorNotFoundError: Se a conta não existe ou está inativa
        """
        actor = self.account_repo.get_by_id(actor_id) if actor_id else None
        if actor is None or not actor.is_active:
            logger.warning(f"Actor not resolved: {actor_id}")
            raise ActorNotFoundError(actor_id)
        return actor

    def ensure_can_create(self, actor: UserAccountEntity, target: HierarchicalRole) -> None:
        """
        Raises:
            PermissionDeniedError: Se nenhum papel do ator alcança o alvo
        """
        if not actor.can_create_role(target):
            highest = actor.get_highest_role_level()
            logger.warning(
                f"Permission denied: {actor.id} ({highest.value}) "
                f"cannot act on rank {target.value}"
            )
            raise PermissionDeniedError(
                f"Nível {highest.value} não pode atribuir o nível {target.value}",
                actor_level=highest.value,
                target_level=target.value,
            )

    def ensure_can_modify(self, actor: UserAccountEntity, target: UserAccountEntity) -> None:
        """
        Compara com o papel atual da conta alvo.

        Raises:
            PermissionDeniedError: Se o ator não alcança a conta alvo
        """
        if not actor.can_modify_user(target):
            highest = actor.get_highest_role_level()
            target_level = target.get_highest_role_level()
            logger.warning(
                f"Permission denied: {actor.id} ({highest.value}) "
                f"cannot modify account {target.id} ({target_level.value})"
            )
            raise PermissionDeniedError(
                f"Nível {highest.value} não pode modificar conta de nível {target_level.value}",
                actor_level=highest.value,
                target_level=target_level.value,
            )

    def ensure_minimum_level(self, actor_id: str, minimum: HierarchicalRole) -> None:
        """
        Exige que o ator tenha ao menos o nível informado.

        Raises:
            ActorNotFoundError: Se ator inexistente
            PermissionDeniedError: Se nível insuficiente
        """
        actor = self.resolve_actor(actor_id)
        highest = actor.get_highest_role_level()
        if not actor.roles or highest < minimum:
            raise PermissionDeniedError(
                f"Operação exige nível {minimum.value} ou superior",
                actor_level=highest.value,
                target_level=minimum.value,
            )
