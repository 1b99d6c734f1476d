"""
Entidades do Domínio de Controle de Acesso.

Este módulo define a escala hierárquica de cargos e o papel (Role)
que carrega um nível e um conjunto de permissões.

Entidades:
- HierarchicalRole: Escala totalmente ordenada de autoridade
- Role: Papel nomeado com nível hierárquico e permissões

Regra central ("igual ou inferior"):
    Um ator pode criar/modificar alvos cuja autoridade seja igual
    ou menor que a sua. SuperUser age sobre qualquer um; somente um
    SuperUser age sobre outro SuperUser.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import FrozenSet, Iterable, Optional
import uuid

from src.core.shared.exceptions import InvalidFormatError, ValidationError


@total_ordering
class HierarchicalRole(Enum):
    """
    Escala hierárquica, da menor para a maior autoridade.

    Ordem:
        JUNIOR < PLENO < SENIOR < MANAGER < DIRECTOR < SUPER_USER

    Mapeamento de JobTitle.hierarchy_level:
        999 → SUPER_USER, 1 → DIRECTOR, 2 → MANAGER,
        3 → SENIOR, 4 → PLENO, 5 → JUNIOR
    """

    JUNIOR = "Junior"
    PLENO = "Pleno"
    SENIOR = "Senior"
    MANAGER = "Manager"
    DIRECTOR = "Director"
    SUPER_USER = "SuperUser"

    @property
    def rank(self) -> int:
        """Peso numérico de autoridade (maior = mais poderoso)."""
        rank_map = {
            HierarchicalRole.JUNIOR: 1,
            HierarchicalRole.PLENO: 2,
            HierarchicalRole.SENIOR: 3,
            HierarchicalRole.MANAGER: 4,
            HierarchicalRole.DIRECTOR: 5,
            HierarchicalRole.SUPER_USER: 999,
        }
        return rank_map[self]

    def __lt__(self, other):
        if not isinstance(other, HierarchicalRole):
            return NotImplemented
        return self.rank < other.rank

    def can_act_on(self, target: "HierarchicalRole") -> bool:
        """Verifica se este nível pode agir sobre o nível alvo."""
        return target.rank <= self.rank

    @classmethod
    def lowest(cls) -> "HierarchicalRole":
        return cls.JUNIOR

    @classmethod
    def from_job_title_level(cls, level: int) -> "HierarchicalRole":
        """
        Converte o nível hierárquico de um cargo para a escala.

        Args:
            level: JobTitle.hierarchy_level (1..5 ou 999)

        Returns:
            HierarchicalRole correspondente

        Raises:
            InvalidFormatError: Se nível fora do conjunto permitido
        """
        level_map = {
            999: cls.SUPER_USER,
            1: cls.DIRECTOR,
            2: cls.MANAGER,
            3: cls.SENIOR,
            4: cls.PLENO,
            5: cls.JUNIOR,
        }
        try:
            return level_map[level]
        except (KeyError, TypeError):
            raise InvalidFormatError(
                f"Nível hierárquico inválido: {level}",
                field="hierarchy_level",
            )

    @classmethod
    def from_string(cls, value: str) -> "HierarchicalRole":
        """
        Converte string para enum (pelo nome ou pelo valor).

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.upper()]
        except KeyError:
            pass

        for role in cls:
            if role.value.lower() == value.lower():
                return role

        raise ValueError(f"Nível hierárquico inválido: {value}")


def can_create_role(current: HierarchicalRole, target: HierarchicalRole) -> bool:
    """
    Predicado central de permissão.

    Reflexivo (nível igual sempre permitido) e monotônico: se o ator
    cria o nível R, cria qualquer nível com autoridade menor ou igual a R.
    """
    return current.can_act_on(target)


_BASE_PERMISSIONS = {
    HierarchicalRole.JUNIOR: ("employees:read", "profile:read", "profile:update"),
    HierarchicalRole.PLENO: ("projects:read",),
    HierarchicalRole.SENIOR: ("projects:write", "mentoring:read"),
    HierarchicalRole.MANAGER: ("employees:write", "mentoring:write", "departments:read"),
    HierarchicalRole.DIRECTOR: ("departments:write", "roles:read", "roles:write"),
}


def default_permissions_for(level: HierarchicalRole) -> FrozenSet[str]:
    """
    Permissões padrão acumuladas até o nível informado.

    SuperUser não precisa de lista: possui todas as permissões.
    """
    permissions = set()
    for role_level, extra in _BASE_PERMISSIONS.items():
        if role_level <= level:
            permissions.update(extra)
    return frozenset(permissions)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Role:
    """
    Entidade de Domínio: Papel.

    Attributes:
        id: UUID do papel
        name: Nome único (ex: "Manager")
        level: Nível hierárquico
        permissions: Permissões normalizadas em minúsculas
        created_at: Timestamp de criação
        updated_at: Última modificação (None até a primeira mudança)

    Example:
        role = Role.create("Manager", HierarchicalRole.MANAGER)
        role.can_create_role(HierarchicalRole.SENIOR)  # True
    """

    name: str
    level: HierarchicalRole
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        name: str,
        level: HierarchicalRole,
        permissions: Optional[Iterable[str]] = None,
    ) -> "Role":
        """
        Factory method para criar papel.

        Sem permissões explícitas, usa as permissões padrão do nível.

        Raises:
            ValidationError: Se nome vazio
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nome do papel é obrigatório", field="name")
        if permissions is None:
            normalized = default_permissions_for(level)
        else:
            normalized = frozenset(cls._normalize(p) for p in permissions if p and p.strip())
        return cls(name=name, level=level, permissions=normalized)

    @classmethod
    def for_level(cls, level: HierarchicalRole) -> "Role":
        """Papel padrão de um nível, nomeado pelo próprio nível."""
        return cls.create(level.value, level)

    @staticmethod
    def _normalize(permission: str) -> str:
        return permission.strip().lower()

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def add_permission(self, permission: str) -> None:
        normalized = self._normalize(permission)
        if not normalized or normalized in self.permissions:
            return
        self.permissions = self.permissions | {normalized}
        self._touch()

    def remove_permission(self, permission: str) -> None:
        normalized = self._normalize(permission)
        if normalized not in self.permissions:
            return
        self.permissions = self.permissions - {normalized}
        self._touch()

    def set_level(self, level: HierarchicalRole) -> None:
        if level == self.level:
            return
        self.level = level
        self._touch()

    @property
    def is_super_user(self) -> bool:
        return self.level == HierarchicalRole.SUPER_USER

    def has_permission(self, permission: str) -> bool:
        if self.is_super_user:
            return True
        return self._normalize(permission) in self.permissions

    def can_create_role(self, target: HierarchicalRole) -> bool:
        return can_create_role(self.level, target)

    def can_modify_user(self, target_role: HierarchicalRole) -> bool:
        """Mesma comparação, aplicada ao nível atual da conta alvo."""
        return can_create_role(self.level, target_role)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Role):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Role(name={self.name!r}, level={self.level.value})"
