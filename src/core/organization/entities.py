"""
Entidades do Domínio Organizacional.

Entidades de referência usadas pelos colaboradores:
- DepartmentEntity: Departamento da empresa
- JobTitleEntity: Cargo, com nível hierárquico que mapeia para
  HierarchicalRole

Regras de Negócio Encapsuladas:
- Nome com pelo menos 2 caracteres
- Nível hierárquico do cargo em {1..5, 999}
- Ativação/desativação idempotentes (exclusão é lógica)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid

from src.core.shared.exceptions import ValidationError
from src.core.access_control.entities import HierarchicalRole


VALID_HIERARCHY_LEVELS = frozenset({1, 2, 3, 4, 5, 999})
SUPER_USER_LEVEL = 999


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate_name(name: str, entity: str) -> str:
    name = (name or "").strip()
    if len(name) < 2:
        raise ValidationError(
            f"Nome do {entity} deve ter pelo menos 2 caracteres",
            field="name",
        )
    return name


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    return description or None


@dataclass
class DepartmentEntity:
    """
    Entidade de Domínio: Departamento.

    Attributes:
        id: UUID do departamento
        name: Nome (mínimo 2 caracteres)
        description: Descrição opcional
        is_active: False após desativação lógica
        created_at: Timestamp de criação
        updated_at: Última modificação (None até a primeira mudança)
    """

    name: str
    description: Optional[str] = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, name: str, description: Optional[str] = None) -> "DepartmentEntity":
        """
        Factory method para criar departamento.

        Raises:
            ValidationError: Se nome inválido
        """
        return cls(
            name=_validate_name(name, "departamento"),
            description=_clean_description(description),
        )

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def rename(self, name: str) -> None:
        name = _validate_name(name, "departamento")
        if name == self.name:
            return
        self.name = name
        self._touch()

    def update_description(self, description: Optional[str]) -> None:
        description = _clean_description(description)
        if description == self.description:
            return
        self.description = description
        self._touch()

    def activate(self) -> None:
        if self.is_active:
            return
        self.is_active = True
        self._touch()

    def deactivate(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self._touch()

    def __eq__(self, other) -> bool:
        if not isinstance(other, DepartmentEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Department(id={self.id[:8]}..., name={self.name!r})"


@dataclass
class JobTitleEntity:
    """
    Entidade de Domínio: Cargo.

    O nível hierárquico segue a convenção 1 = maior cargo de negócio
    (Director) ... 5 = menor (Junior), e 999 = SuperUser.

    Attributes:
        id: UUID do cargo
        name: Nome (mínimo 2 caracteres)
        hierarchy_level: Nível em {1..5, 999}
        description: Descrição opcional
        is_active: False após desativação lógica
    """

    name: str
    hierarchy_level: int
    description: Optional[str] = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        name: str,
        hierarchy_level: int,
        description: Optional[str] = None,
    ) -> "JobTitleEntity":
        """
        Factory method para criar cargo.

        Raises:
            ValidationError: Se nome ou nível inválidos
        """
        return cls(
            name=_validate_name(name, "cargo"),
            hierarchy_level=cls._validate_level(hierarchy_level),
            description=_clean_description(description),
        )

    @staticmethod
    def _validate_level(level: int) -> int:
        if level not in VALID_HIERARCHY_LEVELS:
            raise ValidationError(
                f"Nível hierárquico deve ser 1 a 5 ou 999, recebido: {level}",
                field="hierarchy_level",
            )
        return level

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def update(
        self,
        name: str,
        hierarchy_level: int,
        description: Optional[str] = None,
    ) -> None:
        name = _validate_name(name, "cargo")
        hierarchy_level = self._validate_level(hierarchy_level)
        description = _clean_description(description)
        if (name, hierarchy_level, description) == (
            self.name, self.hierarchy_level, self.description
        ):
            return
        self.name = name
        self.hierarchy_level = hierarchy_level
        self.description = description
        self._touch()

    def activate(self) -> None:
        if self.is_active:
            return
        self.is_active = True
        self._touch()

    def deactivate(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self._touch()

    @property
    def role_level(self) -> HierarchicalRole:
        return HierarchicalRole.from_job_title_level(self.hierarchy_level)

    @property
    def is_top_level(self) -> bool:
        return self.hierarchy_level == SUPER_USER_LEVEL

    @property
    def is_management(self) -> bool:
        """Director, Manager e Senior (níveis 1 a 3) ou SuperUser."""
        return self.is_top_level or self.hierarchy_level <= 3

    def can_manage(self, other: "JobTitleEntity") -> bool:
        """Cargo pode gerir outro de autoridade igual ou inferior."""
        return self.role_level.can_act_on(other.role_level)

    def __eq__(self, other) -> bool:
        if not isinstance(other, JobTitleEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"JobTitle(id={self.id[:8]}..., name={self.name!r}, "
            f"level={self.hierarchy_level})"
        )
