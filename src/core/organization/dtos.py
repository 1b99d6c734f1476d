"""
Data Transfer Objects (DTOs) do Domínio Organizacional.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.core.shared.pagination import DEFAULT_PAGE_SIZE, PageRequest

from .entities import DepartmentEntity, JobTitleEntity


@dataclass(frozen=True)
class CreateDepartmentInputDTO:
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateDepartmentInputDTO:
    department_id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class CreateJobTitleInputDTO:
    name: str
    hierarchy_level: int
    description: Optional[str] = None


@dataclass(frozen=True)
class UpdateJobTitleInputDTO:
    job_title_id: str
    name: str
    hierarchy_level: int
    description: Optional[str] = None


@dataclass(frozen=True)
class ListDepartmentsQueryDTO:
    """Filtro por trecho do nome + paginação."""

    name_contains: Optional[str] = None
    only_active: bool = True
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def page_request(self) -> PageRequest:
        return PageRequest(self.page, self.page_size)


@dataclass(frozen=True)
class ListJobTitlesQueryDTO:
    """Filtro por trecho do nome e nível hierárquico + paginação."""

    name_contains: Optional[str] = None
    hierarchy_level: Optional[int] = None
    only_active: bool = True
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def page_request(self) -> PageRequest:
        return PageRequest(self.page, self.page_size)


@dataclass
class DepartmentOutputDTO:
    """DTO de saída com dados do departamento."""

    id: str
    name: str
    description: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: DepartmentEntity) -> "DepartmentOutputDTO":
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class JobTitleOutputDTO:
    """DTO de saída com dados do cargo."""

    id: str
    name: str
    hierarchy_level: int
    role_level: str
    description: Optional[str]
    is_active: bool

    @classmethod
    def from_entity(cls, entity: JobTitleEntity) -> "JobTitleOutputDTO":
        return cls(
            id=entity.id,
            name=entity.name,
            hierarchy_level=entity.hierarchy_level,
            role_level=entity.role_level.value,
            description=entity.description,
            is_active=entity.is_active,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "hierarchy_level": self.hierarchy_level,
            "role_level": self.role_level,
            "description": self.description,
            "is_active": self.is_active,
        }
