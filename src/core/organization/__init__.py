"""
Domínio Organizacional.

Departamentos e cargos: entidades de referência dos colaboradores.
"""

from .entities import DepartmentEntity, JobTitleEntity
from .ports import (
    DepartmentRepository,
    JobTitleRepository,
    ActorAuthorizer,
    InMemoryDepartmentRepository,
    InMemoryJobTitleRepository,
)

__all__ = [
    "DepartmentEntity",
    "JobTitleEntity",
    "DepartmentRepository",
    "JobTitleRepository",
    "ActorAuthorizer",
    "InMemoryDepartmentRepository",
    "InMemoryJobTitleRepository",
]
