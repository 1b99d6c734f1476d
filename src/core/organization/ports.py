"""
Ports (Interfaces) do Domínio Organizacional.

Contratos:
- DepartmentRepository: stores de departamentos
- JobTitleRepository: stores de cargos
- ActorAuthorizer: verificação do nível mínimo do usuário atuante
  (implementado pelo serviço de autorização do domínio de pessoal)
- JobTitleRoleSynchronizer: troca de papel dos ocupantes quando o nível
  do cargo muda (implementado no domínio de pessoal)
"""

import copy
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.access_control.entities import HierarchicalRole
from src.core.shared.pagination import PageResult

from .dtos import ListDepartmentsQueryDTO, ListJobTitlesQueryDTO
from .entities import DepartmentEntity, JobTitleEntity


@runtime_checkable
class DepartmentRepository(Protocol):
    """
    Interface para persistência de departamentos.

    Implementações:
    - DjangoDepartmentRepository (ORM)
    - InMemoryDepartmentRepository (testes)
    """

    def exists(self, department_id: str) -> bool:
        """Verifica se departamento existe."""
        ...

    def get_by_id(self, department_id: str) -> Optional[DepartmentEntity]:
        """Busca por ID."""
        ...

    def add(self, department: DepartmentEntity) -> None:
        """Persiste novo departamento."""
        ...

    def update(self, department: DepartmentEntity) -> None:
        """Persiste alterações."""
        ...

    def list_all(self, only_active: bool = True) -> List[DepartmentEntity]:
        """Lista departamentos."""
        ...

    def search(self, query: ListDepartmentsQueryDTO) -> Tuple[List[DepartmentEntity], int]:
        """Página filtrada (ordem por nome) e total sem paginação."""
        ...


@runtime_checkable
class JobTitleRepository(Protocol):
    """Interface para persistência de cargos."""

    def exists(self, job_title_id: str) -> bool:
        ...

    def get_by_id(self, job_title_id: str) -> Optional[JobTitleEntity]:
        ...

    def add(self, job_title: JobTitleEntity) -> None:
        ...

    def update(self, job_title: JobTitleEntity) -> None:
        ...

    def list_all(self, only_active: bool = True) -> List[JobTitleEntity]:
        ...

    def search(self, query: ListJobTitlesQueryDTO) -> Tuple[List[JobTitleEntity], int]:
        """Página filtrada (ordem por nível e nome) e total sem paginação."""
        ...


@runtime_checkable
class ActorAuthorizer(Protocol):
    """
    Verifica se o usuário atuante tem ao menos o nível exigido.

    Raises (na implementação):
        ActorNotFoundError: Ator inexistente
        PermissionDeniedError: Nível insuficiente
    """

    def ensure_minimum_level(self, actor_id: str, minimum: HierarchicalRole) -> None:
        ...


class InMemoryDepartmentRepository:
    """
    Implementação em memória do DepartmentRepository.

    Guarda e devolve cópias, como um banco faria: alterar uma entity
    lida não muda o store até `update`.

    Não usar em produção!
    """

    def __init__(self):
        self._departments: Dict[str, DepartmentEntity] = {}

    def exists(self, department_id: str) -> bool:
        return department_id in self._departments

    def get_by_id(self, department_id: str) -> Optional[DepartmentEntity]:
        return copy.deepcopy(self._departments.get(department_id))

    def add(self, department: DepartmentEntity) -> None:
        self._departments[department.id] = copy.deepcopy(department)

    def update(self, department: DepartmentEntity) -> None:
        self._departments[department.id] = copy.deepcopy(department)

    def list_all(self, only_active: bool = True) -> List[DepartmentEntity]:
        return [
            copy.deepcopy(d) for d in sorted(self._departments.values(), key=lambda d: d.name)
            if d.is_active or not only_active
        ]

    def search(self, query: ListDepartmentsQueryDTO) -> Tuple[List[DepartmentEntity], int]:
        departments = self.list_all(only_active=query.only_active)
        term = (query.name_contains or "").strip().lower()
        if term:
            departments = [d for d in departments if term in d.name.lower()]
        page = PageResult.from_list(departments, query.page_request)
        return page.items, page.total


class InMemoryJobTitleRepository:
    """
    Implementação em memória do JobTitleRepository (cópias, como acima).

    Não usar em produção!
    """

    def __init__(self):
        self._job_titles: Dict[str, JobTitleEntity] = {}

    def exists(self, job_title_id: str) -> bool:
        return job_title_id in self._job_titles

    def get_by_id(self, job_title_id: str) -> Optional[JobTitleEntity]:
        return copy.deepcopy(self._job_titles.get(job_title_id))

    def add(self, job_title: JobTitleEntity) -> None:
        self._job_titles[job_title.id] = copy.deepcopy(job_title)

    def update(self, job_title: JobTitleEntity) -> None:
        self._job_titles[job_title.id] = copy.deepcopy(job_title)

    def list_all(self, only_active: bool = True) -> List[JobTitleEntity]:
        job_titles = sorted(self._job_titles.values(), key=lambda j: (j.hierarchy_level, j.name))
        return [copy.deepcopy(j) for j in job_titles if j.is_active or not only_active]

    def search(self, query: ListJobTitlesQueryDTO) -> Tuple[List[JobTitleEntity], int]:
        job_titles = self.list_all(only_active=query.only_active)
        term = (query.name_contains or "").strip().lower()
        if term:
            job_titles = [j for j in job_titles if term in j.name.lower()]
        if query.hierarchy_level is not None:
            job_titles = [j for j in job_titles if j.hierarchy_level == query.hierarchy_level]
        page = PageResult.from_list(job_titles, query.page_request)
        return page.items, page.total


@runtime_checkable
class JobTitleRoleSynchronizer(Protocol):
    """
    Alinha o papel das contas dos ocupantes de um cargo ao novo nível.

    Implementado pelo domínio de pessoal; chamado dentro do UnitOfWork
    da alteração do cargo, de modo que cargo e papéis mudam juntos.
    """

    def sync_roles(self, job_title_id: str, level: HierarchicalRole) -> int:
        """Retorna quantas contas tiveram o papel trocado."""
        ...
