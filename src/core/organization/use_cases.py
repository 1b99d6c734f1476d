"""
Use Cases (Application Services) do Domínio Organizacional.

Use Cases implementados:
- CreateDepartmentService
- UpdateDepartmentService
- DeactivateDepartmentService
- CreateJobTitleService
- UpdateJobTitleService (ressincroniza o papel dos ocupantes)
- GetDepartmentService / ListDepartmentsService
- GetJobTitleService / ListJobTitlesService

Regras de autorização:
- Departamentos: ator com nível Manager ou superior
- Cargos: ator com nível Director ou superior, e nunca acima do próprio
  nível (um Director não cria cargo de SuperUser)
- Consultas: sem verificação de nível
"""

import logging
from typing import Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.pagination import PageResult
from src.core.shared.exceptions import EntityNotFoundError
from src.core.access_control.entities import HierarchicalRole

from .ports import (
    ActorAuthorizer,
    DepartmentRepository,
    JobTitleRepository,
    JobTitleRoleSynchronizer,
)
from .entities import DepartmentEntity, JobTitleEntity
from .dtos import (
    CreateDepartmentInputDTO,
    UpdateDepartmentInputDTO,
    CreateJobTitleInputDTO,
    UpdateJobTitleInputDTO,
    ListDepartmentsQueryDTO,
    ListJobTitlesQueryDTO,
    DepartmentOutputDTO,
    JobTitleOutputDTO,
)
from .events import (
    DepartmentCreatedEvent,
    DepartmentUpdatedEvent,
    DepartmentDeactivatedEvent,
    JobTitleCreatedEvent,
    JobTitleUpdatedEvent,
)

logger = logging.getLogger(__name__)

DEPARTMENT_MANAGEMENT_LEVEL = HierarchicalRole.MANAGER
JOB_TITLE_MANAGEMENT_LEVEL = HierarchicalRole.DIRECTOR


def _get_department(department_repo: DepartmentRepository, department_id: str) -> DepartmentEntity:
    department = department_repo.get_by_id(department_id)
    if not department:
        raise EntityNotFoundError(
            f"Departamento {department_id} não encontrado",
            entity_type="Department",
            entity_id=department_id,
        )
    return department


def _get_job_title(job_title_repo: JobTitleRepository, job_title_id: str) -> JobTitleEntity:
    job_title = job_title_repo.get_by_id(job_title_id)
    if not job_title:
        raise EntityNotFoundError(
            f"Cargo {job_title_id} não encontrado",
            entity_type="JobTitle",
            entity_id=job_title_id,
        )
    return job_title


class CreateDepartmentService:
    """
    Use Case: Criar departamento.

    Example:
        service = CreateDepartmentService(department_repo, authorizer, uow)
        output = service.execute(CreateDepartmentInputDTO(name="TI"), actor_id)
    """

    def __init__(
        self,
        department_repo: DepartmentRepository,
        authorizer: ActorAuthorizer,
        uow: UnitOfWork,
    ):
        self.department_repo = department_repo
        self.authorizer = authorizer
        self.uow = uow

    def execute(self, input_dto: CreateDepartmentInputDTO, actor_id: str) -> DepartmentOutputDTO:
        """
        Raises:
            ValidationError: Se nome inválido
            ActorNotFoundError: Se ator inexistente
            PermissionDeniedError: Se ator abaixo de Manager
        """
        department = DepartmentEntity.create(input_dto.name, input_dto.description)
        self.authorizer.ensure_minimum_level(actor_id, DEPARTMENT_MANAGEMENT_LEVEL)

        with self.uow:
            self.department_repo.add(department)
            self.uow.publish_event(
                DepartmentCreatedEvent(
                    aggregate_id=department.id,
                    name=department.name,
                    created_by_id=actor_id,
                )
            )

        logger.info(f"Department {department.id} created by {actor_id}")
        return DepartmentOutputDTO.from_entity(department)


class UpdateDepartmentService:
    """Use Case: Renomear/descrever departamento."""

    def __init__(
        self,
        department_repo: DepartmentRepository,
        authorizer: ActorAuthorizer,
        uow: UnitOfWork,
    ):
        self.department_repo = department_repo
        self.authorizer = authorizer
        self.uow = uow

    def execute(self, input_dto: UpdateDepartmentInputDTO, actor_id: str) -> DepartmentOutputDTO:
        self.authorizer.ensure_minimum_level(actor_id, DEPARTMENT_MANAGEMENT_LEVEL)

        with self.uow:
            department = _get_department(self.department_repo, input_dto.department_id)

            previous = department.updated_at
            department.rename(input_dto.name)
            department.update_description(input_dto.description)

            if department.updated_at != previous:
                self.department_repo.update(department)
                self.uow.publish_event(
                    DepartmentUpdatedEvent(
                        aggregate_id=department.id,
                        name=department.name,
                        description=department.description,
                        updated_by_id=actor_id,
                    )
                )

        return DepartmentOutputDTO.from_entity(department)


class DeactivateDepartmentService:
    """
    Use Case: Desativar departamento (exclusão lógica).

    Idempotente: desativar um departamento já inativo não gera evento.
    """

    def __init__(
        self,
        department_repo: DepartmentRepository,
        authorizer: ActorAuthorizer,
        uow: UnitOfWork,
    ):
        self.department_repo = department_repo
        self.authorizer = authorizer
        self.uow = uow

    def execute(self, department_id: str, actor_id: str) -> DepartmentOutputDTO:
        self.authorizer.ensure_minimum_level(actor_id, DEPARTMENT_MANAGEMENT_LEVEL)

        with self.uow:
            department = _get_department(self.department_repo, department_id)

            if department.is_active:
                department.deactivate()
                self.department_repo.update(department)
                self.uow.publish_event(
                    DepartmentDeactivatedEvent(
                        aggregate_id=department.id,
                        deactivated_by_id=actor_id,
                    )
                )
                logger.info(f"Department {department.id} deactivated by {actor_id}")

        return DepartmentOutputDTO.from_entity(department)


class CreateJobTitleService:
    """Use Case: Criar cargo."""

    def __init__(
        self,
        job_title_repo: JobTitleRepository,
        authorizer: ActorAuthorizer,
        uow: UnitOfWork,
    ):
        self.job_title_repo = job_title_repo
        self.authorizer = authorizer
        self.uow = uow

    def execute(self, input_dto: CreateJobTitleInputDTO, actor_id: str) -> JobTitleOutputDTO:
        job_title = JobTitleEntity.create(
            input_dto.name,
            input_dto.hierarchy_level,
            input_dto.description,
        )
        self.authorizer.ensure_minimum_level(
            actor_id, max(JOB_TITLE_MANAGEMENT_LEVEL, job_title.role_level)
        )

        with self.uow:
            self.job_title_repo.add(job_title)
            self.uow.publish_event(
                JobTitleCreatedEvent(
                    aggregate_id=job_title.id,
                    name=job_title.name,
                    hierarchy_level=job_title.hierarchy_level,
                    created_by_id=actor_id,
                )
            )

        logger.info(f"JobTitle {job_title.id} created by {actor_id}")
        return JobTitleOutputDTO.from_entity(job_title)


class UpdateJobTitleService:
    """
    Use Case: Alterar cargo (nome, nível, descrição).

    Quando o nível muda, as contas dos ocupantes do cargo recebem o papel
    do novo nível na mesma transação.
    """

    def __init__(
        self,
        job_title_repo: JobTitleRepository,
        authorizer: ActorAuthorizer,
        role_synchronizer: JobTitleRoleSynchronizer,
        uow: UnitOfWork,
    ):
        self.job_title_repo = job_title_repo
        self.authorizer = authorizer
        self.role_synchronizer = role_synchronizer
        self.uow = uow

    def execute(self, input_dto: UpdateJobTitleInputDTO, actor_id: str) -> JobTitleOutputDTO:
        with self.uow:
            job_title = _get_job_title(self.job_title_repo, input_dto.job_title_id)

            new_level = HierarchicalRole.from_job_title_level(input_dto.hierarchy_level)
            self.authorizer.ensure_minimum_level(
                actor_id,
                max(JOB_TITLE_MANAGEMENT_LEVEL, job_title.role_level, new_level),
            )

            previous = job_title.updated_at
            previous_level = job_title.role_level
            job_title.update(input_dto.name, input_dto.hierarchy_level, input_dto.description)

            if job_title.updated_at != previous:
                self.job_title_repo.update(job_title)
                if job_title.role_level != previous_level:
                    self.role_synchronizer.sync_roles(job_title.id, job_title.role_level)
                self.uow.publish_event(
                    JobTitleUpdatedEvent(
                        aggregate_id=job_title.id,
                        name=job_title.name,
                        hierarchy_level=job_title.hierarchy_level,
                        updated_by_id=actor_id,
                    )
                )

        return JobTitleOutputDTO.from_entity(job_title)


# =============================================================================
# Consultas (leitura, sem UoW nem autorização)
# =============================================================================

class GetDepartmentService:
    """Use Case: Obter departamento por ID."""

    def __init__(self, department_repo: DepartmentRepository):
        self.department_repo = department_repo

    def execute(self, department_id: str) -> DepartmentOutputDTO:
        return DepartmentOutputDTO.from_entity(_get_department(self.department_repo, department_id))


class ListDepartmentsService:
    """
    Use Case: Listar departamentos por trecho do nome, com paginação.

    Example:
        page = service.execute(ListDepartmentsQueryDTO(name_contains="tec"))
    """

    def __init__(self, department_repo: DepartmentRepository):
        self.department_repo = department_repo

    def execute(self, query: Optional[ListDepartmentsQueryDTO] = None) -> PageResult[DepartmentOutputDTO]:
        query = query or ListDepartmentsQueryDTO()
        page = query.page_request
        departments, total = self.department_repo.search(query)
        return PageResult(
            items=[DepartmentOutputDTO.from_entity(d) for d in departments],
            total=total,
            page=page.page,
            page_size=page.page_size,
        )


class GetJobTitleService:
    """Use Case: Obter cargo por ID."""

    def __init__(self, job_title_repo: JobTitleRepository):
        self.job_title_repo = job_title_repo

    def execute(self, job_title_id: str) -> JobTitleOutputDTO:
        return JobTitleOutputDTO.from_entity(_get_job_title(self.job_title_repo, job_title_id))


class ListJobTitlesService:
    """Use Case: Listar cargos (ordem: nível, nome), com filtros e paginação."""

    def __init__(self, job_title_repo: JobTitleRepository):
        self.job_title_repo = job_title_repo

    def execute(self, query: Optional[ListJobTitlesQueryDTO] = None) -> PageResult[JobTitleOutputDTO]:
        query = query or ListJobTitlesQueryDTO()
        page = query.page_request
        job_titles, total = self.job_title_repo.search(query)
        return PageResult(
            items=[JobTitleOutputDTO.from_entity(j) for j in job_titles],
            total=total,
            page=page.page,
            page_size=page.page_size,
        )
