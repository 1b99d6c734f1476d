"""
Repositórios Django para pessoal, organização e controle de acesso.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM (prefetch de telefones/papéis)
- Traduzir violações de unicidade (IntegrityError) em ConflictError,
  fechando a corrida entre a verificação e a escrita

Cada escrita roda em seu próprio savepoint (`transaction.atomic`), de
modo que uma violação não invalida a transação do UnitOfWork.
"""

from typing import List, Optional, Tuple
import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from src.core.access_control.entities import Role
from src.core.organization.dtos import ListDepartmentsQueryDTO, ListJobTitlesQueryDTO
from src.core.organization.entities import DepartmentEntity, JobTitleEntity
from src.core.personnel.dtos import ListEmployeesQueryDTO
from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
from src.core.shared.exceptions import ConflictError, DocumentInUseError, EmailInUseError
from src.core.shared.pagination import PageRequest

from .mappers import (
    DepartmentMapper,
    EmployeeMapper,
    JobTitleMapper,
    RoleMapper,
    UserAccountMapper,
)
from .models import (
    DepartmentModel,
    EmployeeModel,
    EmployeePhoneModel,
    JobTitleModel,
    RoleModel,
    UserAccountModel,
)

logger = logging.getLogger(__name__)


def _paginate(queryset, page: PageRequest):
    """Recorta o queryset (já ordenado pelo Meta.ordering) e conta o total."""
    total = queryset.count()
    return list(queryset[page.offset:page.offset + page.limit]), total


class DjangoDepartmentRepository:
    """Implementação Django do DepartmentRepository."""

    def exists(self, department_id: str) -> bool:
        return DepartmentModel.objects.filter(id=department_id).exists()

    def get_by_id(self, department_id: str) -> Optional[DepartmentEntity]:
        model = DepartmentModel.objects.filter(id=department_id).first()
        return DepartmentMapper.to_entity(model) if model else None

    def add(self, department: DepartmentEntity) -> None:
        DepartmentMapper.to_model(department).save(force_insert=True)
        logger.info(f"Department {department.id} created")

    def update(self, department: DepartmentEntity) -> None:
        DepartmentMapper.to_model(department).save()

    def list_all(self, only_active: bool = True) -> List[DepartmentEntity]:
        queryset = DepartmentModel.objects.all()
        if only_active:
            queryset = queryset.filter(is_active=True)
        return [DepartmentMapper.to_entity(model) for model in queryset]

    def search(self, query: ListDepartmentsQueryDTO) -> Tuple[List[DepartmentEntity], int]:
        queryset = DepartmentModel.objects.all()
        if query.only_active:
            queryset = queryset.filter(is_active=True)
        if query.name_contains and query.name_contains.strip():
            queryset = queryset.filter(name__icontains=query.name_contains.strip())
        models, total = _paginate(queryset, query.page_request)
        return [DepartmentMapper.to_entity(model) for model in models], total


class DjangoJobTitleRepository:
    """Implementação Django do JobTitleRepository."""

    def exists(self, job_title_id: str) -> bool:
        return JobTitleModel.objects.filter(id=job_title_id).exists()

    def get_by_id(self, job_title_id: str) -> Optional[JobTitleEntity]:
        model = JobTitleModel.objects.filter(id=job_title_id).first()
        return JobTitleMapper.to_entity(model) if model else None

    def add(self, job_title: JobTitleEntity) -> None:
        JobTitleMapper.to_model(job_title).save(force_insert=True)
        logger.info(f"JobTitle {job_title.id} created")

    def update(self, job_title: JobTitleEntity) -> None:
        JobTitleMapper.to_model(job_title).save()

    def list_all(self, only_active: bool = True) -> List[JobTitleEntity]:
        queryset = JobTitleModel.objects.all()
        if only_active:
            queryset = queryset.filter(is_active=True)
        return [JobTitleMapper.to_entity(model) for model in queryset]

    def search(self, query: ListJobTitlesQueryDTO) -> Tuple[List[JobTitleEntity], int]:
        queryset = JobTitleModel.objects.all()
        if query.only_active:
            queryset = queryset.filter(is_active=True)
        if query.name_contains and query.name_contains.strip():
            queryset = queryset.filter(name__icontains=query.name_contains.strip())
        if query.hierarchy_level is not None:
            queryset = queryset.filter(hierarchy_level=query.hierarchy_level)
        models, total = _paginate(queryset, query.page_request)
        return [JobTitleMapper.to_entity(model) for model in models], total


class DjangoRoleRepository:
    """Implementação Django do RoleRepository."""

    def get_by_id(self, role_id: str) -> Optional[Role]:
        model = RoleModel.objects.filter(id=role_id).first()
        return RoleMapper.to_entity(model) if model else None

    def get_by_name(self, name: str) -> Optional[Role]:
        model = RoleModel.objects.filter(name__iexact=name.strip()).first()
        return RoleMapper.to_entity(model) if model else None

    def add(self, role: Role) -> None:
        try:
            with transaction.atomic():
                RoleMapper.to_model(role).save(force_insert=True)
        except IntegrityError:
            if RoleModel.objects.filter(name__iexact=role.name).exists():
                logger.warning(f"Unique violation on role name {role.name}")
                raise ConflictError(f"Papel {role.name} já existe", field="name")
            raise
        logger.info(f"Role {role.name} created")

    def list_all(self) -> List[Role]:
        return [RoleMapper.to_entity(model) for model in RoleModel.objects.all()]


class DjangoEmployeeRepository:
    """
    Implementação Django do EmployeeRepository.

    Example:
        repo = DjangoEmployeeRepository()
        repo.add(employee)              # EmailInUseError se e-mail duplicado
        repo.email_exists("a@b.com")   # True
    """

    def _queryset(self):
        return EmployeeModel.objects.prefetch_related('phones')

    def get_by_id(self, employee_id: str) -> Optional[EmployeeEntity]:
        model = self._queryset().filter(id=employee_id).first()
        return EmployeeMapper.to_entity(model) if model else None

    def email_exists(self, email: str) -> bool:
        return EmployeeModel.objects.filter(email=email.strip().lower()).exists()

    def cpf_exists(self, digits: str) -> bool:
        return EmployeeModel.objects.filter(document_number=digits).exists()

    def add(self, employee: EmployeeEntity) -> None:
        try:
            with transaction.atomic():
                model = EmployeeMapper.to_model(employee)
                model.save(force_insert=True)
                EmployeePhoneModel.objects.bulk_create(
                    EmployeeMapper.phones_to_models(model, employee.phones)
                )
        except IntegrityError:
            self._raise_conflict(employee)
            raise
        logger.info(f"Employee {employee.id} created")

    def update(self, employee: EmployeeEntity) -> None:
        try:
            with transaction.atomic():
                model = EmployeeMapper.to_model(employee)
                model.save(force_update=True)
                self._sync_phones(model, employee)
        except IntegrityError:
            self._raise_conflict(employee)
            raise
        logger.info(f"Employee {employee.id} updated")

    def _sync_phones(self, model: EmployeeModel, employee: EmployeeEntity) -> None:
        current = {p.e164: p for p in model.phones.all()}
        wanted = {p.e164: p for p in employee.phones}

        stale = [e164 for e164 in current if e164 not in wanted]
        if stale:
            model.phones.filter(e164__in=stale).delete()

        for e164, phone in wanted.items():
            existing = current.get(e164)
            if existing is None:
                EmployeePhoneModel.objects.create(
                    employee=model, e164=e164, extension=phone.extension
                )
            elif existing.extension != phone.extension:
                existing.extension = phone.extension
                existing.save(update_fields=['extension'])

    def _raise_conflict(self, employee: EmployeeEntity) -> None:
        others = EmployeeModel.objects.exclude(id=employee.id)
        if others.filter(email=employee.email.value).exists():
            logger.warning(f"Unique violation on email for employee {employee.id}")
            raise EmailInUseError(employee.email.value)
        if others.filter(document_number=employee.document_number.digits).exists():
            logger.warning(f"Unique violation on document for employee {employee.id}")
            raise DocumentInUseError(employee.document_number.formatted)

    def delete(self, employee_id: str) -> None:
        EmployeeModel.objects.filter(id=employee_id).delete()
        logger.info(f"Employee {employee_id} deleted")

    def list_by_manager(self, manager_id: str) -> List[EmployeeEntity]:
        return EmployeeMapper.to_entity_list(self._queryset().filter(manager_id=manager_id))

    def list_by_job_title(self, job_title_id: str) -> List[EmployeeEntity]:
        return EmployeeMapper.to_entity_list(self._queryset().filter(job_title_id=job_title_id))

    def list_all(
        self,
        department_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        only_active: bool = True,
    ) -> List[EmployeeEntity]:
        queryset = self._queryset()
        if department_id:
            queryset = queryset.filter(department_id=department_id)
        if manager_id:
            queryset = queryset.filter(manager_id=manager_id)
        if only_active:
            queryset = queryset.filter(is_active=True)
        return EmployeeMapper.to_entity_list(queryset)

    def search(self, query: ListEmployeesQueryDTO) -> Tuple[List[EmployeeEntity], int]:
        queryset = self._queryset()
        if query.department_id:
            queryset = queryset.filter(department_id=query.department_id)
        if query.manager_id:
            queryset = queryset.filter(manager_id=query.manager_id)
        if query.job_title_id:
            queryset = queryset.filter(job_title_id=query.job_title_id)
        if query.only_active:
            queryset = queryset.filter(is_active=True)
        term = query.search_term
        if term:
            queryset = queryset.filter(
                Q(first_name__icontains=term)
                | Q(last_name__icontains=term)
                | Q(email__icontains=term)
            )
        models, total = _paginate(queryset, query.page_request)
        return EmployeeMapper.to_entity_list(models), total


class DjangoUserAccountRepository:
    """
    Implementação Django do UserAccountRepository.

    Contas são carregadas com seus papéis reais (prefetch de roles).
    """

    def _queryset(self):
        return UserAccountModel.objects.prefetch_related('roles')

    def _first(self, **filters) -> Optional[UserAccountEntity]:
        model = self._queryset().filter(**filters).first()
        return UserAccountMapper.to_entity(model) if model else None

    def get_by_id(self, account_id: str) -> Optional[UserAccountEntity]:
        return self._first(id=account_id)

    def get_by_email(self, email: str) -> Optional[UserAccountEntity]:
        return self._first(user_name=email.strip().lower())

    def get_by_employee_id(self, employee_id: str) -> Optional[UserAccountEntity]:
        return self._first(employee_id=employee_id)

    def add(self, account: UserAccountEntity) -> None:
        self._save(account, force_insert=True)
        logger.info(f"UserAccount {account.id} created")

    def update(self, account: UserAccountEntity) -> None:
        self._save(account, force_update=True)

    def _save(self, account: UserAccountEntity, **save_kwargs) -> None:
        try:
            with transaction.atomic():
                model = UserAccountMapper.to_model(account)
                model.save(**save_kwargs)
                model.roles.set([role.id for role in account.roles])
        except IntegrityError:
            others = UserAccountModel.objects.exclude(id=account.id)
            if others.filter(user_name=account.user_name).exists():
                raise ConflictError(
                    f"Nome de usuário {account.user_name} já está em uso",
                    field="user_name",
                )
            if others.filter(employee_id=account.employee_id).exists():
                raise ConflictError(
                    "Colaborador já possui conta de usuário",
                    field="employee_id",
                )
            raise
