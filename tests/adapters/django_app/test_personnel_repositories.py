"""
Testes de integração dos adapters Django de pessoal.

Testa a integração entre:
- Mappers (Entity ↔ Model)
- Repositories (persistência e tradução de IntegrityError)
- Unit of Work (transações e publicação de eventos)
- Hasher de senha

Usa SQLite em memória (src.config.test_settings); as tabelas são
criadas pela migration 0001_initial, aplicada pelo pytest-django.
"""

from datetime import date

import pytest

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.personnel.mappers import EmployeeMapper, RoleMapper
from src.adapters.django_app.personnel.models import EmployeeModel, EmployeePhoneModel
from src.adapters.django_app.personnel.repositories import (
    DjangoDepartmentRepository,
    DjangoEmployeeRepository,
    DjangoJobTitleRepository,
    DjangoRoleRepository,
    DjangoUserAccountRepository,
)
from src.adapters.django_app.shared.hashers import DjangoPasswordHasher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.core.access_control.entities import HierarchicalRole, Role
from src.core.organization.dtos import ListDepartmentsQueryDTO, ListJobTitlesQueryDTO
from src.core.organization.entities import DepartmentEntity, JobTitleEntity
from src.core.personnel.dtos import ListEmployeesQueryDTO
from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
from src.core.personnel.events import EmployeeDeactivatedEvent
from src.core.personnel.value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber
from src.core.shared.exceptions import ConflictError, DocumentInUseError, EmailInUseError


pytestmark = pytest.mark.django_db


@pytest.fixture
def dj_department():
    department = DepartmentEntity.create("Tecnologia")
    DjangoDepartmentRepository().add(department)
    return department


@pytest.fixture
def dj_job_title():
    job_title = JobTitleEntity.create("Analista", 4)
    DjangoJobTitleRepository().add(job_title)
    return job_title


@pytest.fixture
def new_employee(dj_department, dj_job_title):
    """Fábrica de colaboradores (não persistidos) no departamento/cargo padrão."""
    def make(email="ana@acme.com", document="52998224725", phones=("(11) 98765-4321",), **kwargs):
        return EmployeeEntity.create(
            first_name=kwargs.pop("first_name", "Ana"),
            last_name=kwargs.pop("last_name", "Silva"),
            email=Email(email),
            document_number=DocumentNumber(document),
            date_of_birth=DateOfBirth(date(1990, 5, 17)),
            phones=[PhoneNumber(p) for p in phones],
            job_title_id=dj_job_title.id,
            department_id=dj_department.id,
            **kwargs,
        )
    return make


class TestOrganizationRepositories:
    """Departamentos e cargos."""

    def test_department_round_trip(self, dj_department):
        repo = DjangoDepartmentRepository()

        loaded = repo.get_by_id(dj_department.id)

        assert loaded == dj_department
        assert loaded.name == "Tecnologia"
        assert repo.exists(dj_department.id)
        assert not repo.exists("nao-existe")

    def test_department_list_only_active(self, dj_department):
        repo = DjangoDepartmentRepository()
        dj_department.deactivate()
        repo.update(dj_department)

        assert repo.list_all() == []
        assert repo.list_all(only_active=False) == [dj_department]

    def test_job_title_round_trip(self, dj_job_title):
        loaded = DjangoJobTitleRepository().get_by_id(dj_job_title.id)

        assert loaded.hierarchy_level == 4
        assert loaded.role_level == HierarchicalRole.PLENO

    def test_department_search_is_case_insensitive_and_paged(self, dj_department):
        repo = DjangoDepartmentRepository()
        for name in ("Financeiro", "Tecnologia Aplicada"):
            repo.add(DepartmentEntity.create(name))

        items, total = repo.search(ListDepartmentsQueryDTO(name_contains="tecno", page_size=1))

        assert total == 2
        assert [d.name for d in items] == ["Tecnologia"]

    def test_job_title_search_by_level(self, dj_job_title):
        repo = DjangoJobTitleRepository()
        manager_title = JobTitleEntity.create("Gerente", 2)
        repo.add(manager_title)

        items, total = repo.search(ListJobTitlesQueryDTO(hierarchy_level=2))

        assert total == 1
        assert items == [manager_title]


class TestDjangoRoleRepository:

    def test_get_by_name_ignores_case(self):
        repo = DjangoRoleRepository()
        role = Role.for_level(HierarchicalRole.MANAGER)
        repo.add(role)

        loaded = repo.get_by_name("manager")

        assert loaded == role
        assert loaded.level == HierarchicalRole.MANAGER
        assert loaded.permissions == role.permissions

    def test_duplicate_name_is_a_conflict(self):
        repo = DjangoRoleRepository()
        repo.add(Role.for_level(HierarchicalRole.MANAGER))

        with pytest.raises(ConflictError) as exc_info:
            repo.add(Role.for_level(HierarchicalRole.MANAGER))

        assert exc_info.value.field == "name"
        assert len(repo.list_all()) == 1

    def test_mapper_stores_sorted_permissions(self):
        model = RoleMapper.to_model(Role.create("Custom", HierarchicalRole.PLENO, ["b:read", "a:read"]))

        assert model.permissions == ["a:read", "b:read"]


class TestDjangoEmployeeRepository:
    """Persistência de colaboradores e telefones."""

    def test_add_and_get_with_phones(self, new_employee):
        repo = DjangoEmployeeRepository()
        employee = new_employee(phones=("(11) 98765-4321", "(11) 3456-7890 ramal 12"))

        repo.add(employee)
        loaded = repo.get_by_id(employee.id)

        assert loaded.email == employee.email
        assert loaded.document_number.formatted == "529.982.247-25"
        assert loaded.date_of_birth.value == date(1990, 5, 17)
        assert loaded.phones == employee.phones
        extensions = {p.e164: p.extension for p in loaded.phones}
        assert extensions["+551134567890"] == "12"

    def test_stored_in_canonical_form(self, new_employee):
        repo = DjangoEmployeeRepository()
        employee = new_employee(email="Ana@ACME.com", document="529.982.247-25")

        repo.add(employee)

        model = EmployeeModel.objects.get(id=employee.id)
        assert model.email == "ana@acme.com"
        assert model.document_number == "52998224725"
        assert repo.email_exists("ANA@acme.com")
        assert repo.cpf_exists("52998224725")

    def test_update_syncs_phones(self, new_employee):
        repo = DjangoEmployeeRepository()
        employee = new_employee()
        repo.add(employee)

        employee.update_phones([PhoneNumber("(11) 3456-7890"), PhoneNumber("(21) 99876-5432")])
        repo.update(employee)

        stored = set(
            EmployeePhoneModel.objects.filter(employee_id=employee.id).values_list("e164", flat=True)
        )
        assert stored == {"+551134567890", "+5521998765432"}

    def test_duplicate_email_is_translated(self, new_employee):
        repo = DjangoEmployeeRepository()
        repo.add(new_employee(email="a@b.com"))

        with pytest.raises(EmailInUseError):
            repo.add(new_employee(email="A@B.com", document="11144477735"))

        assert EmployeeModel.objects.count() == 1

    def test_duplicate_document_is_translated(self, new_employee):
        repo = DjangoEmployeeRepository()
        repo.add(new_employee(email="a@b.com", document="52998224725"))

        with pytest.raises(DocumentInUseError):
            repo.add(new_employee(email="c@d.com", document="529.982.247-25"))

    def test_list_by_manager_and_filters(self, new_employee):
        repo = DjangoEmployeeRepository()
        boss = new_employee(email="boss@acme.com", document="11144477735")
        repo.add(boss)
        subordinate = new_employee(manager_id=boss.id)
        repo.add(subordinate)

        assert repo.list_by_manager(boss.id) == [subordinate]
        assert repo.list_all(manager_id=boss.id) == [subordinate]

        subordinate.deactivate()
        repo.update(subordinate)
        assert repo.list_all(manager_id=boss.id) == []
        assert repo.list_all(manager_id=boss.id, only_active=False) == [subordinate]

    def test_list_by_job_title(self, new_employee, dj_job_title):
        repo = DjangoEmployeeRepository()
        employee = new_employee()
        repo.add(employee)

        assert repo.list_by_job_title(dj_job_title.id) == [employee]
        assert repo.list_by_job_title("outro-cargo") == []

    def test_search_matches_name_or_email_and_pages(self, new_employee):
        repo = DjangoEmployeeRepository()
        repo.add(new_employee())
        repo.add(new_employee(
            email="bruno@acme.com", document="11144477735",
            first_name="Bruno", last_name="Souza",
        ))
        repo.add(new_employee(
            email="carla.silva@acme.com", document="93541134780",
            first_name="Carla", last_name="Dias",
        ))

        items, total = repo.search(ListEmployeesQueryDTO(name_or_email="SILVA", page=2, page_size=1))

        assert total == 2
        assert [e.first_name for e in items] == ["Carla"]

    def test_delete(self, new_employee):
        repo = DjangoEmployeeRepository()
        employee = new_employee()
        repo.add(employee)

        repo.delete(employee.id)

        assert repo.get_by_id(employee.id) is None
        assert not EmployeePhoneModel.objects.filter(employee_id=employee.id).exists()

    def test_mapper_round_trip(self, new_employee):
        employee = new_employee(phones=("+1 415 555 2671",))
        model = EmployeeMapper.to_model(employee)

        assert model.email == employee.email.value
        assert model.manager_id is None
        assert EmployeeMapper.phones_to_models(model, employee.phones)[0].e164 == "+14155552671"


class TestDjangoUserAccountRepository:
    """Contas com papéis reais."""

    @pytest.fixture
    def stored_employee(self, new_employee):
        employee = new_employee()
        DjangoEmployeeRepository().add(employee)
        return employee

    @pytest.fixture
    def senior_role(self):
        role = Role.for_level(HierarchicalRole.SENIOR)
        DjangoRoleRepository().add(role)
        return role

    def test_add_and_load_with_roles(self, stored_employee, senior_role):
        repo = DjangoUserAccountRepository()
        account = UserAccountEntity.create("ana@acme.com", "hash", stored_employee.id, [senior_role])

        repo.add(account)

        loaded = repo.get_by_email(" ANA@acme.com ")
        assert loaded == account
        assert loaded.get_highest_role_level() == HierarchicalRole.SENIOR
        assert repo.get_by_employee_id(stored_employee.id) == account

    def test_update_replaces_roles(self, stored_employee, senior_role):
        repo = DjangoUserAccountRepository()
        manager_role = Role.for_level(HierarchicalRole.MANAGER)
        DjangoRoleRepository().add(manager_role)
        account = UserAccountEntity.create("ana@acme.com", "hash", stored_employee.id, [senior_role])
        repo.add(account)

        account.replace_roles([manager_role])
        repo.update(account)

        assert repo.get_by_id(account.id).role_names == ["Manager"]

    def test_second_account_for_employee_conflicts(self, stored_employee):
        repo = DjangoUserAccountRepository()
        repo.add(UserAccountEntity.create("ana@acme.com", "hash", stored_employee.id))

        with pytest.raises(ConflictError) as exc_info:
            repo.add(UserAccountEntity.create("outra@acme.com", "hash", stored_employee.id))

        assert exc_info.value.field == "employee_id"


class TestDjangoUnitOfWork:
    """Transações e publicação pós-commit."""

    def test_commit_persists_and_publishes(self, new_employee):
        publisher = InMemoryEventPublisher()
        repo = DjangoEmployeeRepository()
        employee = new_employee()

        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            repo.add(employee)
            uow.publish_event(EmployeeDeactivatedEvent(aggregate_id=employee.id))

        assert uow.is_committed
        assert repo.get_by_id(employee.id) is not None
        assert [e.aggregate_id for e in publisher.published_events] == [employee.id]

    def test_exception_rolls_back_everything(self, new_employee):
        publisher = InMemoryEventPublisher()
        repo = DjangoEmployeeRepository()
        employee = new_employee()
        uow = DjangoUnitOfWork(event_publisher=publisher)

        with pytest.raises(RuntimeError):
            with uow:
                repo.add(employee)
                uow.publish_event(EmployeeDeactivatedEvent(aggregate_id=employee.id))
                raise RuntimeError("falha no meio da operação")

        assert uow.is_rolled_back
        assert repo.get_by_id(employee.id) is None
        assert publisher.published_events == []

    def test_conflict_inside_unit_of_work_rolls_back_partial_writes(self, new_employee):
        repo = DjangoEmployeeRepository()
        repo.add(new_employee(email="a@b.com"))
        first = new_employee(email="novo@acme.com", document="11144477735")
        duplicate = new_employee(email="a@b.com", document="93541134780")

        with pytest.raises(EmailInUseError):
            with DjangoUnitOfWork():
                repo.add(first)
                repo.add(duplicate)

        assert repo.get_by_id(first.id) is None


class TestDjangoPasswordHasher:

    def test_hash_and_verify(self):
        hasher = DjangoPasswordHasher()

        hashed = hasher.hash("Senha123")

        assert hashed != "Senha123"
        assert hasher.verify("Senha123", hashed)
        assert not hasher.verify("Errada123", hashed)
        assert not hasher.verify("Senha123", "")
