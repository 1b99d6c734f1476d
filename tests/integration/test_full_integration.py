"""
Testes de Integração End-to-End.

Fluxo completo pelo container da aplicação:
- Use Case → Repository Django → Banco (SQLite em memória)
- Unit of Work → Publisher em memória (EVENT_PUBLISHER_MODE = memory)

Executar com --run-integration.
"""

from datetime import date

import pytest

from src.config.container import get_container
from src.core.access_control.entities import HierarchicalRole
from src.core.organization.dtos import CreateDepartmentInputDTO, CreateJobTitleInputDTO
from src.core.organization.entities import DepartmentEntity, JobTitleEntity
from src.core.personnel.dtos import (
    AuthenticateInputDTO,
    ChangePasswordInputDTO,
    CreateEmployeeInputDTO,
    ListEmployeesQueryDTO,
    UpdateEmployeeInputDTO,
)
from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
from src.core.personnel.value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber
from src.core.shared.exceptions import (
    EmailInUseError,
    InvalidCredentialsError,
    PermissionDeniedError,
)


pytestmark = [pytest.mark.integration, pytest.mark.django_db]


@pytest.fixture
def container():
    container = get_container()
    container.event_publisher().clear()
    return container


@pytest.fixture
def super_user(container):
    """Conta SuperUser semeada diretamente pelos repositórios."""
    department = DepartmentEntity.create("Diretoria")
    container.department_repository().add(department)
    job_title = JobTitleEntity.create("Administrador", 999)
    container.job_title_repository().add(job_title)

    employee = EmployeeEntity.create(
        first_name="Root",
        last_name="Admin",
        email=Email("root@acme.com"),
        document_number=DocumentNumber("93541134780"),
        date_of_birth=DateOfBirth(date(1980, 1, 1)),
        phones=[PhoneNumber("(11) 3456-7890")],
        job_title_id=job_title.id,
        department_id=department.id,
    )
    container.employee_repository().add(employee)

    role = container.role_service().get_or_create_role_for_level(HierarchicalRole.SUPER_USER)
    account = UserAccountEntity.create(
        user_name=employee.email.value,
        password_hash=container.password_hasher().hash("Root@1234"),
        employee_id=employee.id,
        roles=[role],
    )
    container.user_account_repository().add(account)
    return account


def new_employee_dto(department_id, job_title_id, **overrides):
    data = {
        "first_name": "Ana",
        "last_name": "Silva",
        "email": "ana.silva@acme.com",
        "document_number": "529.982.247-25",
        "date_of_birth": "1990-05-17",
        "phones": ("(11) 98765-4321",),
        "job_title_id": job_title_id,
        "department_id": department_id,
        "password": "Senha123",
    }
    data.update(overrides)
    return CreateEmployeeInputDTO(**data)


class TestPersonnelLifecycle:
    """Cadastro, hierarquia, autenticação e desligamento."""

    def test_full_flow(self, container, super_user):
        # Estrutura organizacional
        department = container.create_department_service().execute(
            CreateDepartmentInputDTO(name="Engenharia"), actor_id=super_user.id
        )
        director_title = container.create_job_title_service().execute(
            CreateJobTitleInputDTO(name="Diretor de Engenharia", hierarchy_level=1),
            actor_id=super_user.id,
        )
        senior_title = container.create_job_title_service().execute(
            CreateJobTitleInputDTO(name="Engenheiro Sênior", hierarchy_level=3),
            actor_id=super_user.id,
        )
        assert director_title.role_level == "Director"

        # SuperUser cadastra o diretor
        director = container.create_employee_service().execute(
            new_employee_dto(
                department.id,
                director_title.id,
                first_name="Bruno",
                email="Bruno@Acme.com",
                document_number="111.444.777-35",
            ),
            actor_id=super_user.id,
        )
        assert director.roles == ("Director",)

        director_login = container.authenticate_service().execute(
            AuthenticateInputDTO(email="bruno@acme.com", password="Senha123")
        )
        assert director_login.highest_role_level == "Director"

        # Diretor cadastra um sênior subordinado a ele
        senior = container.create_employee_service().execute(
            new_employee_dto(department.id, senior_title.id, manager_id=director.id),
            actor_id=director_login.account_id,
        )
        assert senior.manager_id == director.id

        subordinates = container.list_employees_service().execute(
            ListEmployeesQueryDTO(manager_id=director.id)
        )
        assert [e.id for e in subordinates.items] == [senior.id]

        # Sênior não pode cadastrar diretor
        senior_login = container.authenticate_service().execute(
            AuthenticateInputDTO(email="ana.silva@acme.com", password="Senha123")
        )
        with pytest.raises(PermissionDeniedError):
            container.create_employee_service().execute(
                new_employee_dto(
                    department.id,
                    director_title.id,
                    email="outro@acme.com",
                    document_number="52998224725",
                ),
                actor_id=senior_login.account_id,
            )

        # Diretor atualiza telefones do sênior
        updated = container.update_employee_service().execute(
            UpdateEmployeeInputDTO(
                employee_id=senior.id,
                first_name="Ana",
                last_name="Silva",
                email="ana.silva@acme.com",
                document_number="52998224725",
                date_of_birth="1990-05-17",
                phones=("(11) 3456-7890 ramal 12", "(21) 99876-5432"),
                job_title_id=senior_title.id,
                department_id=department.id,
                manager_id=director.id,
            ),
            actor_id=director_login.account_id,
        )
        assert set(updated.phones) == {"+551134567890", "+5521998765432"}

        # Troca de senha pelo próprio usuário
        container.change_password_service().execute(
            ChangePasswordInputDTO(
                email="ana.silva@acme.com",
                current_password="Senha123",
                new_password="NovaSenha@1",
                confirm_new_password="NovaSenha@1",
            )
        )
        container.authenticate_service().execute(
            AuthenticateInputDTO(email="ana.silva@acme.com", password="NovaSenha@1")
        )

        # Desligamento lógico bloqueia o login
        deactivated = container.deactivate_employee_service().execute(
            senior.id, actor_id=director_login.account_id
        )
        assert not deactivated.is_active
        with pytest.raises(InvalidCredentialsError):
            container.authenticate_service().execute(
                AuthenticateInputDTO(email="ana.silva@acme.com", password="NovaSenha@1")
            )

        stored = container.get_employee_service().execute(senior.id)
        assert not stored.is_active

        published = {e.event_type for e in container.event_publisher().published_events}
        assert {
            "EmployeeCreatedEvent",
            "EmployeeUpdatedEvent",
            "PasswordChangedEvent",
            "EmployeeDeactivatedEvent",
        } <= published

    def test_duplicate_email_leaves_no_partial_records(self, container, super_user):
        department_id = container.department_repository().list_all()[0].id
        job_title = container.create_job_title_service().execute(
            CreateJobTitleInputDTO(name="Analista", hierarchy_level=4),
            actor_id=super_user.id,
        )
        service = container.create_employee_service()
        service.execute(new_employee_dto(department_id, job_title.id), actor_id=super_user.id)

        with pytest.raises(EmailInUseError):
            container.create_employee_service().execute(
                new_employee_dto(
                    department_id,
                    job_title.id,
                    email="ANA.SILVA@acme.com",
                    document_number="11144477735",
                ),
                actor_id=super_user.id,
            )

        emails = [e.email for e in container.list_employees_service().execute().items]
        assert sorted(emails) == ["ana.silva@acme.com", "root@acme.com"]
