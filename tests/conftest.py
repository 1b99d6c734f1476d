"""
Configurações globais do Pytest para Company Manager.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas:
- Stores em memória de todos os domínios
- Cargos de todos os níveis e um departamento padrão
- Fábricas de CPF/telefone válidos e de atores com papel
"""

from datetime import date
import itertools
from pathlib import Path

import pytest

from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.core.access_control.entities import HierarchicalRole
from src.core.access_control.ports import InMemoryRoleRepository
from src.core.access_control.services import RoleManagementService
from src.core.organization.entities import DepartmentEntity, JobTitleEntity
from src.core.organization.ports import InMemoryDepartmentRepository, InMemoryJobTitleRepository
from src.core.personnel.dtos import CreateEmployeeInputDTO
from src.core.personnel.entities import EmployeeEntity, UserAccountEntity
from src.core.personnel.ports import InMemoryEmployeeRepository, InMemoryUserAccountRepository
from src.core.personnel.value_objects import (
    DateOfBirth,
    DocumentNumber,
    Email,
    PhoneNumber,
    cpf_check_digit,
)

JOB_TITLE_LEVELS = {
    HierarchicalRole.DIRECTOR: 1,
    HierarchicalRole.MANAGER: 2,
    HierarchicalRole.SENIOR: 3,
    HierarchicalRole.PLENO: 4,
    HierarchicalRole.JUNIOR: 5,
    HierarchicalRole.SUPER_USER: 999,
}

DEFAULT_PASSWORD = "Senha123"


class FakePasswordHasher:
    """Hasher determinístico para testes (nunca usar em produção)."""

    def hash(self, plaintext: str) -> str:
        return f"hashed:{plaintext}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == f"hashed:{plaintext}"


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset de singletons entre testes.

    Garante que cada teste inicia com um container limpo.
    """
    yield
    from src.config.container import reset_container
    reset_container()


# =============================================================================
# Geradores de dados válidos
# =============================================================================

@pytest.fixture
def cpf_factory():
    """Gera CPFs válidos e distintos (somente dígitos)."""
    counter = itertools.count(100000001)

    def make() -> str:
        base = f"{next(counter):09d}"
        first = cpf_check_digit(base)
        second = cpf_check_digit(base + str(first))
        return f"{base}{first}{second}"

    return make


@pytest.fixture
def phone_factory():
    """Gera celulares brasileiros válidos e distintos (DDD 11)."""
    counter = itertools.count(1)

    def make() -> str:
        return f"1199{next(counter):07d}"

    return make


# =============================================================================
# Stores em memória
# =============================================================================

@pytest.fixture
def role_repo():
    return InMemoryRoleRepository()


@pytest.fixture
def department_repo():
    return InMemoryDepartmentRepository()


@pytest.fixture
def job_title_repo():
    return InMemoryJobTitleRepository()


@pytest.fixture
def employee_repo():
    return InMemoryEmployeeRepository()


@pytest.fixture
def account_repo():
    return InMemoryUserAccountRepository()


@pytest.fixture
def uow():
    """Unit of Work em memória (registra commit/rollback e eventos)."""
    return InMemoryUnitOfWork()


@pytest.fixture
def hasher():
    return FakePasswordHasher()


@pytest.fixture
def role_service(role_repo):
    return RoleManagementService(role_repo)


# =============================================================================
# Dados organizacionais
# =============================================================================

@pytest.fixture
def department(department_repo):
    """Departamento padrão já persistido."""
    department = DepartmentEntity.create("Tecnologia", "Desenvolvimento de sistemas")
    department_repo.add(department)
    return department


@pytest.fixture
def job_titles(job_title_repo):
    """Um cargo persistido para cada nível da escala."""
    titles = {}
    for role_level, hierarchy_level in JOB_TITLE_LEVELS.items():
        job_title = JobTitleEntity.create(f"Cargo {role_level.value}", hierarchy_level)
        job_title_repo.add(job_title)
        titles[role_level] = job_title
    return titles


# =============================================================================
# Atores e requisições
# =============================================================================

@pytest.fixture
def make_actor(
    employee_repo, account_repo, role_service, hasher, department, job_titles,
    cpf_factory, phone_factory,
):
    """
    Cria colaborador + conta com o papel do nível informado.

    Example:
        director = make_actor(HierarchicalRole.DIRECTOR)
        service.execute(dto, actor_id=director.id)
    """
    counter = itertools.count(1)

    def make(level: HierarchicalRole, email: str = None, password: str = DEFAULT_PASSWORD):
        number = next(counter)
        employee = EmployeeEntity.create(
            first_name="Ator",
            last_name=f"{level.value} {number}",
            email=Email(email or f"{level.value.lower()}.{number}@acme.com"),
            document_number=DocumentNumber(cpf_factory()),
            date_of_birth=DateOfBirth(date(1985, 3, 10)),
            phones=[PhoneNumber(phone_factory())],
            job_title_id=job_titles[level].id,
            department_id=department.id,
        )
        employee_repo.add(employee)
        role = role_service.get_or_create_role_for_level(level)
        account = UserAccountEntity.create(
            user_name=employee.email.value,
            password_hash=hasher.hash(password),
            employee_id=employee.id,
            roles=[role],
        )
        account_repo.add(account)
        return account

    return make


@pytest.fixture
def employee_input(department, job_titles):
    """
    Fábrica de CreateEmployeeInputDTO válido, com overrides por campo.

    Padrão: colaborador Senior no departamento padrão.
    """
    def make(**overrides) -> CreateEmployeeInputDTO:
        data = {
            "first_name": "Ana",
            "last_name": "Silva",
            "email": "ana.silva@acme.com",
            "document_number": "529.982.247-25",
            "date_of_birth": "1990-05-17",
            "phones": ("(11) 98765-4321",),
            "job_title_id": job_titles[HierarchicalRole.SENIOR].id,
            "department_id": department.id,
            "password": DEFAULT_PASSWORD,
        }
        data.update(overrides)
        return CreateEmployeeInputDTO(**data)

    return make


# =============================================================================
# Configuração do pytest
# =============================================================================

def pytest_configure(config):
    """Configuração do pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    skip_integration = pytest.mark.skip(reason="use --run-integration para executar")

    for item in items:
        if "integration" in item.keywords:
            if not config.getoption("--run-integration", default=False):
                item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
