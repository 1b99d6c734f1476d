"""
Dependency Injection Container.

Configura e gerencia as dependências da aplicação com
dependency-injector.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher, hasher)
- Factory: Nova instância por chamada (services, UoW, validators)
- Configuration: bloco PERSONNEL e EVENT_PUBLISHER_MODE das settings

Adapters Django são importados sob demanda, para que o núcleo possa
ser montado (e testado) sem carregar o ORM.
"""

from typing import Optional

from dependency_injector import containers, providers

from src.core.access_control.services import RoleManagementService
from src.core.organization.use_cases import (
    CreateDepartmentService,
    CreateJobTitleService,
    DeactivateDepartmentService,
    GetDepartmentService,
    GetJobTitleService,
    ListDepartmentsService,
    ListJobTitlesService,
    UpdateDepartmentService,
    UpdateJobTitleService,
)
from src.core.personnel.authorization import HierarchicalAuthorizationService
from src.core.personnel.policies import PersonnelPolicy
from src.core.personnel.role_sync import AccountRoleSynchronizer
from src.core.personnel.use_cases import (
    AuthenticateService,
    ChangePasswordService,
    CreateEmployeeService,
    DeactivateEmployeeService,
    GetEmployeeService,
    ListEmployeesService,
    UpdateEmployeeService,
)
from src.core.personnel.validators import (
    ChangePasswordRequestValidator,
    EmployeeRequestValidator,
)

_REPOSITORIES = 'src.adapters.django_app.personnel.repositories'


def _lazy(module: str, name: str):
    """Callable que importa `module.name` somente quando invocado."""
    def build(*args, **kwargs):
        return getattr(__import__(module, fromlist=[name]), name)(*args, **kwargs)
    return build


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do Django
    - Infrastructure: publisher, hasher
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.create_employee_service()
        output = service.execute(input_dto, actor_id=current_account_id)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    policy = providers.Singleton(
        PersonnelPolicy.from_settings,
        config.personnel,
    )

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy('src.adapters.django_app.events.publishers', 'get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    password_hasher = providers.Singleton(
        _lazy('src.adapters.django_app.shared.hashers', 'DjangoPasswordHasher'),
    )

    # =========================================================================
    # Repositories
    # =========================================================================

    department_repository = providers.Singleton(
        _lazy(_REPOSITORIES, 'DjangoDepartmentRepository'),
    )

    job_title_repository = providers.Singleton(
        _lazy(_REPOSITORIES, 'DjangoJobTitleRepository'),
    )

    role_repository = providers.Singleton(
        _lazy(_REPOSITORIES, 'DjangoRoleRepository'),
    )

    employee_repository = providers.Singleton(
        _lazy(_REPOSITORIES, 'DjangoEmployeeRepository'),
    )

    user_account_repository = providers.Singleton(
        _lazy(_REPOSITORIES, 'DjangoUserAccountRepository'),
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Domain services
    # =========================================================================

    role_service = providers.Factory(
        RoleManagementService,
        role_repo=role_repository,
    )

    authorization_service = providers.Factory(
        HierarchicalAuthorizationService,
        account_repo=user_account_repository,
    )

    role_synchronizer = providers.Factory(
        AccountRoleSynchronizer,
        employee_repo=employee_repository,
        account_repo=user_account_repository,
        role_service=role_service,
    )

    employee_validator = providers.Factory(EmployeeRequestValidator, policy=policy)

    change_password_validator = providers.Factory(ChangePasswordRequestValidator, policy=policy)

    # =========================================================================
    # Use Cases - Pessoal
    # =========================================================================

    create_employee_service = providers.Factory(
        CreateEmployeeService,
        employee_repo=employee_repository,
        account_repo=user_account_repository,
        department_repo=department_repository,
        job_title_repo=job_title_repository,
        role_service=role_service,
        hasher=password_hasher,
        uow=unit_of_work,
        validator=employee_validator,
    )

    update_employee_service = providers.Factory(
        UpdateEmployeeService,
        employee_repo=employee_repository,
        account_repo=user_account_repository,
        department_repo=department_repository,
        job_title_repo=job_title_repository,
        role_service=role_service,
        hasher=password_hasher,
        uow=unit_of_work,
        validator=employee_validator,
    )

    deactivate_employee_service = providers.Factory(
        DeactivateEmployeeService,
        employee_repo=employee_repository,
        account_repo=user_account_repository,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    get_employee_service = providers.Factory(
        GetEmployeeService,
        employee_repo=employee_repository,
        account_repo=user_account_repository,
    )

    list_employees_service = providers.Factory(
        ListEmployeesService,
        employee_repo=employee_repository,
    )

    change_password_service = providers.Factory(
        ChangePasswordService,
        account_repo=user_account_repository,
        hasher=password_hasher,
        uow=unit_of_work,
        validator=change_password_validator,
    )

    authenticate_service = providers.Factory(
        AuthenticateService,
        account_repo=user_account_repository,
        hasher=password_hasher,
        uow=unit_of_work,
        policy=policy,
    )

    # =========================================================================
    # Use Cases - Organização
    # =========================================================================

    create_department_service = providers.Factory(
        CreateDepartmentService,
        department_repo=department_repository,
        authorizer=authorization_service,
        uow=unit_of_work,
    )

    update_department_service = providers.Factory(
        UpdateDepartmentService,
        department_repo=department_repository,
        authorizer=authorization_service,
        uow=unit_of_work,
    )

    deactivate_department_service = providers.Factory(
        DeactivateDepartmentService,
        department_repo=department_repository,
        authorizer=authorization_service,
        uow=unit_of_work,
    )

    create_job_title_service = providers.Factory(
        CreateJobTitleService,
        job_title_repo=job_title_repository,
        authorizer=authorization_service,
        uow=unit_of_work,
    )

    update_job_title_service = providers.Factory(
        UpdateJobTitleService,
        job_title_repo=job_title_repository,
        authorizer=authorization_service,
        role_synchronizer=role_synchronizer,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    get_department_service = providers.Factory(
        GetDepartmentService,
        department_repo=department_repository,
    )

    list_departments_service = providers.Factory(
        ListDepartmentsService,
        department_repo=department_repository,
    )

    get_job_title_service = providers.Factory(
        GetJobTitleService,
        job_title_repo=job_title_repository,
    )

    list_job_titles_service = providers.Factory(
        ListJobTitlesService,
        job_title_repo=job_title_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, configurando-a a partir das settings do Django.
    """
    global _container

    if _container is None:
        from django.conf import settings

        _container = Container()
        _container.config.from_dict({
            'personnel': getattr(settings, 'PERSONNEL', {}),
            'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'logging'),
        })

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def create_testing_container(personnel: Optional[dict] = None) -> Container:
    """
    Container com stores em memória para testes rápidos.

    Repositories e UoW são substituídos via override; o restante da
    montagem é o mesmo da aplicação.

    Example:
        container = create_testing_container()
        container.role_repository().add(Role.for_level(HierarchicalRole.DIRECTOR))
    """
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    from src.core.access_control.ports import InMemoryRoleRepository
    from src.core.organization.ports import (
        InMemoryDepartmentRepository,
        InMemoryJobTitleRepository,
    )
    from src.core.personnel.ports import (
        InMemoryEmployeeRepository,
        InMemoryUserAccountRepository,
    )

    container = Container()
    container.config.from_dict({
        'personnel': personnel or {},
        'event_publisher_mode': 'memory',
    })

    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.department_repository.override(providers.Singleton(InMemoryDepartmentRepository))
    container.job_title_repository.override(providers.Singleton(InMemoryJobTitleRepository))
    container.role_repository.override(providers.Singleton(InMemoryRoleRepository))
    container.employee_repository.override(providers.Singleton(InMemoryEmployeeRepository))
    container.user_account_repository.override(
        providers.Singleton(InMemoryUserAccountRepository)
    )
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )

    return container
