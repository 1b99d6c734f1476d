"""
Testes da montagem do container de dependências.
"""

from datetime import timedelta
from unittest.mock import Mock

from dependency_injector import providers

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.personnel.repositories import DjangoEmployeeRepository
from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.config.container import create_testing_container, get_container, reset_container
from src.core.access_control.entities import HierarchicalRole, Role
from src.core.organization.dtos import (
    CreateDepartmentInputDTO,
    CreateJobTitleInputDTO,
    UpdateJobTitleInputDTO,
)
from src.core.personnel.entities import UserAccountEntity
from src.core.personnel.ports import InMemoryEmployeeRepository
from src.core.personnel.role_sync import AccountRoleSynchronizer


class TestTestingContainer:

    def test_policy_from_personnel_block(self):
        container = create_testing_container({"MAX_FAILED_ACCESS_ATTEMPTS": 2, "LOCKOUT_MINUTES": 5})

        policy = container.policy()

        assert policy.max_failed_access_attempts == 2
        assert policy.lockout_duration == timedelta(minutes=5)

    def test_in_memory_overrides(self):
        container = create_testing_container()

        assert isinstance(container.employee_repository(), InMemoryEmployeeRepository)
        assert container.employee_repository() is container.employee_repository()
        assert isinstance(container.event_publisher(), InMemoryEventPublisher)
        assert isinstance(container.unit_of_work(), InMemoryUnitOfWork)
        assert container.unit_of_work() is not container.unit_of_work()

    def test_services_share_stores_and_publish(self):
        container = create_testing_container()
        role = Role.for_level(HierarchicalRole.MANAGER)
        container.role_repository().add(role)
        actor = UserAccountEntity.create("gestor@acme.com", "hash", "emp-1", [role])
        container.user_account_repository().add(actor)

        output = container.create_department_service().execute(
            CreateDepartmentInputDTO(name="Financeiro"), actor_id=actor.id
        )

        assert container.department_repository().exists(output.id)
        events = container.event_publisher().published_events
        assert [e.aggregate_id for e in events] == [output.id]

    def test_query_services_and_role_resync_are_wired(self):
        container = create_testing_container()
        role = Role.for_level(HierarchicalRole.SUPER_USER)
        container.role_repository().add(role)
        actor = UserAccountEntity.create("root@acme.com", "hash", "emp-1", [role])
        container.user_account_repository().add(actor)

        job_title = container.create_job_title_service().execute(
            CreateJobTitleInputDTO(name="Analista", hierarchy_level=4), actor_id=actor.id
        )
        container.update_job_title_service().execute(
            UpdateJobTitleInputDTO(job_title_id=job_title.id, name="Analista", hierarchy_level=3),
            actor_id=actor.id,
        )

        assert container.get_job_title_service().execute(job_title.id).role_level == "Senior"
        assert container.list_job_titles_service().execute().total == 1
        assert container.list_departments_service().execute().total == 0
        assert isinstance(container.update_job_title_service().role_synchronizer, AccountRoleSynchronizer)

    def test_publisher_override_reaches_unit_of_work(self):
        container = create_testing_container()
        publisher = Mock()
        container.event_publisher.override(providers.Object(publisher))
        role = Role.for_level(HierarchicalRole.DIRECTOR)
        container.role_repository().add(role)
        actor = UserAccountEntity.create("diretor@acme.com", "hash", "emp-1", [role])
        container.user_account_repository().add(actor)

        container.create_department_service().execute(
            CreateDepartmentInputDTO(name="Jurídico"), actor_id=actor.id
        )

        publisher.publish_batch.assert_called_once()
        (events,), _ = publisher.publish_batch.call_args
        assert events[0].event_type == "DepartmentCreatedEvent"


class TestApplicationContainer:

    def test_global_container_uses_settings(self):
        container = get_container()

        assert container is get_container()
        assert isinstance(container.employee_repository(), DjangoEmployeeRepository)
        assert isinstance(container.event_publisher(), InMemoryEventPublisher)
        assert container.policy().max_failed_access_attempts == 5

    def test_reset_container(self):
        first = get_container()

        reset_container()

        assert get_container() is not first
