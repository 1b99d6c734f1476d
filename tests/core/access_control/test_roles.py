"""
Testes Unitários para o Domínio de Controle de Acesso.

Coverage:
- HierarchicalRole: ordem total, mapeamento de níveis de cargo
- can_create_role: reflexividade e monotonicidade
- Role: permissões padrão, normalização, SuperUser
- RoleManagementService: get-or-create por nível (inclusive corrida na criação)
"""

import pytest

from src.core.access_control.entities import (
    HierarchicalRole,
    Role,
    can_create_role,
    default_permissions_for,
)
from src.core.access_control.ports import InMemoryRoleRepository
from src.core.access_control.services import RoleManagementService
from src.core.shared.exceptions import ConflictError, InvalidFormatError, ValidationError


ORDERED_LEVELS = [
    HierarchicalRole.JUNIOR,
    HierarchicalRole.PLENO,
    HierarchicalRole.SENIOR,
    HierarchicalRole.MANAGER,
    HierarchicalRole.DIRECTOR,
    HierarchicalRole.SUPER_USER,
]


class TestHierarchicalRoleOrdering:
    """Testes da escala hierárquica."""

    def test_sorted_follows_authority(self):
        """Ordenação segue a autoridade, não a ordem alfabética."""
        shuffled = list(reversed(ORDERED_LEVELS))
        assert sorted(shuffled) == ORDERED_LEVELS

    def test_rank_values(self):
        assert HierarchicalRole.JUNIOR.rank == 1
        assert HierarchicalRole.DIRECTOR.rank == 5
        assert HierarchicalRole.SUPER_USER.rank == 999

    def test_comparison_operators(self):
        assert HierarchicalRole.MANAGER > HierarchicalRole.SENIOR
        assert HierarchicalRole.PLENO <= HierarchicalRole.PLENO
        assert HierarchicalRole.SUPER_USER >= HierarchicalRole.DIRECTOR

    def test_lowest_is_junior(self):
        assert HierarchicalRole.lowest() == HierarchicalRole.JUNIOR
        assert min(ORDERED_LEVELS) == HierarchicalRole.lowest()

    def test_from_string_accepts_name_and_value(self):
        assert HierarchicalRole.from_string("super_user") == HierarchicalRole.SUPER_USER
        assert HierarchicalRole.from_string("SuperUser") == HierarchicalRole.SUPER_USER
        assert HierarchicalRole.from_string("manager") == HierarchicalRole.MANAGER

    def test_from_string_invalid_raises(self):
        with pytest.raises(ValueError):
            HierarchicalRole.from_string("Estagiario")


class TestJobTitleLevelMapping:
    """Mapeamento de JobTitle.hierarchy_level para a escala."""

    @pytest.mark.parametrize("level, expected", [
        (999, HierarchicalRole.SUPER_USER),
        (1, HierarchicalRole.DIRECTOR),
        (2, HierarchicalRole.MANAGER),
        (3, HierarchicalRole.SENIOR),
        (4, HierarchicalRole.PLENO),
        (5, HierarchicalRole.JUNIOR),
    ])
    def test_known_levels(self, level, expected):
        assert HierarchicalRole.from_job_title_level(level) == expected

    @pytest.mark.parametrize("level", [0, 6, 7, 100, -1, None])
    def test_unknown_levels_raise(self, level):
        with pytest.raises(InvalidFormatError) as exc_info:
            HierarchicalRole.from_job_title_level(level)

        assert exc_info.value.field == "hierarchy_level"


class TestCanCreateRole:
    """Predicado "igual ou inferior"."""

    @pytest.mark.parametrize("level", ORDERED_LEVELS)
    def test_reflexive(self, level):
        assert can_create_role(level, level)

    def test_monotonic(self):
        """Se cria R, cria qualquer nível de autoridade menor ou igual a R."""
        for current in ORDERED_LEVELS:
            for target in ORDERED_LEVELS:
                if can_create_role(current, target):
                    for lower in ORDERED_LEVELS:
                        if lower <= target:
                            assert can_create_role(current, lower)

    def test_super_user_acts_on_everyone(self):
        assert all(can_create_role(HierarchicalRole.SUPER_USER, t) for t in ORDERED_LEVELS)

    def test_only_super_user_acts_on_super_user(self):
        for current in ORDERED_LEVELS[:-1]:
            assert not can_create_role(current, HierarchicalRole.SUPER_USER)

    def test_junior_cannot_create_manager(self):
        assert not can_create_role(HierarchicalRole.JUNIOR, HierarchicalRole.MANAGER)

    def test_manager_can_create_senior(self):
        assert can_create_role(HierarchicalRole.MANAGER, HierarchicalRole.SENIOR)


class TestRole:
    """Testes da entidade Role."""

    def test_create_uses_level_default_permissions(self):
        role = Role.create("Manager", HierarchicalRole.MANAGER)

        assert role.permissions == default_permissions_for(HierarchicalRole.MANAGER)
        assert "employees:write" in role.permissions
        assert "departments:write" not in role.permissions
        assert role.updated_at is None

    def test_default_permissions_accumulate(self):
        junior = default_permissions_for(HierarchicalRole.JUNIOR)
        director = default_permissions_for(HierarchicalRole.DIRECTOR)

        assert junior < director

    def test_create_normalizes_permissions(self):
        role = Role.create("Custom", HierarchicalRole.PLENO, [" Reports:Read ", "", "reports:read"])

        assert role.permissions == frozenset({"reports:read"})

    def test_create_without_name_raises(self):
        with pytest.raises(ValidationError):
            Role.create("  ", HierarchicalRole.JUNIOR)

    def test_for_level_names_role_after_level(self):
        role = Role.for_level(HierarchicalRole.DIRECTOR)

        assert role.name == "Director"
        assert role.level == HierarchicalRole.DIRECTOR

    def test_add_permission_is_idempotent(self):
        role = Role.create("Pleno", HierarchicalRole.PLENO)
        role.add_permission("REPORTS:read")
        first_update = role.updated_at

        role.add_permission("reports:read")

        assert "reports:read" in role.permissions
        assert role.updated_at is first_update

    def test_remove_absent_permission_is_noop(self):
        role = Role.create("Junior", HierarchicalRole.JUNIOR)

        role.remove_permission("nao:existe")

        assert role.updated_at is None

    def test_super_user_has_every_permission(self):
        role = Role.for_level(HierarchicalRole.SUPER_USER)

        assert role.is_super_user
        assert role.has_permission("qualquer:coisa")

    def test_has_permission_is_case_insensitive(self):
        role = Role.for_level(HierarchicalRole.JUNIOR)

        assert role.has_permission("Profile:Read")
        assert not role.has_permission("roles:write")

    def test_set_level_touches_only_on_change(self):
        role = Role.for_level(HierarchicalRole.SENIOR)
        role.set_level(HierarchicalRole.SENIOR)
        assert role.updated_at is None

        role.set_level(HierarchicalRole.MANAGER)
        assert role.level == HierarchicalRole.MANAGER
        assert role.updated_at is not None

    def test_can_modify_user_uses_same_rule(self):
        role = Role.for_level(HierarchicalRole.MANAGER)

        assert role.can_modify_user(HierarchicalRole.MANAGER)
        assert not role.can_modify_user(HierarchicalRole.DIRECTOR)


class TestRoleManagementService:
    """Testes do get-or-create de papéis."""

    def test_creates_role_once_per_level(self):
        repo = InMemoryRoleRepository()
        service = RoleManagementService(repo)

        first = service.get_or_create_role_for_level(HierarchicalRole.SENIOR)
        second = service.get_or_create_role_for_level(HierarchicalRole.SENIOR)

        assert first == second
        assert len(repo.list_all()) == 1

    def test_reuses_existing_role_by_name(self):
        repo = InMemoryRoleRepository()
        existing = Role.create("manager", HierarchicalRole.MANAGER)
        repo.add(existing)

        role = RoleManagementService(repo).get_or_create_role_for_level(HierarchicalRole.MANAGER)

        assert role == existing

    def test_by_job_title_level(self):
        service = RoleManagementService(InMemoryRoleRepository())

        role = service.get_or_create_role_by_job_title_level(1)

        assert role.level == HierarchicalRole.DIRECTOR

    def test_by_invalid_job_title_level_raises(self):
        service = RoleManagementService(InMemoryRoleRepository())

        with pytest.raises(InvalidFormatError):
            service.get_or_create_role_by_job_title_level(42)

    def test_duplicate_name_is_a_conflict(self):
        repo = InMemoryRoleRepository()
        repo.add(Role.for_level(HierarchicalRole.SENIOR))

        with pytest.raises(ConflictError) as exc_info:
            repo.add(Role.create("SENIOR", HierarchicalRole.SENIOR))

        assert exc_info.value.field == "name"

    def test_concurrently_created_role_is_reused(self):
        winner = Role.for_level(HierarchicalRole.PLENO)
        repo = _ConcurrentCreatorRepository(winner)

        role = RoleManagementService(repo).get_or_create_role_for_level(HierarchicalRole.PLENO)

        assert role == winner
        assert repo.list_all() == [winner]


class _ConcurrentCreatorRepository(InMemoryRoleRepository):
    """Outra requisição grava o papel entre a busca e a escrita."""

    def __init__(self, winner: Role):
        super().__init__()
        self.winner = winner
        self.lookups = 0

    def get_by_name(self, name):
        self.lookups += 1
        if self.lookups == 1:
            self._roles[self.winner.id] = self.winner
            return None
        return super().get_by_name(name)
