"""
Sincronização de papéis com o nível do cargo.

O papel de uma conta é derivado do nível do cargo do colaborador. Quando
o nível de um cargo muda, as contas de todos os ocupantes recebem o papel
do novo nível.
"""

import logging

from src.core.access_control.entities import HierarchicalRole
from src.core.access_control.services import RoleManagementService

from .ports import EmployeeRepository, UserAccountRepository

logger = logging.getLogger(__name__)


class AccountRoleSynchronizer:
    """
    Atende ao port JobTitleRoleSynchronizer do domínio organizacional.

    Example:
        sync = AccountRoleSynchronizer(employee_repo, account_repo, role_service)
        sync.sync_roles(job_title.id, HierarchicalRole.SENIOR)
    """

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        account_repo: UserAccountRepository,
        role_service: RoleManagementService,
    ):
        self.employee_repo = employee_repo
        self.account_repo = account_repo
        self.role_service = role_service

    def sync_roles(self, job_title_id: str, level: HierarchicalRole) -> int:
        occupants = self.employee_repo.list_by_job_title(job_title_id)
        if not occupants:
            return 0

        role = self.role_service.get_or_create_role_for_level(level)
        changed = 0
        for employee in occupants:
            account = self.account_repo.get_by_employee_id(employee.id)
            if account is None:
                continue
            before = account.updated_at
            account.replace_roles([role])
            if account.updated_at is not before:
                self.account_repo.update(account)
                changed += 1

        logger.info(f"JobTitle {job_title_id}: {changed} account(s) moved to role {level.value}")
        return changed
