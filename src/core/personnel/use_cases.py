"""
Use Cases (Application Services) do Domínio de Pessoal.

Este módulo contém os casos de uso que orquestram colaboradores e
contas de usuário, coordenando validação, autorização hierárquica,
verificações de existência/unicidade e persistência atômica.

Use Cases implementados:
- CreateEmployeeService: Cadastra colaborador e conta juntos
- UpdateEmployeeService: Atualiza colaborador (e conta vinculada)
- DeactivateEmployeeService: Desligamento lógico
- GetEmployeeService: Obtém colaborador
- ListEmployeesService: Lista colaboradores com filtros e paginação
- ChangePasswordService: Troca de senha pelo próprio usuário
- AuthenticateService: Verificação de credenciais com bloqueio

Política de erros:
- Erros de campo são coletados e reportados juntos (RequestValidationError)
- Demais verificações falham no primeiro problema, na ordem documentada
- Nada é repetido automaticamente; qualquer falha encerra a requisição
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.cancellation import CancellationToken, check_cancelled
from src.core.shared.pagination import PageResult
from src.core.shared.exceptions import (
    AccountLockedError,
    BusinessRuleViolationError,
    DocumentInUseError,
    EmailInUseError,
    EntityNotFoundError,
    InvalidCredentialsError,
    InvalidFormatError,
)
from src.core.access_control.services import RoleManagementService
from src.core.organization.ports import DepartmentRepository, JobTitleRepository
from src.core.organization.entities import JobTitleEntity

from .authorization import HierarchicalAuthorizationService
from .entities import EmployeeEntity, UserAccountEntity
from .ports import EmployeeRepository, PasswordHasher, UserAccountRepository
from .policies import PersonnelPolicy
from .validators import ChangePasswordRequestValidator, EmployeeRequestValidator
from .value_objects import Email
from .dtos import (
    AuthenticateInputDTO,
    AuthenticationResultDTO,
    ChangePasswordInputDTO,
    CreateEmployeeInputDTO,
    EmployeeOutputDTO,
    ListEmployeesQueryDTO,
    UpdateEmployeeInputDTO,
)
from .events import (
    AccountLockedOutEvent,
    EmployeeCreatedEvent,
    EmployeeDeactivatedEvent,
    EmployeeUpdatedEvent,
    PasswordChangedEvent,
)

logger = logging.getLogger(__name__)


def _get_job_title(repo: JobTitleRepository, job_title_id: str) -> JobTitleEntity:
    job_title = repo.get_by_id(job_title_id)
    if not job_title:
        raise EntityNotFoundError(
            f"Cargo {job_title_id} não encontrado",
            entity_type="JobTitle",
            entity_id=job_title_id,
        )
    return job_title


def _ensure_department_exists(repo: DepartmentRepository, department_id: str) -> None:
    if not repo.exists(department_id):
        raise EntityNotFoundError(
            f"Departamento {department_id} não encontrado",
            entity_type="Department",
            entity_id=department_id,
        )


def _get_employee(repo: EmployeeRepository, employee_id: str) -> EmployeeEntity:
    employee = repo.get_by_id(employee_id)
    if not employee:
        raise EntityNotFoundError(
            f"Colaborador {employee_id} não encontrado",
            entity_type="Employee",
            entity_id=employee_id,
        )
    return employee


def _get_account_for(repo: UserAccountRepository, employee_id: str) -> UserAccountEntity:
    account = repo.get_by_employee_id(employee_id)
    if not account:
        raise EntityNotFoundError(
            f"Conta do colaborador {employee_id} não encontrada",
            entity_type="UserAccount",
            entity_id=employee_id,
        )
    return account


class CreateEmployeeService:
    """
    Use Case: Cadastrar colaborador e sua conta de usuário.

    Fluxo (falha na primeira violação, nesta ordem):
    1. Validação estrutural da requisição (todos os erros juntos)
    2. Resolver o ator (ActorNotFoundError)
    3. Converter o nível do cargo em HierarchicalRole e verificar se o
       ator pode atribuí-lo (PermissionDeniedError)
    4. Verificar departamento e gestor (EntityNotFoundError)
    5. E-mail normalizado não utilizado (EmailInUseError)
    6. CPF não utilizado (DocumentInUseError)
    7. Criar colaborador e conta com o papel resolvido, na mesma transação

    A corrida entre as verificações 5/6 e a escrita é fechada pelas
    restrições de unicidade do store, que também resultam em
    EmailInUseError/DocumentInUseError.

    Example:
        output = service.execute(input_dto, actor_id=current_account_id)
        print(output.id, output.roles)
    """

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        account_repo: UserAccountRepository,
        department_repo: DepartmentRepository,
        job_title_repo: JobTitleRepository,
        role_service: RoleManagementService,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        validator: Optional[EmployeeRequestValidator] = None,
    ):
        self.employee_repo = employee_repo
        self.account_repo = account_repo
        self.department_repo = department_repo
        self.job_title_repo = job_title_repo
        self.role_service = role_service
        self.hasher = hasher
        self.uow = uow
        self.validator = validator or EmployeeRequestValidator()
        self.authorization = HierarchicalAuthorizationService(account_repo)

    def execute(
        self,
        input_dto: CreateEmployeeInputDTO,
        actor_id: str,
        cancellation: Optional[CancellationToken] = None,
    ) -> EmployeeOutputDTO:
        """
        Executa o cadastro em transação atômica.

        Args:
            input_dto: Dados brutos da requisição
            actor_id: Conta do usuário que está cadastrando
            cancellation: Sinal de cancelamento opcional

        Returns:
            DTO com colaborador criado e resumo da conta

        Raises:
            RequestValidationError: Erros de campo
            ActorNotFoundError: Ator inexistente
            EntityNotFoundError: Cargo, departamento ou gestor inexistente
            PermissionDeniedError: Ator não pode atribuir o nível do cargo
            EmailInUseError / DocumentInUseError: Unicidade violada
            OperationCancelledError: Cancelado antes da escrita
        """
        fields = self.validator.validate_create(input_dto)
        check_cancelled(cancellation)

        actor = self.authorization.resolve_actor(actor_id)

        job_title = _get_job_title(self.job_title_repo, input_dto.job_title_id)
        target_level = job_title.role_level
        self.authorization.ensure_can_create(actor, target_level)
        check_cancelled(cancellation)

        _ensure_department_exists(self.department_repo, input_dto.department_id)
        if input_dto.manager_id:
            _get_employee(self.employee_repo, input_dto.manager_id)
        check_cancelled(cancellation)

        if self.employee_repo.email_exists(fields.email.value):
            logger.warning(f"Create employee rejected: email in use ({fields.email.value})")
            raise EmailInUseError(fields.email.value)
        if self.employee_repo.cpf_exists(fields.document_number.digits):
            logger.warning("Create employee rejected: document in use")
            raise DocumentInUseError(fields.document_number.formatted)

        password_hash = self.hasher.hash(input_dto.password)

        with self.uow:
            check_cancelled(cancellation)

            employee = EmployeeEntity.create(
                first_name=fields.first_name,
                last_name=fields.last_name,
                email=fields.email,
                document_number=fields.document_number,
                date_of_birth=fields.date_of_birth,
                phones=fields.phones,
                job_title_id=job_title.id,
                department_id=input_dto.department_id,
                manager_id=input_dto.manager_id,
            )
            role = self.role_service.get_or_create_role_for_level(target_level)
            account = UserAccountEntity.create(
                user_name=employee.email.value,
                password_hash=password_hash,
                employee_id=employee.id,
                roles=[role],
            )

            self.employee_repo.add(employee)
            self.account_repo.add(account)

            self.uow.publish_event(
                EmployeeCreatedEvent(
                    aggregate_id=employee.id,
                    user_account_id=account.id,
                    email=employee.email.value,
                    role=role.name,
                    created_by_id=actor.id,
                )
            )

        logger.info(
            f"Employee {employee.id} created by {actor.id} with role {role.name}"
        )
        return EmployeeOutputDTO.from_entity(employee, account)


class UpdateEmployeeService:
    """
    Use Case: Atualizar colaborador.

    Fluxo:
    1. Validação estrutural (todos os erros juntos)
    2. Resolver ator; carregar colaborador e conta (EntityNotFoundError)
    3. O ator precisa alcançar o nível ATUAL da conta alvo, para qualquer
       alteração (inclusive redefinição de senha)
    4. Troca de cargo: o ator precisa alcançar também o novo nível
    5. Departamento existe
    6. Unicidade de e-mail/CPF, apenas se o valor normalizado mudou
    7. Gestor existe e não forma ciclo na cadeia de gestão
    8. Aplicar mudanças (idempotentes) e reconciliar telefones

    Example:
        output = service.execute(update_dto, actor_id=current_account_id)
    """

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        account_repo: UserAccountRepository,
        department_repo: DepartmentRepository,
        job_title_repo: JobTitleRepository,
        role_service: RoleManagementService,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        validator: Optional[EmployeeRequestValidator] = None,
    ):
        self.employee_repo = employee_repo
        self.account_repo = account_repo
        self.department_repo = department_repo
        self.job_title_repo = job_title_repo
        self.role_service = role_service
        self.hasher = hasher
        self.uow = uow
        self.validator = validator or EmployeeRequestValidator()
        self.authorization = HierarchicalAuthorizationService(account_repo)

    def execute(
        self,
        input_dto: UpdateEmployeeInputDTO,
        actor_id: str,
        cancellation: Optional[CancellationToken] = None,
    ) -> EmployeeOutputDTO:
        """
        Raises:
            RequestValidationError: Erros de campo
            ActorNotFoundError: Ator inexistente
            EntityNotFoundError: Colaborador, conta, cargo, departamento
                ou gestor inexistente
            PermissionDeniedError: Conta alvo ou novo cargo fora do alcance do ator
            EmailInUseError / DocumentInUseError: Unicidade violada
            BusinessRuleViolationError: Autogestão ou ciclo de gestão
            OperationCancelledError: Cancelado antes da escrita
        """
        fields = self.validator.validate_update(input_dto)
        check_cancelled(cancellation)

        actor = self.authorization.resolve_actor(actor_id)
        employee = _get_employee(self.employee_repo, input_dto.employee_id)
        account = _get_account_for(self.account_repo, employee.id)
        self.authorization.ensure_can_modify(actor, account)

        new_level = None
        if input_dto.job_title_id != employee.job_title_id:
            job_title = _get_job_title(self.job_title_repo, input_dto.job_title_id)
            new_level = job_title.role_level
            self.authorization.ensure_can_create(actor, new_level)

        check_cancelled(cancellation)

        _ensure_department_exists(self.department_repo, input_dto.department_id)

        if fields.email != employee.email and self.employee_repo.email_exists(fields.email.value):
            logger.warning(f"Update employee {employee.id} rejected: email in use")
            raise EmailInUseError(fields.email.value)
        if (
            fields.document_number != employee.document_number
            and self.employee_repo.cpf_exists(fields.document_number.digits)
        ):
            logger.warning(f"Update employee {employee.id} rejected: document in use")
            raise DocumentInUseError(fields.document_number.formatted)

        if input_dto.manager_id and input_dto.manager_id != employee.manager_id:
            self._ensure_valid_manager(employee, input_dto.manager_id)
        check_cancelled(cancellation)

        password_hash = (
            self.hasher.hash(input_dto.password) if input_dto.password is not None else None
        )

        with self.uow:
            check_cancelled(cancellation)
            employee_before = employee.updated_at
            account_before = account.updated_at

            employee.change_name(fields.first_name, fields.last_name)
            employee.change_email(fields.email)
            employee.change_document(fields.document_number)
            employee.change_date_of_birth(fields.date_of_birth)
            employee.change_job_title(input_dto.job_title_id)
            employee.change_department(input_dto.department_id)
            if input_dto.manager_id:
                subordinate_ids = [s.id for s in self.employee_repo.list_by_manager(employee.id)]
                employee.assign_manager(input_dto.manager_id, subordinate_ids)
            else:
                employee.remove_manager()
            added, removed = employee.update_phones(fields.phones)

            account.change_user_name(employee.email.value)
            if new_level is not None:
                role = self.role_service.get_or_create_role_for_level(new_level)
                account.replace_roles([role])
            if password_hash is not None:
                account.set_password_hash(password_hash)

            employee_changed = employee.updated_at is not employee_before
            account_changed = account.updated_at is not account_before
            if employee_changed:
                self.employee_repo.update(employee)
            if account_changed:
                self.account_repo.update(account)

            if employee_changed or password_hash is not None:
                self.uow.publish_event(
                    EmployeeUpdatedEvent(
                        aggregate_id=employee.id,
                        updated_by_id=actor.id,
                        phones_added=sorted(p.e164 for p in added),
                        phones_removed=sorted(p.e164 for p in removed),
                        password_reset=password_hash is not None,
                    )
                )

        if employee_changed or account_changed:
            logger.info(f"Employee {employee.id} updated by {actor.id}")
        return EmployeeOutputDTO.from_entity(employee, account)

    def _ensure_valid_manager(self, employee: EmployeeEntity, manager_id: str) -> None:
        """
        Verifica o gestor pedido percorrendo sua cadeia de gestão.

        Raises:
            BusinessRuleViolationError: Autogestão ou ciclo
            EntityNotFoundError: Gestor inexistente
        """
        if manager_id == employee.id:
            raise BusinessRuleViolationError(
                "Colaborador não pode ser gestor de si mesmo",
                rule="self_management",
            )

        current = _get_employee(self.employee_repo, manager_id)
        seen = {current.id}
        while current.manager_id:
            if current.manager_id == employee.id:
                raise BusinessRuleViolationError(
                    "Atribuição de gestor criaria referência circular",
                    rule="circular_management",
                )
            if current.manager_id in seen:
                break
            seen.add(current.manager_id)
            current = self.employee_repo.get_by_id(current.manager_id)
            if current is None:
                break


class DeactivateEmployeeService:
    """
    Use Case: Desligar colaborador (exclusão lógica).

    Desativa colaborador e conta. O ator precisa alcançar o nível
    atual da conta alvo. Idempotente.
    """

    def __init__(
        self,
        employee_repo: EmployeeRepository,
        account_repo: UserAccountRepository,
        uow: UnitOfWork,
    ):
        self.employee_repo = employee_repo
        self.account_repo = account_repo
        self.uow = uow
        self.authorization = HierarchicalAuthorizationService(account_repo)

    def execute(
        self,
        employee_id: str,
        actor_id: str,
        cancellation: Optional[CancellationToken] = None,
    ) -> EmployeeOutputDTO:
        actor = self.authorization.resolve_actor(actor_id)
        employee = _get_employee(self.employee_repo, employee_id)
        account = _get_account_for(self.account_repo, employee.id)
        self.authorization.ensure_can_modify(actor, account)

        with self.uow:
            check_cancelled(cancellation)
            if employee.is_active:
                employee.deactivate()
                self.employee_repo.update(employee)
                self.uow.publish_event(
                    EmployeeDeactivatedEvent(
                        aggregate_id=employee.id,
                        deactivated_by_id=actor.id,
                    )
                )
            if account.is_active:
                account.deactivate()
                self.account_repo.update(account)

        logger.info(f"Employee {employee.id} deactivated by {actor.id}")
        return EmployeeOutputDTO.from_entity(employee, account)


class GetEmployeeService:
    """Use Case: Obter colaborador por ID (leitura, sem UoW)."""

    def __init__(self, employee_repo: EmployeeRepository, account_repo: UserAccountRepository):
        self.employee_repo = employee_repo
        self.account_repo = account_repo

    def execute(self, employee_id: str) -> EmployeeOutputDTO:
        employee = _get_employee(self.employee_repo, employee_id)
        account = self.account_repo.get_by_employee_id(employee.id)
        return EmployeeOutputDTO.from_entity(employee, account)


class ListEmployeesService:
    """
    Use Case: Listar colaboradores com filtros e paginação (leitura, sem UoW).

    Filtros combinam em E: departamento, cargo, gestor, ativos e trecho
    do nome/sobrenome/e-mail. Ordem: nome, sobrenome.

    Example:
        page = service.execute(ListEmployeesQueryDTO(name_or_email="silva", page=2))
        page.total, page.has_next
    """

    def __init__(self, employee_repo: EmployeeRepository):
        self.employee_repo = employee_repo

    def execute(self, query: Optional[ListEmployeesQueryDTO] = None) -> PageResult[EmployeeOutputDTO]:
        query = query or ListEmployeesQueryDTO()
        page = query.page_request
        employees, total = self.employee_repo.search(query)
        return PageResult(
            items=[EmployeeOutputDTO.from_entity(e) for e in employees],
            total=total,
            page=page.page,
            page_size=page.page_size,
        )


class ChangePasswordService:
    """
    Use Case: Troca de senha pelo próprio usuário.

    Fluxo:
    1. Validação (nova senha forte, confirmação, diferente da atual)
    2. Localizar conta pelo e-mail e conferir a senha atual
    3. Gravar novo hash e rotacionar o carimbo de segurança
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        validator: Optional[ChangePasswordRequestValidator] = None,
    ):
        self.account_repo = account_repo
        self.hasher = hasher
        self.uow = uow
        self.validator = validator or ChangePasswordRequestValidator()

    def execute(self, input_dto: ChangePasswordInputDTO) -> None:
        """
        Raises:
            RequestValidationError: Erros de campo
            InvalidCredentialsError: Conta inexistente/inativa ou senha atual incorreta
        """
        email = self.validator.validate(input_dto)

        account = self.account_repo.get_by_email(email.value)
        if account is None or not account.is_active:
            raise InvalidCredentialsError()
        if not self.hasher.verify(input_dto.current_password, account.password_hash):
            logger.warning(f"Password change rejected for account {account.id}")
            raise InvalidCredentialsError()

        new_hash = self.hasher.hash(input_dto.new_password)
        with self.uow:
            account.change_password(new_hash)
            self.account_repo.update(account)
            self.uow.publish_event(PasswordChangedEvent(aggregate_id=account.id))

        logger.info(f"Password changed for account {account.id}")


class AuthenticateService:
    """
    Use Case: Autenticar credenciais.

    Aplica bloqueio após `policy.max_failed_access_attempts` falhas
    consecutivas, por `policy.lockout_duration`. Um login bem-sucedido
    zera o contador. A emissão de token é responsabilidade da fronteira.
    """

    def __init__(
        self,
        account_repo: UserAccountRepository,
        hasher: PasswordHasher,
        uow: UnitOfWork,
        policy: Optional[PersonnelPolicy] = None,
    ):
        self.account_repo = account_repo
        self.hasher = hasher
        self.uow = uow
        self.policy = policy or PersonnelPolicy()

    def execute(self, input_dto: AuthenticateInputDTO) -> AuthenticationResultDTO:
        """
        Raises:
            InvalidCredentialsError: E-mail inválido, conta inexistente/inativa
                ou senha incorreta
            AccountLockedError: Conta bloqueada
        """
        try:
            email = Email(input_dto.email)
        except InvalidFormatError:
            raise InvalidCredentialsError()

        account = self.account_repo.get_by_email(email.value)
        if account is None or not account.is_active:
            raise InvalidCredentialsError()

        now = datetime.now(timezone.utc)
        if account.is_locked_out(now):
            raise AccountLockedError(account.lockout_end)

        if not self.hasher.verify(input_dto.password or "", account.password_hash):
            with self.uow:
                account.record_failed_login_attempt(
                    self.policy.max_failed_access_attempts,
                    self.policy.lockout_duration,
                    now,
                )
                self.account_repo.update(account)
                if account.is_locked_out(now):
                    logger.warning(f"Account {account.id} locked until {account.lockout_end}")
                    self.uow.publish_event(
                        AccountLockedOutEvent(
                            aggregate_id=account.id,
                            lockout_end=account.lockout_end,
                        )
                    )
            raise InvalidCredentialsError()

        with self.uow:
            account.reset_failures_after_successful_login(now)
            self.account_repo.update(account)

        logger.info(f"Account {account.id} authenticated")
        return AuthenticationResultDTO.from_entity(account)
