"""
Ports (Interfaces) do Domínio de Pessoal.

Define os contratos que os Adapters de infraestrutura devem implementar.

Ports:
- EmployeeRepository: store de colaboradores
- UserAccountRepository: store de contas de usuário
- PasswordHasher: capacidade opaca de hash/verificação de senha

As implementações em memória aplicam as mesmas restrições de unicidade
que o banco (e-mail, CPF, nome de usuário), traduzindo violações em
ConflictError.
"""

import copy
import threading
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.shared.exceptions import DocumentInUseError, EmailInUseError, ConflictError
from src.core.shared.pagination import PageResult

from .dtos import ListEmployeesQueryDTO
from .entities import EmployeeEntity, UserAccountEntity


@runtime_checkable
class EmployeeRepository(Protocol):
    """
    Interface para persistência de colaboradores.

    Implementações:
    - DjangoEmployeeRepository (ORM, com unique constraints)
    - InMemoryEmployeeRepository (testes)

    Methods:
        get_by_id: Busca por ID
        email_exists: Verifica e-mail normalizado
        cpf_exists: Verifica dígitos do CPF
        add: Insere (EmailInUseError/DocumentInUseError em conflito)
        update: Atualiza (mesmos conflitos)
        delete: Remove fisicamente por ID
        list_by_manager: Subordinados diretos
        list_by_job_title: Ocupantes de um cargo
        list_all: Lista com filtros simples
        search: Página filtrada + total (nome/e-mail, departamento, cargo, gestor)
    """

    def get_by_id(self, employee_id: str) -> Optional[EmployeeEntity]:
        ...

    def email_exists(self, email: str) -> bool:
        ...

    def cpf_exists(self, digits: str) -> bool:
        ...

    def add(self, employee: EmployeeEntity) -> None:
        ...

    def update(self, employee: EmployeeEntity) -> None:
        ...

    def delete(self, employee_id: str) -> None:
        ...

    def list_by_manager(self, manager_id: str) -> List[EmployeeEntity]:
        ...

    def list_by_job_title(self, job_title_id: str) -> List[EmployeeEntity]:
        ...

    def list_all(
        self,
        department_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        only_active: bool = True,
    ) -> List[EmployeeEntity]:
        ...

    def search(self, query: ListEmployeesQueryDTO) -> Tuple[List[EmployeeEntity], int]:
        ...


@runtime_checkable
class UserAccountRepository(Protocol):
    """
    Interface para persistência de contas de usuário.

    A conta é carregada com seus papéis reais, usados nas
    verificações hierárquicas.
    """

    def get_by_id(self, account_id: str) -> Optional[UserAccountEntity]:
        ...

    def get_by_email(self, email: str) -> Optional[UserAccountEntity]:
        """Busca pelo nome de usuário (e-mail normalizado)."""
        ...

    def get_by_employee_id(self, employee_id: str) -> Optional[UserAccountEntity]:
        ...

    def add(self, account: UserAccountEntity) -> None:
        ...

    def update(self, account: UserAccountEntity) -> None:
        ...


@runtime_checkable
class PasswordHasher(Protocol):
    """Hash opaco de senha; o domínio nunca inspeciona o resultado."""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        ...


class InMemoryEmployeeRepository:
    """
    Implementação em memória do EmployeeRepository.

    Guarda e devolve cópias: uma entity alterada por um caso de uso que
    falhou antes do `update` não contamina o store.

    Útil para testes unitários e prototipagem. Não usar em produção!

    Example:
        repo = InMemoryEmployeeRepository()
        repo.add(employee)
        found = repo.get_by_id(employee.id)
    """

    def __init__(self):
        self._employees: Dict[str, EmployeeEntity] = {}
        self._lock = threading.Lock()

    def get_by_id(self, employee_id: str) -> Optional[EmployeeEntity]:
        return copy.deepcopy(self._employees.get(employee_id))

    def email_exists(self, email: str) -> bool:
        email = email.strip().lower()
        return any(e.email.value == email for e in self._employees.values())

    def cpf_exists(self, digits: str) -> bool:
        return any(e.document_number.digits == digits for e in self._employees.values())

    def _check_unique(self, employee: EmployeeEntity) -> None:
        for other in self._employees.values():
            if other.id == employee.id:
                continue
            if other.email == employee.email:
                raise EmailInUseError(employee.email.value)
            if other.document_number == employee.document_number:
                raise DocumentInUseError(employee.document_number.formatted)

    def add(self, employee: EmployeeEntity) -> None:
        with self._lock:
            self._check_unique(employee)
            self._employees[employee.id] = copy.deepcopy(employee)

    def update(self, employee: EmployeeEntity) -> None:
        with self._lock:
            self._check_unique(employee)
            self._employees[employee.id] = copy.deepcopy(employee)

    def delete(self, employee_id: str) -> None:
        with self._lock:
            self._employees.pop(employee_id, None)

    def _sorted(self, employees) -> List[EmployeeEntity]:
        ordered = sorted(employees, key=lambda e: (e.first_name, e.last_name))
        return [copy.deepcopy(e) for e in ordered]

    def list_by_manager(self, manager_id: str) -> List[EmployeeEntity]:
        return self._sorted(e for e in self._employees.values() if e.manager_id == manager_id)

    def list_by_job_title(self, job_title_id: str) -> List[EmployeeEntity]:
        return self._sorted(e for e in self._employees.values() if e.job_title_id == job_title_id)

    def list_all(
        self,
        department_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        only_active: bool = True,
    ) -> List[EmployeeEntity]:
        return self._sorted(self._filter(department_id, manager_id, None, None, only_active))

    def search(self, query: ListEmployeesQueryDTO) -> Tuple[List[EmployeeEntity], int]:
        employees = self._sorted(self._filter(
            query.department_id,
            query.manager_id,
            query.job_title_id,
            query.search_term,
            query.only_active,
        ))
        page = PageResult.from_list(employees, query.page_request)
        return page.items, page.total

    def _filter(self, department_id, manager_id, job_title_id, term, only_active):
        for employee in self._employees.values():
            if department_id and employee.department_id != department_id:
                continue
            if manager_id and employee.manager_id != manager_id:
                continue
            if job_title_id and employee.job_title_id != job_title_id:
                continue
            if only_active and not employee.is_active:
                continue
            if term and not any(
                term in value.lower()
                for value in (employee.first_name, employee.last_name, employee.email.value)
            ):
                continue
            yield employee

    def count(self) -> int:
        return len(self._employees)


class InMemoryUserAccountRepository:
    """
    Implementação em memória do UserAccountRepository.

    Guarda e devolve cópias, como o store de colaboradores.

    Não usar em produção!
    """

    def __init__(self):
        self._accounts: Dict[str, UserAccountEntity] = {}
        self._lock = threading.Lock()

    def get_by_id(self, account_id: str) -> Optional[UserAccountEntity]:
        return copy.deepcopy(self._accounts.get(account_id))

    def get_by_email(self, email: str) -> Optional[UserAccountEntity]:
        email = email.strip().lower()
        for account in self._accounts.values():
            if account.user_name == email:
                return copy.deepcopy(account)
        return None

    def get_by_employee_id(self, employee_id: str) -> Optional[UserAccountEntity]:
        for account in self._accounts.values():
            if account.employee_id == employee_id:
                return copy.deepcopy(account)
        return None

    def _check_unique(self, account: UserAccountEntity) -> None:
        for other in self._accounts.values():
            if other.id == account.id:
                continue
            if other.user_name == account.user_name:
                raise ConflictError(
                    f"Nome de usuário {account.user_name} já está em uso",
                    field="user_name",
                )
            if other.employee_id == account.employee_id:
                raise ConflictError(
                    "Colaborador já possui conta de usuário",
                    field="employee_id",
                )

    def add(self, account: UserAccountEntity) -> None:
        with self._lock:
            self._check_unique(account)
            self._accounts[account.id] = copy.deepcopy(account)

    def update(self, account: UserAccountEntity) -> None:
        with self._lock:
            self._check_unique(account)
            self._accounts[account.id] = copy.deepcopy(account)
