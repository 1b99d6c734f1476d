"""
Data Transfer Objects (DTOs) do Domínio de Pessoal.

Tipos de DTOs:
- Input DTOs: dados brutos vindos da fronteira (strings), validados
  pelos validators antes de qualquer verificação de estado
- Output DTOs: dados formatados para resposta
- Query DTOs: filtros de listagem
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple, Union

from src.core.shared.pagination import DEFAULT_PAGE_SIZE, PageRequest

from .entities import EmployeeEntity, UserAccountEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CreateEmployeeInputDTO:
    """
    DTO de entrada para cadastrar colaborador e sua conta.

    Attributes:
        first_name: Nome
        last_name: Sobrenome
        email: E-mail (também será o nome de usuário)
        document_number: CPF, puro ou mascarado
        date_of_birth: "AAAA-MM-DD" ou date
        phones: Telefones (ao menos um)
        job_title_id: Cargo, que define o papel da conta
        department_id: Departamento
        password: Senha inicial em texto puro
        manager_id: Gestor opcional
    """

    first_name: str
    last_name: str
    email: str
    document_number: str
    date_of_birth: Union[str, date]
    phones: Tuple[str, ...]
    job_title_id: str
    department_id: str
    password: str
    manager_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateEmployeeInputDTO:
    """
    DTO de entrada para atualização completa de colaborador.

    manager_id None remove o gestor atual. password None mantém a senha.
    """

    employee_id: str
    first_name: str
    last_name: str
    email: str
    document_number: str
    date_of_birth: Union[str, date]
    phones: Tuple[str, ...]
    job_title_id: str
    department_id: str
    manager_id: Optional[str] = None
    password: Optional[str] = None


@dataclass(frozen=True)
class ChangePasswordInputDTO:
    email: str
    current_password: str
    new_password: str
    confirm_new_password: str


@dataclass(frozen=True)
class AuthenticateInputDTO:
    email: str
    password: str


@dataclass(frozen=True)
class ListEmployeesQueryDTO:
    """
    Filtros e paginação da listagem de colaboradores.

    Attributes:
        department_id: Apenas do departamento
        manager_id: Apenas subordinados diretos do gestor
        job_title_id: Apenas do cargo
        name_or_email: Trecho do nome, sobrenome ou e-mail (sem diferenciar maiúsculas)
        only_active: Omite colaboradores desligados
        page: Página (1-indexed)
        page_size: Itens por página
    """

    department_id: Optional[str] = None
    manager_id: Optional[str] = None
    job_title_id: Optional[str] = None
    name_or_email: Optional[str] = None
    only_active: bool = True
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def page_request(self) -> PageRequest:
        return PageRequest(self.page, self.page_size)

    @property
    def search_term(self) -> Optional[str]:
        term = (self.name_or_email or "").strip().lower()
        return term or None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class EmployeeOutputDTO:
    """
    DTO de saída com dados do colaborador.

    Inclui dados resumidos da conta vinculada quando disponível.
    """

    id: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    document_number: str
    date_of_birth: str
    phones: Tuple[str, ...]
    job_title_id: str
    department_id: str
    manager_id: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime]
    user_account_id: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_entity(
        cls,
        employee: EmployeeEntity,
        account: Optional[UserAccountEntity] = None,
    ) -> "EmployeeOutputDTO":
        return cls(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            full_name=employee.full_name,
            email=employee.email.value,
            document_number=employee.document_number.formatted,
            date_of_birth=employee.date_of_birth.isoformat(),
            phones=tuple(phone.e164 for phone in employee.sorted_phones()),
            job_title_id=employee.job_title_id,
            department_id=employee.department_id,
            manager_id=employee.manager_id,
            is_active=employee.is_active,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
            user_account_id=account.id if account else None,
            roles=tuple(account.role_names) if account else (),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "document_number": self.document_number,
            "date_of_birth": self.date_of_birth,
            "phones": list(self.phones),
            "job_title_id": self.job_title_id,
            "department_id": self.department_id,
            "manager_id": self.manager_id,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "user_account_id": self.user_account_id,
            "roles": list(self.roles),
        }


@dataclass
class AuthenticationResultDTO:
    """
    Resultado de autenticação bem-sucedida.

    A emissão de token fica a cargo da camada de fronteira; o carimbo
    de segurança permite invalidar tokens emitidos antes de uma troca
    de senha.
    """

    account_id: str
    employee_id: str
    user_name: str
    security_stamp: str
    roles: Tuple[str, ...]
    highest_role_level: str

    @classmethod
    def from_entity(cls, account: UserAccountEntity) -> "AuthenticationResultDTO":
        return cls(
            account_id=account.id,
            employee_id=account.employee_id,
            user_name=account.user_name,
            security_stamp=account.security_stamp,
            roles=tuple(account.role_names),
            highest_role_level=account.get_highest_role_level().value,
        )

    def to_dict(self) -> dict:
        return {
            "account_id": self.account_id,
            "employee_id": self.employee_id,
            "user_name": self.user_name,
            "security_stamp": self.security_stamp,
            "roles": list(self.roles),
            "highest_role_level": self.highest_role_level,
        }
