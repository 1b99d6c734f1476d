"""
Domínio de Pessoal.

Colaboradores e contas de usuário, ligados 1:1, com autorização
hierárquica em toda criação/alteração.
"""

from .value_objects import Email, DocumentNumber, PhoneNumber, DateOfBirth
from .entities import EmployeeEntity, UserAccountEntity
from .ports import (
    EmployeeRepository,
    UserAccountRepository,
    PasswordHasher,
    InMemoryEmployeeRepository,
    InMemoryUserAccountRepository,
)
from .policies import PersonnelPolicy

__all__ = [
    "Email",
    "DocumentNumber",
    "PhoneNumber",
    "DateOfBirth",
    "EmployeeEntity",
    "UserAccountEntity",
    "EmployeeRepository",
    "UserAccountRepository",
    "PasswordHasher",
    "InMemoryEmployeeRepository",
    "InMemoryUserAccountRepository",
    "PersonnelPolicy",
]
