"""
Exceções de Domínio do Company Manager.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    │   └── InvalidFormatError (construção de value object)
    ├── RequestValidationError (lista agregada de erros de campo)
    ├── EntityNotFoundError (entidade não existe)
    │   └── ActorNotFoundError (usuário atuante inexistente)
    ├── PermissionDeniedError (comparação hierárquica falhou)
    ├── ConflictError (e-mail ou CPF já em uso)
    │   ├── EmailInUseError
    │   └── DocumentInUseError
    ├── BusinessRuleViolationError (invariante de estado violada)
    │   └── EmptyPhoneSetError
    ├── InvalidCredentialsError / AccountLockedError (autenticação)
    └── OperationCancelledError (cancelamento externo)
"""

from datetime import datetime
from typing import List, Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            employee.remove_phone(phone)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento.

    Example:
        if len(first_name.strip()) < 2:
            raise ValidationError("Nome deve ter pelo menos 2 caracteres", field="first_name")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class InvalidFormatError(ValidationError):
    """
    Formato inválido na construção de um value object.

    Example:
        Email("sem-arroba")  # InvalidFormatError(field="email")
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message, field)
        self.code = f"INVALID_FORMAT_{field.upper()}" if field else "INVALID_FORMAT"


class RequestValidationError(DomainException):
    """
    Erros de validação agregados de uma requisição.

    Todos os problemas de campo são coletados e reportados juntos,
    antes de qualquer verificação que dependa de estado persistido.

    Attributes:
        errors: Lista de ValidationError, um por problema encontrado
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = list(errors)
        fields = ", ".join(sorted({e.field for e in self.errors if e.field}))
        super().__init__(
            f"Requisição inválida ({len(self.errors)} erro(s)): {fields}",
            "VALIDATION_FAILED",
        )

    @property
    def fields(self) -> List[str]:
        """Campos com erro, na ordem em que foram encontrados."""
        seen = []
        for error in self.errors:
            if error.field and error.field not in seen:
                seen.append(error.field)
        return seen

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["errors"] = [error.to_dict() for error in self.errors]
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.

    Example:
        department = repo.get_by_id(department_id)
        if not department:
            raise EntityNotFoundError(f"Departamento {department_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class ActorNotFoundError(EntityNotFoundError):
    """
    Usuário atuante não encontrado.

    A camada de fronteira deve traduzir este erro como "não autorizado",
    nunca como 404.
    """

    def __init__(self, actor_id: str):
        super().__init__(
            f"Usuário atuante {actor_id} não encontrado",
            entity_type="UserAccount",
            entity_id=actor_id,
        )
        self.code = "ACTOR_NOT_FOUND"


class PermissionDeniedError(DomainException):
    """
    Permissão negada pela comparação hierárquica.

    Attributes:
        actor_level: Nível hierárquico de quem tentou a operação
        target_level: Nível hierárquico alvo
    """

    def __init__(self, message: str, actor_level: str = None, target_level: str = None):
        self.actor_level = actor_level
        self.target_level = target_level
        super().__init__(message, "PERMISSION_DENIED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.actor_level:
            result["actor_level"] = self.actor_level
        if self.target_level:
            result["target_level"] = self.target_level
        return result


class ConflictError(DomainException):
    """
    Conflito de unicidade no conjunto de agregados.

    Attributes:
        field: Campo cujo valor já está em uso
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "CONFLICT")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EmailInUseError(ConflictError):
    """E-mail já utilizado por outro colaborador."""

    def __init__(self, email: str):
        super().__init__(f"E-mail {email} já está em uso", field="email")


class DocumentInUseError(ConflictError):
    """CPF já utilizado por outro colaborador."""

    def __init__(self, document: str):
        super().__init__(f"CPF {document} já está em uso", field="document_number")


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando uma operação violaria uma invariante de estado
    estabelecida no domínio.

    Example:
        if manager_id == self.id:
            raise BusinessRuleViolationError(
                "Colaborador não pode ser gestor de si mesmo",
                rule="self_management",
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class EmptyPhoneSetError(BusinessRuleViolationError):
    """Colaborador ficaria sem nenhum telefone."""

    def __init__(self, message: str = "Colaborador deve possuir ao menos um telefone"):
        super().__init__(message, rule="employee_requires_phone")


class InvalidCredentialsError(DomainException):
    """Credenciais inválidas (usuário inexistente, inativo ou senha incorreta)."""

    def __init__(self, message: str = "Credenciais inválidas"):
        super().__init__(message, "INVALID_CREDENTIALS")


class AccountLockedError(DomainException):
    """
    Conta bloqueada por excesso de tentativas de login.

    Attributes:
        lockout_end: Momento em que o bloqueio expira
    """

    def __init__(self, lockout_end: Optional[datetime] = None):
        self.lockout_end = lockout_end
        super().__init__("Conta temporariamente bloqueada", "ACCOUNT_LOCKED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.lockout_end:
            result["lockout_end"] = self.lockout_end.isoformat()
        return result


class OperationCancelledError(DomainException):
    """Operação abortada por sinal de cancelamento externo."""

    def __init__(self, message: str = "Operação cancelada"):
        super().__init__(message, "OPERATION_CANCELLED")
