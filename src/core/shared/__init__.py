"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports) transversais
- Base class para Domain Events
- Token de cancelamento
"""

from .exceptions import (
    DomainException,
    ValidationError,
    InvalidFormatError,
    RequestValidationError,
    EntityNotFoundError,
    ActorNotFoundError,
    PermissionDeniedError,
    ConflictError,
    EmailInUseError,
    DocumentInUseError,
    BusinessRuleViolationError,
    EmptyPhoneSetError,
    InvalidCredentialsError,
    AccountLockedError,
    OperationCancelledError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .cancellation import CancellationToken

__all__ = [
    "DomainException",
    "ValidationError",
    "InvalidFormatError",
    "RequestValidationError",
    "EntityNotFoundError",
    "ActorNotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "EmailInUseError",
    "DocumentInUseError",
    "BusinessRuleViolationError",
    "EmptyPhoneSetError",
    "InvalidCredentialsError",
    "AccountLockedError",
    "OperationCancelledError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "CancellationToken",
]
