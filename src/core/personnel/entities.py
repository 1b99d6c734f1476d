"""
Entidades do Domínio de Pessoal.

Este módulo define os dois agregados raiz do sistema, ligados 1:1:

Entidades:
- EmployeeEntity: Colaborador (dados pessoais, telefones, gestor)
- UserAccountEntity: Conta de acesso (credenciais, bloqueio, papéis)

Regras de Negócio Encapsuladas:
- Colaborador sempre com ao menos um telefone
- Nenhum colaborador gere a si mesmo nem forma ciclo com subordinados
- Operações "change_*" idempotentes: sem alteração real, nenhum
  timestamp é tocado
- Carimbo de segurança rotacionado a cada troca de senha
- Bloqueio após N tentativas de login consecutivas com falha

Subordinados não são mantidos no agregado: o gestor é guardado apenas
como identificador e o conjunto de subordinados é resolvido por consulta
ao repositório.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import FrozenSet, Iterable, List, Optional, Tuple
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
    EmptyPhoneSetError,
)
from src.core.access_control.entities import HierarchicalRole, Role

from .value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_security_stamp() -> str:
    return uuid.uuid4().hex


@dataclass
class EmployeeEntity:
    """
    Entidade de Domínio: Colaborador.

    Invariantes:
    - first_name/last_name com pelo menos 2 caracteres após trim
    - phones nunca vazio (frozenset substituído por inteiro a cada mudança)
    - department_id e job_title_id nunca vazios
    - manager_id diferente do próprio id

    Attributes:
        id: UUID do colaborador
        first_name: Nome
        last_name: Sobrenome
        email: E-mail normalizado
        document_number: CPF
        date_of_birth: Data de nascimento
        phones: Conjunto imutável de telefones
        job_title_id: Cargo atual
        department_id: Departamento atual
        manager_id: Gestor (opcional)
        is_active: False após desligamento (exclusão lógica)
        created_at: Timestamp de criação
        updated_at: Última modificação (None até a primeira mudança)

    Example:
        employee = EmployeeEntity.create(
            first_name="Ana",
            last_name="Silva",
            email=Email("ana@acme.com"),
            document_number=DocumentNumber("529.982.247-25"),
            date_of_birth=DateOfBirth(date(1990, 5, 17)),
            phones=[PhoneNumber("11999998888")],
            job_title_id=job_title.id,
            department_id=department.id,
        )
    """

    first_name: str
    last_name: str
    email: Email
    document_number: DocumentNumber
    date_of_birth: DateOfBirth
    phones: FrozenSet[PhoneNumber]
    job_title_id: str
    department_id: str
    manager_id: Optional[str] = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    # =========================================================================
    # Factory Method
    # =========================================================================

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        email: Email,
        document_number: DocumentNumber,
        date_of_birth: DateOfBirth,
        phones: Iterable[PhoneNumber],
        job_title_id: str,
        department_id: str,
        manager_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> "EmployeeEntity":
        """
        Factory method para criar colaborador com validações.

        Raises:
            ValidationError: Se nomes, cargo ou departamento inválidos
            EmptyPhoneSetError: Se nenhum telefone informado
            BusinessRuleViolationError: Se manager_id igual ao próprio id
        """
        phone_set = frozenset(phones or ())
        if not phone_set:
            raise EmptyPhoneSetError()

        employee = cls(
            first_name=cls._validate_name(first_name, "first_name"),
            last_name=cls._validate_name(last_name, "last_name"),
            email=email,
            document_number=document_number,
            date_of_birth=date_of_birth,
            phones=phone_set,
            job_title_id=cls._validate_reference(job_title_id, "job_title_id"),
            department_id=cls._validate_reference(department_id, "department_id"),
        )
        if employee_id:
            employee.id = employee_id
        if manager_id:
            if manager_id == employee.id:
                raise BusinessRuleViolationError(
                    "Colaborador não pode ser gestor de si mesmo",
                    rule="self_management",
                )
            employee.manager_id = manager_id
        return employee

    # =========================================================================
    # Validações
    # =========================================================================

    @staticmethod
    def _validate_name(value: str, field_name: str) -> str:
        value = (value or "").strip()
        if len(value) < 2:
            raise ValidationError(
                "Nome deve ter pelo menos 2 caracteres",
                field=field_name,
            )
        return value

    @staticmethod
    def _validate_reference(value: str, field_name: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"{field_name} é obrigatório", field=field_name)
        return value

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    # =========================================================================
    # Dados pessoais
    # =========================================================================

    def change_name(self, first_name: str, last_name: str) -> None:
        first_name = self._validate_name(first_name, "first_name")
        last_name = self._validate_name(last_name, "last_name")
        if (first_name, last_name) == (self.first_name, self.last_name):
            return
        self.first_name = first_name
        self.last_name = last_name
        self._touch()

    def change_email(self, email: Email) -> None:
        if email == self.email:
            return
        self.email = email
        self._touch()

    def change_document(self, document_number: DocumentNumber) -> None:
        if document_number == self.document_number:
            return
        self.document_number = document_number
        self._touch()

    def change_date_of_birth(self, date_of_birth: DateOfBirth) -> None:
        if date_of_birth == self.date_of_birth:
            return
        self.date_of_birth = date_of_birth
        self._touch()

    def change_job_title(self, job_title_id: str) -> None:
        job_title_id = self._validate_reference(job_title_id, "job_title_id")
        if job_title_id == self.job_title_id:
            return
        self.job_title_id = job_title_id
        self._touch()

    def change_department(self, department_id: str) -> None:
        department_id = self._validate_reference(department_id, "department_id")
        if department_id == self.department_id:
            return
        self.department_id = department_id
        self._touch()

    # =========================================================================
    # Telefones
    # =========================================================================

    def add_phone(self, phone: PhoneNumber) -> None:
        """Adiciona telefone; telefone já presente é ignorado."""
        if phone in self.phones:
            return
        self.phones = self.phones | {phone}
        self._touch()

    def remove_phone(self, phone: PhoneNumber) -> None:
        """
        Remove telefone; telefone ausente é ignorado.

        Raises:
            EmptyPhoneSetError: Se for o último telefone
        """
        if phone not in self.phones:
            return
        if len(self.phones) == 1:
            raise EmptyPhoneSetError("Não é possível remover o último telefone")
        self.phones = self.phones - {phone}
        self._touch()

    def update_phones(
        self, phones: Iterable[PhoneNumber]
    ) -> Tuple[FrozenSet[PhoneNumber], FrozenSet[PhoneNumber]]:
        """
        Reconcilia o conjunto de telefones com o conjunto informado.

        Telefones novos são adicionados e os ausentes removidos, com
        substituição integral do conjunto.

        Returns:
            Tupla (adicionados, removidos)

        Raises:
            EmptyPhoneSetError: Se o conjunto informado for vazio
        """
        incoming = frozenset(phones or ())
        if not incoming:
            raise EmptyPhoneSetError()

        added = incoming - self.phones
        removed = self.phones - incoming
        if added or removed:
            self.phones = incoming
            self._touch()
        return added, removed

    # =========================================================================
    # Gestão
    # =========================================================================

    def assign_manager(
        self,
        manager_id: str,
        subordinate_ids: Iterable[str] = (),
    ) -> None:
        """
        Define o gestor do colaborador.

        Args:
            manager_id: ID do novo gestor
            subordinate_ids: Subordinados conhecidos deste colaborador,
                resolvidos por consulta ao repositório

        Raises:
            BusinessRuleViolationError: Autogestão ou referência circular
        """
        manager_id = self._validate_reference(manager_id, "manager_id")
        if manager_id == self.id:
            raise BusinessRuleViolationError(
                "Colaborador não pode ser gestor de si mesmo",
                rule="self_management",
            )
        if manager_id in set(subordinate_ids):
            raise BusinessRuleViolationError(
                "Um subordinado não pode ser definido como gestor",
                rule="circular_management",
            )
        if manager_id == self.manager_id:
            return
        self.manager_id = manager_id
        self._touch()

    def remove_manager(self) -> None:
        if self.manager_id is None:
            return
        self.manager_id = None
        self._touch()

    # =========================================================================
    # Ciclo de vida
    # =========================================================================

    def activate(self) -> None:
        if self.is_active:
            return
        self.is_active = True
        self._touch()

    def deactivate(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self._touch()

    # =========================================================================
    # Propriedades Computadas
    # =========================================================================

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def sorted_phones(self) -> List[PhoneNumber]:
        """Telefones em ordem estável (pelo E.164)."""
        return sorted(self.phones, key=lambda phone: phone.e164)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EmployeeEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Employee(id={self.id[:8]}..., "
            f"name={self.full_name!r}, "
            f"email={self.email.value!r})"
        )


@dataclass
class UserAccountEntity:
    """
    Entidade de Domínio: Conta de Usuário.

    O nome de usuário é o e-mail normalizado do colaborador vinculado.
    O hash de senha é opaco para o domínio (calculado pelo PasswordHasher).

    Attributes:
        id: UUID da conta
        user_name: Nome de usuário normalizado (trim + minúsculas)
        password_hash: Hash opaco da senha
        employee_id: Colaborador vinculado (1:1)
        roles: Papéis atribuídos
        security_stamp: Rotacionado a cada troca de senha
        password_changed_at: Momento da última troca
        is_active: False após desativação
        access_failed_count: Tentativas consecutivas com falha
        lockout_end: Fim do bloqueio (None se não bloqueada)
        two_factor_enabled: Segundo fator habilitado
        two_factor_secret: Segredo do segundo fator
        last_login_at: Último login bem-sucedido
    """

    user_name: str
    password_hash: str
    employee_id: str
    roles: List[Role] = field(default_factory=list)
    security_stamp: str = field(default_factory=_new_security_stamp)
    password_changed_at: Optional[datetime] = None
    is_active: bool = True
    access_failed_count: int = 0
    lockout_end: Optional[datetime] = None
    two_factor_enabled: bool = False
    two_factor_secret: Optional[str] = None
    last_login_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        user_name: str,
        password_hash: str,
        employee_id: str,
        roles: Iterable[Role] = (),
    ) -> "UserAccountEntity":
        """
        Factory method para criar conta.

        Raises:
            ValidationError: Se nome de usuário, hash ou colaborador vazios
        """
        if not password_hash:
            raise ValidationError("Hash de senha é obrigatório", field="password_hash")
        if not (employee_id or "").strip():
            raise ValidationError("Conta deve estar vinculada a um colaborador", field="employee_id")

        account = cls(
            user_name=cls._normalize_user_name(user_name),
            password_hash=password_hash,
            employee_id=employee_id,
            password_changed_at=_utcnow(),
        )
        for role in roles:
            account.add_role(role)
        account.updated_at = None
        return account

    @staticmethod
    def _normalize_user_name(user_name: str) -> str:
        user_name = (user_name or "").strip().lower()
        if not user_name:
            raise ValidationError("Nome de usuário é obrigatório", field="user_name")
        return user_name

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def change_user_name(self, user_name: str) -> None:
        user_name = self._normalize_user_name(user_name)
        if user_name == self.user_name:
            return
        self.user_name = user_name
        self._touch()

    # =========================================================================
    # Credenciais
    # =========================================================================

    def set_password_hash(self, password_hash: str) -> None:
        """Define nova senha (fluxo administrativo) e zera as falhas."""
        if not password_hash:
            raise ValidationError("Hash de senha é obrigatório", field="password_hash")
        self.password_hash = password_hash
        self.security_stamp = _new_security_stamp()
        self.password_changed_at = _utcnow()
        self.access_failed_count = 0
        self.lockout_end = None
        self._touch()

    def change_password(self, password_hash: str) -> None:
        """Troca de senha pelo próprio usuário."""
        if not password_hash:
            raise ValidationError("Hash de senha é obrigatório", field="password_hash")
        self.password_hash = password_hash
        self.security_stamp = _new_security_stamp()
        self.password_changed_at = _utcnow()
        self._touch()

    # =========================================================================
    # Bloqueio
    # =========================================================================

    def is_locked_out(self, now: Optional[datetime] = None) -> bool:
        if self.lockout_end is None:
            return False
        return self.lockout_end > (now or _utcnow())

    def record_failed_login_attempt(
        self,
        max_attempts: int,
        lockout_duration: timedelta,
        now: Optional[datetime] = None,
    ) -> None:
        """
        Registra falha de login; ao atingir o limite, bloqueia a conta.

        Conta inativa não é alterada.
        """
        if not self.is_active:
            return
        now = now or _utcnow()
        self.access_failed_count += 1
        if self.access_failed_count >= max_attempts:
            self.lockout_end = now + lockout_duration
            self.access_failed_count = 0
        self._touch()

    def reset_failures_after_successful_login(self, now: Optional[datetime] = None) -> None:
        self.access_failed_count = 0
        self.lockout_end = None
        self.last_login_at = now or _utcnow()
        self._touch()

    def unlock_now(self) -> None:
        if self.lockout_end is None and self.access_failed_count == 0:
            return
        self.lockout_end = None
        self.access_failed_count = 0
        self._touch()

    # =========================================================================
    # Estado
    # =========================================================================

    def activate(self) -> None:
        if self.is_active:
            return
        self.is_active = True
        self._touch()

    def deactivate(self) -> None:
        if not self.is_active:
            return
        self.is_active = False
        self._touch()

    def enable_two_factor(self, secret: str) -> None:
        if not (secret or "").strip():
            raise ValidationError("Segredo do segundo fator é obrigatório", field="two_factor_secret")
        if self.two_factor_enabled and self.two_factor_secret == secret:
            return
        self.two_factor_enabled = True
        self.two_factor_secret = secret
        self._touch()

    def disable_two_factor(self) -> None:
        if not self.two_factor_enabled:
            return
        self.two_factor_enabled = False
        self.two_factor_secret = None
        self._touch()

    # =========================================================================
    # Papéis e autorização
    # =========================================================================

    def add_role(self, role: Role) -> None:
        if role in self.roles:
            return
        self.roles.append(role)
        self._touch()

    def remove_role(self, role: Role) -> None:
        if role not in self.roles:
            return
        self.roles.remove(role)
        self._touch()

    def replace_roles(self, roles: Iterable[Role]) -> None:
        roles = list(dict.fromkeys(roles))
        if set(roles) == set(self.roles):
            return
        self.roles = roles
        self._touch()

    def get_highest_role_level(self) -> HierarchicalRole:
        """Maior nível entre os papéis; Junior quando não há papéis."""
        if not self.roles:
            return HierarchicalRole.lowest()
        return max(role.level for role in self.roles)

    def can_create_role(self, target: HierarchicalRole) -> bool:
        """Exige ao menos um papel que, individualmente, alcance o alvo."""
        return any(role.can_create_role(target) for role in self.roles)

    def can_modify_user(self, target: "UserAccountEntity") -> bool:
        """Compara com o nível atual da conta alvo."""
        target_level = target.get_highest_role_level()
        return any(role.can_modify_user(target_level) for role in self.roles)

    def has_permission(self, permission: str) -> bool:
        return any(role.has_permission(permission) for role in self.roles)

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]

    def __eq__(self, other) -> bool:
        if not isinstance(other, UserAccountEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"UserAccount(id={self.id[:8]}..., user_name={self.user_name!r})"
