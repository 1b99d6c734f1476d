"""
Validação estrutural de requisições do Domínio de Pessoal.

Diferente das entidades (que falham no primeiro erro), os validators
coletam todos os problemas de campo e os reportam juntos em um único
RequestValidationError. Esta etapa roda antes de qualquer verificação
que dependa de estado persistido (existência, unicidade, permissão).

Validators:
- EmployeeRequestValidator: cadastro e atualização de colaborador
- ChangePasswordRequestValidator: troca de senha pelo próprio usuário
"""

from dataclasses import dataclass
from datetime import date
import re
from typing import Callable, FrozenSet, List, Optional, TypeVar, Union

from src.core.shared.exceptions import RequestValidationError, ValidationError

from .dtos import ChangePasswordInputDTO, CreateEmployeeInputDTO, UpdateEmployeeInputDTO
from .policies import PersonnelPolicy
from .value_objects import DateOfBirth, DocumentNumber, Email, PhoneNumber

T = TypeVar("T")

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"\d")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")


def _text(value) -> str:
    """Texto aparado; valores que não são str contam como vazios."""
    return value.strip() if isinstance(value, str) else ""


@dataclass(frozen=True)
class EmployeeFields:
    """Campos de colaborador já convertidos em value objects."""

    first_name: str
    last_name: str
    email: Email
    document_number: DocumentNumber
    date_of_birth: DateOfBirth
    phones: FrozenSet[PhoneNumber]


class _ErrorCollector:
    def __init__(self):
        self.errors: List[ValidationError] = []

    def add(self, message: str, field: str) -> None:
        self.errors.append(ValidationError(message, field=field))

    def attempt(self, factory: Callable[[], T]) -> Optional[T]:
        try:
            return factory()
        except ValidationError as error:
            self.errors.append(error)
            return None

    def raise_if_any(self) -> None:
        if self.errors:
            raise RequestValidationError(self.errors)


def check_password_strength(
    collector: _ErrorCollector,
    password: Optional[str],
    field: str,
    min_length: int,
    require_special: bool = False,
) -> None:
    if not password or not isinstance(password, str):
        collector.add("Senha é obrigatória", field)
        return
    if len(password) < min_length:
        collector.add(f"Senha deve ter pelo menos {min_length} caracteres", field)
    if not _LOWER.search(password):
        collector.add("Senha deve conter letra minúscula", field)
    if not _UPPER.search(password):
        collector.add("Senha deve conter letra maiúscula", field)
    if not _DIGIT.search(password):
        collector.add("Senha deve conter número", field)
    if require_special and not _SPECIAL.search(password):
        collector.add("Senha deve conter caractere especial", field)


class EmployeeRequestValidator:
    """
    Valida requisições de cadastro/atualização de colaborador.

    Regras:
    - Nome e sobrenome com pelo menos 2 caracteres
    - E-mail, CPF e cada telefone válidos; ao menos um telefone
    - Data de nascimento AAAA-MM-DD, não futura e com idade mínima
    - Senha (obrigatória no cadastro): tamanho mínimo, minúscula,
      maiúscula e número
    - Cargo e departamento obrigatórios

    Example:
        validator = EmployeeRequestValidator(PersonnelPolicy())
        fields = validator.validate_create(input_dto)
    """

    def __init__(self, policy: Optional[PersonnelPolicy] = None):
        self.policy = policy or PersonnelPolicy()

    def validate_create(self, dto: CreateEmployeeInputDTO) -> EmployeeFields:
        """
        Raises:
            RequestValidationError: Com todos os erros encontrados
        """
        collector = _ErrorCollector()
        fields = self._collect_employee_fields(collector, dto)
        check_password_strength(
            collector, dto.password, "password", self.policy.password_min_length
        )
        collector.raise_if_any()
        return fields

    def validate_update(self, dto: UpdateEmployeeInputDTO) -> EmployeeFields:
        """
        Raises:
            RequestValidationError: Com todos os erros encontrados
        """
        collector = _ErrorCollector()
        if not _text(dto.employee_id):
            collector.add("Colaborador é obrigatório", "employee_id")
        fields = self._collect_employee_fields(collector, dto)
        if dto.password is not None:
            check_password_strength(
                collector, dto.password, "password", self.policy.password_min_length
            )
        collector.raise_if_any()
        return fields

    def _collect_employee_fields(
        self,
        collector: _ErrorCollector,
        dto: Union[CreateEmployeeInputDTO, UpdateEmployeeInputDTO],
    ) -> Optional[EmployeeFields]:
        first_name = self._name(collector, dto.first_name, "first_name")
        last_name = self._name(collector, dto.last_name, "last_name")
        email = collector.attempt(lambda: Email(dto.email))
        document = collector.attempt(lambda: DocumentNumber(dto.document_number))
        date_of_birth = self._date_of_birth(collector, dto.date_of_birth)
        phones = self._phones(collector, dto.phones)

        if not _text(dto.job_title_id):
            collector.add("Cargo é obrigatório", "job_title_id")
        if not _text(dto.department_id):
            collector.add("Departamento é obrigatório", "department_id")

        if collector.errors:
            return None
        return EmployeeFields(
            first_name=first_name,
            last_name=last_name,
            email=email,
            document_number=document,
            date_of_birth=date_of_birth,
            phones=phones,
        )

    @staticmethod
    def _name(collector: _ErrorCollector, value: str, field: str) -> Optional[str]:
        value = _text(value)
        if len(value) < 2:
            collector.add("Deve ter pelo menos 2 caracteres", field)
            return None
        return value

    def _date_of_birth(
        self, collector: _ErrorCollector, value: Union[str, date, None]
    ) -> Optional[DateOfBirth]:
        if isinstance(value, date):
            date_of_birth = collector.attempt(lambda: DateOfBirth(value))
        else:
            date_of_birth = collector.attempt(lambda: DateOfBirth.from_iso(value))
        if date_of_birth is None:
            return None
        if date_of_birth.age_on(date.today()) < self.policy.minimum_age:
            collector.add(
                f"Colaborador deve ter pelo menos {self.policy.minimum_age} anos",
                "date_of_birth",
            )
            return None
        return date_of_birth

    def _phones(self, collector: _ErrorCollector, values) -> Optional[FrozenSet[PhoneNumber]]:
        if isinstance(values, str):
            values = (values,)
        elif not isinstance(values, (list, tuple, set, frozenset)):
            values = ()
        # entradas que não são str seguem para PhoneNumber, que as rejeita
        values = [v for v in values if v is not None and (not isinstance(v, str) or v.strip())]
        if not values:
            collector.add("Informe ao menos um telefone", "phones")
            return None
        phones = []
        for value in values:
            phone = collector.attempt(
                lambda: PhoneNumber(value, self.policy.default_phone_country)
            )
            if phone is not None:
                phones.append(phone)
        if len(phones) != len(values):
            return None
        return frozenset(phones)


class ChangePasswordRequestValidator:
    """
    Valida a troca de senha pelo próprio usuário.

    A nova senha exige também caractere especial e deve ser confirmada.
    """

    def __init__(self, policy: Optional[PersonnelPolicy] = None):
        self.policy = policy or PersonnelPolicy()

    def validate(self, dto: ChangePasswordInputDTO) -> Email:
        """
        Returns:
            E-mail normalizado

        Raises:
            RequestValidationError: Com todos os erros encontrados
        """
        collector = _ErrorCollector()
        email = collector.attempt(lambda: Email(dto.email))
        if not dto.current_password:
            collector.add("Senha atual é obrigatória", "current_password")
        check_password_strength(
            collector,
            dto.new_password,
            "new_password",
            self.policy.password_min_length,
            require_special=True,
        )
        if dto.new_password and dto.new_password == dto.current_password:
            collector.add("Nova senha deve ser diferente da atual", "new_password")
        if dto.new_password != dto.confirm_new_password:
            collector.add("Confirmação não confere com a nova senha", "confirm_new_password")
        collector.raise_if_any()
        return email
