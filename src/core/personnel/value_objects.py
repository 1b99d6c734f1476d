"""
Value Objects do Domínio de Pessoal.

Objetos imutáveis, comparados por valor. A construção retorna um objeto
válido ou falha com InvalidFormatError; não existem operações de mutação.
"Alterar" um valor em uma entidade significa construir um novo objeto e
substituir a referência.

Value Objects:
- Email: endereço normalizado (trim + minúsculas, domínio IDNA)
- DocumentNumber: CPF com validação dos dígitos verificadores
- PhoneNumber: telefone normalizado para E.164
- DateOfBirth: data de nascimento não futura
"""

from dataclasses import dataclass, field
from datetime import date, datetime
import re
from typing import Optional

from src.core.shared.exceptions import InvalidFormatError


# =============================================================================
# Email
# =============================================================================

_EMAIL_LOCAL_PART = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+$")
_EMAIL_DOMAIN_LABEL = re.compile(r"^[a-z0-9-]{1,63}$")
_EMAIL_MAX_LENGTH = 254
_EMAIL_LOCAL_MAX_LENGTH = 64


@dataclass(frozen=True)
class Email:
    """
    E-mail normalizado.

    Regras:
    - Sem espaços internos e com exatamente um "@"
    - Parte local com 1 a 64 caracteres, sem ponto inicial, final ou duplo
    - Domínio convertido via IDNA, com rótulos de 1 a 63 caracteres
      alfanuméricos ou hífen (sem hífen nas pontas) e ao menos um ponto
    - Tamanho total de até 254 caracteres

    Example:
        Email("  John.Doe@Acme.com  ").value  # "john.doe@acme.com"
    """

    value: str

    def __post_init__(self):
        object.__setattr__(self, "value", self._normalize(self.value))

    @staticmethod
    def _invalid(raw) -> InvalidFormatError:
        return InvalidFormatError(f"E-mail inválido: {raw!r}", field="email")

    @classmethod
    def _normalize(cls, raw) -> str:
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidFormatError("E-mail é obrigatório", field="email")

        candidate = raw.strip()
        if any(char.isspace() for char in candidate) or candidate.count("@") != 1:
            raise cls._invalid(raw)

        local_part, domain = candidate.split("@")
        if not 1 <= len(local_part) <= _EMAIL_LOCAL_MAX_LENGTH:
            raise cls._invalid(raw)
        if not _EMAIL_LOCAL_PART.match(local_part):
            raise cls._invalid(raw)
        if local_part.startswith(".") or local_part.endswith(".") or ".." in local_part:
            raise cls._invalid(raw)

        try:
            ascii_domain = domain.encode("idna").decode("ascii").lower()
        except UnicodeError:
            raise cls._invalid(raw)

        if "." not in ascii_domain:
            raise cls._invalid(raw)
        for label in ascii_domain.split("."):
            if not _EMAIL_DOMAIN_LABEL.match(label):
                raise cls._invalid(raw)
            if label.startswith("-") or label.endswith("-"):
                raise cls._invalid(raw)

        normalized = f"{local_part}@{ascii_domain}".lower()
        if len(normalized) > _EMAIL_MAX_LENGTH:
            raise cls._invalid(raw)
        return normalized

    @property
    def local_part(self) -> str:
        return self.value.split("@")[0]

    @property
    def domain(self) -> str:
        return self.value.split("@")[1]

    def __str__(self) -> str:
        return self.value


# =============================================================================
# DocumentNumber (CPF)
# =============================================================================

_CPF_RAW = re.compile(r"^\d{11}$")
_CPF_MASKED = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")


def cpf_check_digit(digits: str) -> int:
    """
    Calcula um dígito verificador do CPF (módulo 11).

    Pesos decrescentes terminando em 2: 10..2 para os 9 primeiros
    dígitos, 11..2 para os 10 primeiros. Restos menores que 2 viram 0.
    """
    weight = len(digits) + 1
    total = sum(int(digit) * (weight - index) for index, digit in enumerate(digits))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


@dataclass(frozen=True)
class DocumentNumber:
    """
    CPF (Cadastro de Pessoas Físicas).

    Aceita o formato puro (11 dígitos) ou mascarado (###.###.###-##).
    A igualdade considera apenas os dígitos.

    Attributes:
        raw: Entrada original (sem espaços nas pontas)
        digits: Somente os 11 dígitos
    """

    raw: str = field(compare=False)
    digits: str = field(init=False)

    def __post_init__(self):
        if not isinstance(self.raw, str) or not self.raw.strip():
            raise InvalidFormatError("CPF é obrigatório", field="document_number")

        raw = self.raw.strip()
        if not (_CPF_RAW.match(raw) or _CPF_MASKED.match(raw)):
            raise InvalidFormatError(
                "CPF deve ter 11 dígitos ou o formato ###.###.###-##",
                field="document_number",
            )

        digits = re.sub(r"\D", "", raw)
        if len(set(digits)) == 1:
            raise InvalidFormatError("CPF inválido", field="document_number")

        first = cpf_check_digit(digits[:9])
        second = cpf_check_digit(digits[:9] + str(first))
        if digits[9:] != f"{first}{second}":
            raise InvalidFormatError("CPF inválido", field="document_number")

        object.__setattr__(self, "raw", raw)
        object.__setattr__(self, "digits", digits)

    @property
    def formatted(self) -> str:
        d = self.digits
        return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"

    def __str__(self) -> str:
        return self.formatted


# =============================================================================
# PhoneNumber
# =============================================================================

_PHONE_EXTENSION = re.compile(r"\b(?:ext\.?|x|ramal)\s*(\d+)\b", re.IGNORECASE)
DEFAULT_PHONE_COUNTRY = "BR"


@dataclass(frozen=True)
class PhoneNumber:
    """
    Telefone normalizado para E.164.

    Com "+" o número é internacional: 8 a 15 dígitos, DDI 55 ou 1
    reconhecidos explicitamente (demais assumem 3 dígitos). Sem "+",
    o país padrão precisa ser BR e o número ter DDD + assinante:
    11 dígitos para celular (assinante começa com 9) ou 10 para fixo
    (assinante não começa com 0 nem 9).

    Ramais ("ramal 12", "x12", "ext. 12") são extraídos e não fazem
    parte da igualdade, que é definida pelo formato E.164.

    Example:
        PhoneNumber("(11) 99999-8888").e164  # "+5511999998888"
    """

    raw: str = field(compare=False)
    default_country: Optional[str] = field(default=DEFAULT_PHONE_COUNTRY, compare=False)
    e164: str = field(init=False)
    country_code: str = field(init=False, compare=False)
    national_number: str = field(init=False, compare=False)
    extension: Optional[str] = field(init=False, compare=False)

    def __post_init__(self):
        if self.raw is not None and not isinstance(self.raw, str):
            raise self._invalid(self.raw)
        if not self.raw or not self.raw.strip():
            raise InvalidFormatError("Telefone é obrigatório", field="phone")

        raw = self.raw.strip()
        match = _PHONE_EXTENSION.search(raw)
        extension = match.group(1) if match else None
        base = _PHONE_EXTENSION.sub("", raw).strip()

        plus_count = base.count("+")
        if plus_count > 1 or (plus_count == 1 and not base.startswith("+")):
            raise self._invalid(raw)

        digits = re.sub(r"\D", "", base)
        if base.startswith("+"):
            country_code, national = self._split_international(raw, digits)
        else:
            country_code, national = self._parse_national(raw, digits)

        object.__setattr__(self, "raw", raw)
        object.__setattr__(self, "country_code", country_code)
        object.__setattr__(self, "national_number", national)
        object.__setattr__(self, "extension", extension)
        object.__setattr__(self, "e164", f"+{country_code}{national}")

    @staticmethod
    def _invalid(raw: str) -> InvalidFormatError:
        return InvalidFormatError(f"Telefone inválido: {raw!r}", field="phone")

    @classmethod
    def _split_international(cls, raw: str, digits: str):
        if not 8 <= len(digits) <= 15:
            raise cls._invalid(raw)

        if digits.startswith("55"):
            country_code, national = "55", digits[2:]
        elif digits.startswith("1"):
            country_code, national = "1", digits[1:]
        else:
            country_code, national = digits[:3], digits[3:]

        if not national:
            raise cls._invalid(raw)
        return country_code, national

    def _parse_national(self, raw: str, digits: str):
        if (self.default_country or "").upper() != "BR":
            raise self._invalid(raw)
        if len(digits) not in (10, 11):
            raise self._invalid(raw)

        area_code, subscriber = digits[:2], digits[2:]
        if area_code == "00":
            raise self._invalid(raw)
        if len(digits) == 11 and subscriber[0] != "9":
            raise self._invalid(raw)
        if len(digits) == 10 and subscriber[0] in "09":
            raise self._invalid(raw)
        return "55", digits

    @property
    def is_mobile(self) -> bool:
        return self.country_code == "55" and len(self.national_number) == 11

    @property
    def masked(self) -> str:
        """Representação mascarada: mantém DDI, DDD e últimos 4 dígitos."""
        last4 = self.national_number[-4:]
        if self.is_mobile:
            area_code = self.national_number[:2]
            return f"+55 {area_code} {self.national_number[2]}XXXX-{last4}"
        return f"+{self.country_code} XXXX-{last4}"

    def __str__(self) -> str:
        return self.e164


# =============================================================================
# DateOfBirth
# =============================================================================

@dataclass(frozen=True)
class DateOfBirth:
    """
    Data de nascimento.

    Invariante: nunca no futuro. A idade mínima é política da camada
    de validação de requisições, não deste objeto.
    """

    value: date

    def __post_init__(self):
        value = self.value
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            raise InvalidFormatError("Data de nascimento inválida", field="date_of_birth")
        if value > date.today():
            raise InvalidFormatError(
                "Data de nascimento não pode estar no futuro",
                field="date_of_birth",
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def from_iso(cls, text: str) -> "DateOfBirth":
        """
        Constrói a partir de "YYYY-MM-DD".

        Raises:
            InvalidFormatError: Se formato inválido ou data futura
        """
        message = "Data de nascimento deve estar no formato AAAA-MM-DD"
        if not isinstance(text, str):
            raise InvalidFormatError(message, field="date_of_birth")
        try:
            parsed = datetime.strptime(text.strip(), "%Y-%m-%d").date()
        except ValueError:
            raise InvalidFormatError(message, field="date_of_birth")
        return cls(parsed)

    def age_on(self, reference: Optional[date] = None) -> int:
        """Idade completa em anos na data de referência (padrão: hoje)."""
        reference = reference or date.today()
        if isinstance(reference, datetime):
            reference = reference.date()
        birthday_passed = (reference.month, reference.day) >= (self.value.month, self.value.day)
        return reference.year - self.value.year - (0 if birthday_passed else 1)

    def isoformat(self) -> str:
        return self.value.isoformat()

    def __str__(self) -> str:
        return self.value.isoformat()
