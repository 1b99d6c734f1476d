"""
Políticas configuráveis do Domínio de Pessoal.

Valores padrão espelham as configurações de `src/config/settings.py`
(bloco PERSONNEL); o container injeta os valores efetivos.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(frozen=True)
class PersonnelPolicy:
    """
    Attributes:
        minimum_age: Idade mínima para cadastro de colaborador
        default_phone_country: País aplicado a telefones sem DDI
        password_min_length: Tamanho mínimo de senha
        max_failed_access_attempts: Falhas consecutivas até o bloqueio
        lockout_duration: Duração do bloqueio
    """

    minimum_age: int = 18
    default_phone_country: str = "BR"
    password_min_length: int = 8
    max_failed_access_attempts: int = 5
    lockout_duration: timedelta = timedelta(minutes=15)

    @classmethod
    def from_settings(cls, settings: Optional[dict] = None) -> "PersonnelPolicy":
        """Constrói a partir do dicionário PERSONNEL das settings."""
        settings = settings or {}
        return cls(
            minimum_age=int(settings.get("MINIMUM_AGE", 18)),
            default_phone_country=settings.get("DEFAULT_PHONE_COUNTRY", "BR"),
            password_min_length=int(settings.get("PASSWORD_MIN_LENGTH", 8)),
            max_failed_access_attempts=int(settings.get("MAX_FAILED_ACCESS_ATTEMPTS", 5)),
            lockout_duration=timedelta(minutes=int(settings.get("LOCKOUT_MINUTES", 15))),
        )
