"""
Adapter de hash de senha sobre `django.contrib.auth.hashers`.

O algoritmo efetivo segue PASSWORD_HASHERS das settings; o domínio
só enxerga `hash` e `verify`.
"""

from django.contrib.auth.hashers import check_password, make_password


class DjangoPasswordHasher:
    """Implementação do port PasswordHasher usando os hashers do Django."""

    def hash(self, plaintext: str) -> str:
        return make_password(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not hashed:
            return False
        return check_password(plaintext, hashed)
