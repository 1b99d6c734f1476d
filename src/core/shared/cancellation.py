"""
Sinal de cancelamento cooperativo.

Casos de uso recebem opcionalmente um CancellationToken e o consultam
entre etapas e imediatamente antes de qualquer escrita. Um cancelamento
dentro do UnitOfWork provoca rollback, de modo que nenhuma escrita
parcial é aplicada.
"""

import threading
from typing import Optional

from .exceptions import OperationCancelledError


class CancellationToken:
    """
    Token de cancelamento thread-safe.

    Example:
        token = CancellationToken()
        threading.Timer(5, token.cancel).start()
        service.execute(dto, actor_id, cancellation=token)
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Sinaliza cancelamento."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            OperationCancelledError: Se o cancelamento foi sinalizado
        """
        if self._event.is_set():
            raise OperationCancelledError()


def check_cancelled(token: Optional[CancellationToken]) -> None:
    """Atalho para tokens opcionais."""
    if token is not None:
        token.raise_if_cancelled()
