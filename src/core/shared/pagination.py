"""
Paginação compartilhada pelas consultas de listagem.

- PageRequest: página pedida pelo chamador (1-indexed), normalizada
- PageResult: itens da página atual + total sem paginação
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, TypeVar

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    """
    Parâmetros de paginação.

    Valores inválidos não geram erro: página < 1 vira 1, tamanho < 1
    volta ao padrão e tamanhos acima de MAX_PAGE_SIZE são limitados.

    Example:
        PageRequest(page=3, page_size=10).offset  # 20
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        page = self.page if self.page >= 1 else 1
        if self.page_size < 1:
            page_size = DEFAULT_PAGE_SIZE
        else:
            page_size = min(self.page_size, MAX_PAGE_SIZE)
        object.__setattr__(self, "page", page)
        object.__setattr__(self, "page_size", page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass
class PageResult(Generic[T]):
    """
    Resultado paginado.

    Attributes:
        items: Itens da página atual
        total: Total de itens que atendem aos filtros
        page: Página atual
        page_size: Itens por página
    """

    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def map(self, func: Callable[[T], U]) -> "PageResult[U]":
        """Converte os itens mantendo os metadados da página."""
        return PageResult(
            items=[func(item) for item in self.items],
            total=self.total,
            page=self.page,
            page_size=self.page_size,
        )

    def to_dict(self) -> dict:
        def serialize(item: Any):
            return item.to_dict() if hasattr(item, "to_dict") else item

        return {
            "items": [serialize(item) for item in self.items],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }

    @classmethod
    def from_list(cls, items: List[T], page: PageRequest) -> "PageResult[T]":
        """Recorta uma lista já filtrada e ordenada (stores em memória)."""
        return cls(
            items=items[page.offset:page.offset + page.limit],
            total=len(items),
            page=page.page,
            page_size=page.page_size,
        )
