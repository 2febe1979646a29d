"""Конфигурация сериализации (data-only).

Всё, что влияет на байтовый/текстовый layout потоков, собрано здесь:
- порядок байт бинарных записей;
- порядок обхода коллекций (F — первый индекс самый быстрый, как в исходных потоках);
- sentinel list-directed формата и разделитель токенов;
- параметры сжатия HDF5.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


TraversalOrder = Literal["F", "C"]
ByteOrder = Literal["<", ">"]


@dataclass(frozen=True)
class PersistenceConfig:
    byteorder: ByteOrder = "<"
    order: TraversalOrder = "F"
    list_directed: str = "*"
    separator: str = " "

    h5_compression: str = "gzip"
    h5_compression_opts: int = 5

    def __post_init__(self) -> None:
        if self.byteorder not in ("<", ">"):
            raise ValueError(f"byteorder must be '<' or '>', got {self.byteorder!r}")
        if self.order not in ("F", "C"):
            raise ValueError(f"order must be 'F' or 'C', got {self.order!r}")
        if not self.list_directed.strip():
            raise ValueError("list_directed sentinel must be non-empty")
        if not self.separator or self.separator.strip():
            raise ValueError("separator must be non-empty whitespace")
        if not (0 <= self.h5_compression_opts <= 9):
            raise ValueError("h5_compression_opts must be in [0, 9]")

    @property
    def real_dtype(self) -> str:
        return f"{self.byteorder}f8"

    def is_list_directed(self, fmt: str) -> bool:
        return fmt.strip() == self.list_directed


DEFAULT_PERSISTENCE_CONFIG = PersistenceConfig()
