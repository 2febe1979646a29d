"""Status codes returned by lifecycle and I/O operations.

Операции чтения/записи и free() не бросают исключений на сбоях потока:
они возвращают код. 0 — успех, всё остальное — ошибка.
"""

from __future__ import annotations

from enum import IntEnum


class IOStatus(IntEnum):
    OK = 0
    END_OF_FILE = -1
    STREAM_ERROR = 1
    FORMAT_ERROR = 2
    UNALLOCATED = 3
    FREE_ERROR = 4

    @property
    def ok(self) -> bool:
        return self is IOStatus.OK
