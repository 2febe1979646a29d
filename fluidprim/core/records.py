"""fluidprim.core.records

Слой "statement": одна запись (record) в поток = один вызов функции.

Каждая функция возвращает IOStatus и не бросает исключений на сбоях потока.
Составные операции (species, velocity, pressure, density, gamma) выполняют
все statement'ы по порядку и отдают статус ПОСЛЕДНЕГО (см. last_status).

Бинарный поток: сырые real'ы в рабочей точности, без заголовков и длин.
Текстовый поток: одна строка на statement.
- list-directed ("*"): токены repr(float); чтение добирает строки, пока не
  наберёт нужное число значений, хвост последней строки игнорируется.
- явный формат (format spec Python, например ".8e"): применяется к каждому
  значению; чтение потребляет ровно одну строку.
"""

from __future__ import annotations

import logging
from typing import IO, Iterable, Optional, Sequence, Tuple

import numpy as np

from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, PersistenceConfig

from .status import IOStatus

logger = logging.getLogger(__name__)

ReadResult = Tuple[IOStatus, Optional[np.ndarray]]


def write_reals_binary(
    stream: IO[bytes],
    values: Iterable[float],
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    try:
        payload = np.asarray(list(values), dtype=config.real_dtype).tobytes()
    except (TypeError, ValueError):
        return IOStatus.FORMAT_ERROR
    try:
        stream.write(payload)
    except (OSError, TypeError, ValueError):
        return IOStatus.STREAM_ERROR
    return IOStatus.OK


def read_reals_binary(
    stream: IO[bytes],
    count: int,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> ReadResult:
    nbytes = count * np.dtype(config.real_dtype).itemsize
    try:
        data = stream.read(nbytes)
    except (OSError, ValueError):
        return IOStatus.STREAM_ERROR, None
    if not isinstance(data, (bytes, bytearray)):
        return IOStatus.STREAM_ERROR, None
    if len(data) < nbytes:
        return IOStatus.END_OF_FILE, None
    values = np.frombuffer(data, dtype=config.real_dtype).astype(np.float64)
    return IOStatus.OK, values


def format_reals(
    fmt: str,
    values: Iterable[float],
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> str:
    """Строка одного statement'а (без перевода строки). ValueError на плохом формате."""

    if config.is_list_directed(fmt):
        tokens = [repr(float(v)) for v in values]
    else:
        spec = fmt.strip()
        tokens = [format(float(v), spec) for v in values]
    return config.separator.join(tokens)


def write_reals_formatted(
    stream: IO[str],
    fmt: str,
    values: Iterable[float],
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    try:
        line = format_reals(fmt, values, config)
    except (TypeError, ValueError):
        return IOStatus.FORMAT_ERROR
    try:
        stream.write(line + "\n")
    except (OSError, TypeError, ValueError):
        return IOStatus.STREAM_ERROR
    return IOStatus.OK


def _split_tokens(line: str, list_directed: bool) -> list[str]:
    # запятая разделяет значения только в list-directed; в явном формате это группировка разрядов
    if list_directed:
        return line.replace(",", " ").split()
    return [t.replace(",", "") for t in line.split()]


def _parse_token(token: str) -> float:
    # 1.0D+00 допустим в старых текстовых дампах
    return float(token.replace("D", "E").replace("d", "e"))


def read_reals_formatted(
    stream: IO[str],
    fmt: str,
    count: int,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> ReadResult:
    list_directed = config.is_list_directed(fmt)
    tokens: list[str] = []
    try:
        line = stream.readline()
        if not isinstance(line, str):
            return IOStatus.STREAM_ERROR, None
        if line == "":
            return IOStatus.END_OF_FILE, None
        tokens.extend(_split_tokens(line, list_directed))
        while list_directed and len(tokens) < count:
            line = stream.readline()
            if line == "":
                return IOStatus.END_OF_FILE, None
            tokens.extend(_split_tokens(line, list_directed))
    except (OSError, ValueError):
        return IOStatus.STREAM_ERROR, None

    if len(tokens) < count:
        return IOStatus.FORMAT_ERROR, None
    try:
        values = np.array([_parse_token(t) for t in tokens[:count]], dtype=np.float64)
    except ValueError:
        return IOStatus.FORMAT_ERROR, None
    return IOStatus.OK, values


def last_status(statuses: Sequence[IOStatus], what: str) -> IOStatus:
    """Статус составной операции = статус последнего statement'а.

    Ранние сбои не меняют результат, но пишутся в лог.
    """

    if not statuses:
        return IOStatus.OK
    for idx, st in enumerate(statuses[:-1]):
        if st != IOStatus.OK:
            logger.warning(
                "%s: statement %d failed with %s (only the last statement status is returned)",
                what,
                idx,
                IOStatus(st).name,
            )
    return IOStatus(statuses[-1])
