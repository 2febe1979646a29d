"""Текстовая (formatted) запись/чтение PrimitiveState (скаляр, 1D/2D/3D).

fmt == "*" — list-directed формат по умолчанию (repr(float), точный round-trip).
Любой другой fmt — format spec Python (".8e", "15.7E", ...), применяется
к каждому значению каждого statement'а, включая запись скорости.
"""

from __future__ import annotations

from functools import partial
from typing import IO

from fluidprim import vector
from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, PersistenceConfig
from fluidprim.core.records import read_reals_formatted, write_reals_formatted
from fluidprim.core.status import IOStatus
from fluidprim.lifecycle import StateOrCollection

from .sequence import collect_states, read_sequence, write_sequence


def write_formatted(
    stream: IO[str],
    fmt: str,
    prim: StateOrCollection,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return write_sequence(
        collect_states(prim, config),
        partial(write_reals_formatted, stream, fmt, config=config),
        partial(vector.write_formatted, stream, fmt, config=config),
        "write_formatted",
    )


def read_formatted(
    stream: IO[str],
    fmt: str,
    prim: StateOrCollection,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return read_sequence(
        collect_states(prim, config),
        partial(read_reals_formatted, stream, fmt, config=config),
        partial(vector.read_formatted, stream, fmt, config=config),
        "read_formatted",
    )
