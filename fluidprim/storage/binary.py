"""Бинарная запись/чтение PrimitiveState (скаляр, 1D/2D/3D).

Сырые real'ы рабочей точности, без заголовков: читатель обязан заранее
знать Ns каждого элемента (буферы species должны быть выделены).
"""

from __future__ import annotations

from functools import partial
from typing import IO

from fluidprim import vector
from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, PersistenceConfig
from fluidprim.core.records import read_reals_binary, write_reals_binary
from fluidprim.core.status import IOStatus
from fluidprim.lifecycle import StateOrCollection

from .sequence import collect_states, read_sequence, write_sequence


def write_binary(
    stream: IO[bytes],
    prim: StateOrCollection,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return write_sequence(
        collect_states(prim, config),
        partial(write_reals_binary, stream, config=config),
        partial(vector.write_binary, stream, config=config),
        "write_binary",
    )


def read_binary(
    stream: IO[bytes],
    prim: StateOrCollection,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return read_sequence(
        collect_states(prim, config),
        partial(read_reals_binary, stream, config=config),
        partial(vector.read_binary, stream, config=config),
        "read_binary",
    )
