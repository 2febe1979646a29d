"""Общая последовательность statement'ов для бинарного и текстового режимов.

Порядок полей фиксирован (field-major):
1. species всех элементов подряд (одна запись);
2. velocity всех элементов (через ввод/вывод Vector3);
3. pressure всех элементов;
4. bulk_density всех элементов;
5. gamma всех элементов.

Все statement'ы выполняются даже после сбоя; возвращается статус последнего.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from fluidprim.config import PersistenceConfig
from fluidprim.core.records import last_status
from fluidprim.core.status import IOStatus
from fluidprim.lifecycle import StateOrCollection, iter_states
from fluidprim.primitive import PrimitiveState
from fluidprim.vector import Vector3

SCALAR_FIELDS: Tuple[str, ...] = ("pressure", "bulk_density", "gamma")

WriteReals = Callable[[Sequence[float]], IOStatus]
ReadReals = Callable[[int], Tuple[IOStatus, Optional[np.ndarray]]]
VectorIO = Callable[[List[Vector3]], IOStatus]


def collect_states(prim: StateOrCollection, config: PersistenceConfig) -> List[PrimitiveState]:
    return list(iter_states(prim, order=config.order))


def _species_values(states: List[PrimitiveState]) -> np.ndarray:
    if not states:
        return np.empty(0)
    return np.concatenate([s.species_density for s in states])


def write_sequence(
    states: List[PrimitiveState],
    write_reals: WriteReals,
    write_vectors: VectorIO,
    what: str,
) -> IOStatus:
    if not all(s.is_allocated for s in states):
        return IOStatus.UNALLOCATED

    statuses = [
        write_reals(_species_values(states)),
        write_vectors([s.velocity for s in states]),
    ]
    for name in SCALAR_FIELDS:
        statuses.append(write_reals([getattr(s, name) for s in states]))
    return last_status(statuses, what)


def read_sequence(
    states: List[PrimitiveState],
    read_reals: ReadReals,
    read_vectors: VectorIO,
    what: str,
) -> IOStatus:
    if not all(s.is_allocated for s in states):
        return IOStatus.UNALLOCATED

    statuses: List[IOStatus] = []

    counts = [s.n_species for s in states]
    status, values = read_reals(sum(counts))
    if values is not None:
        offset = 0
        for s, n in zip(states, counts):
            s.species_density[:] = values[offset : offset + n]
            offset += n
    statuses.append(status)

    statuses.append(read_vectors([s.velocity for s in states]))

    for name in SCALAR_FIELDS:
        status, values = read_reals(len(states))
        if values is not None:
            for s, v in zip(states, values):
                setattr(s, name, float(v))
        statuses.append(status)

    return last_status(statuses, what)
