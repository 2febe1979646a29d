"""Жизненный цикл PrimitiveState: init / set / free для скаляров и коллекций.

Коллекция — np.ndarray(dtype=object) формы 1D/2D/3D (для free — до 4D),
каждый элемент которой — отдельный PrimitiveState. Одни и те же параметры
применяются ко всем элементам; каждый элемент получает собственную копию
буфера species.

Порядок обхода — column-major (первый индекс самый быстрый).
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, TraversalOrder
from fluidprim.core.status import IOStatus
from fluidprim.core.traversal import flat_items
from fluidprim.core.validation import ensure_non_negative, ensure_rank
from fluidprim.primitive import PrimitiveState, Scalar
from fluidprim.vector import Vector3

logger = logging.getLogger(__name__)

StateOrCollection = Union[PrimitiveState, np.ndarray]
VectorLike = Union[Vector3, Sequence[float]]


def empty_collection(shape: Union[int, Tuple[int, ...]]) -> np.ndarray:
    """Коллекция заданной формы из неинициализированных (species=None) состояний."""

    shape_t = (shape,) if isinstance(shape, int) else tuple(shape)
    ensure_rank(len(shape_t), 1, 4, "shape")
    for n in shape_t:
        ensure_non_negative(n, "collection extent")
    coll = np.empty(shape_t, dtype=object)
    for idx in np.ndindex(shape_t):
        coll[idx] = PrimitiveState()
    return coll


def iter_states(
    prim: StateOrCollection,
    order: TraversalOrder = DEFAULT_PERSISTENCE_CONFIG.order,
    max_rank: int = 3,
) -> Iterator[PrimitiveState]:
    if isinstance(prim, PrimitiveState):
        yield prim
        return
    for item in flat_items(prim, order=order, max_rank=max_rank):
        if not isinstance(item, PrimitiveState):
            raise TypeError(f"collection element must be PrimitiveState, got {type(item).__name__}")
        yield item


def init_state(
    prim: StateOrCollection,
    n_species: int,
    *,
    species: Optional[Sequence[float]] = None,
    velocity: Optional[VectorLike] = None,
    pressure: Optional[Scalar] = None,
    bulk_density: Optional[Scalar] = None,
    gamma: Optional[Scalar] = None,
) -> None:
    count = 0
    for state in iter_states(prim):
        state.init(
            n_species,
            species=species,
            velocity=velocity,
            pressure=pressure,
            bulk_density=bulk_density,
            gamma=gamma,
        )
        count += 1
    logger.debug("init: %d state(s) allocated with Ns=%d", count, n_species)


def set_state(
    prim: StateOrCollection,
    *,
    species: Optional[Sequence[float]] = None,
    velocity: Optional[VectorLike] = None,
    pressure: Optional[Scalar] = None,
    bulk_density: Optional[Scalar] = None,
    gamma: Optional[Scalar] = None,
) -> None:
    for state in iter_states(prim):
        state.set(
            species=species,
            velocity=velocity,
            pressure=pressure,
            bulk_density=bulk_density,
            gamma=gamma,
        )


def free_state(prim: Any) -> IOStatus:
    """Освободить буферы species. Идемпотентно; сбой -> FREE_ERROR, без исключений.

    Сбоем считается элемент коллекции, не являющийся PrimitiveState
    (освобождать у него нечего, остальные элементы всё равно освобождаются).
    """

    if isinstance(prim, PrimitiveState):
        return prim.free()

    try:
        items = flat_items(prim, max_rank=4)
    except (TypeError, ValueError) as exc:
        logger.warning("free: not a collection of states: %s", exc)
        return IOStatus.FREE_ERROR

    status = IOStatus.OK
    released = 0
    for item in items:
        if not isinstance(item, PrimitiveState):
            logger.warning("free: skipping element of type %s", type(item).__name__)
            status = IOStatus.FREE_ERROR
            continue
        if item.is_allocated:
            released += 1
        item.free()
    logger.debug("free: released %d species buffer(s)", released)
    return status
