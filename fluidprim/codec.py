"""Плоское представление PrimitiveState (flat array).

Layout (длина Ns+6, без заголовка):
    [species(1..Ns), v.x, v.y, v.z, pressure, bulk_density, gamma]

Ns потребитель знает сам или выводит из длины массива.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, TraversalOrder
from fluidprim.core.errors import ShapeMismatchError
from fluidprim.core.precision import R_P
from fluidprim.core.validation import ensure_allocated
from fluidprim.lifecycle import empty_collection, iter_states
from fluidprim.primitive import PrimitiveState

N_TRAILING = 6


def prim_to_array(prim: PrimitiveState) -> np.ndarray:
    species = ensure_allocated(prim.species_density, "prim_to_array")
    ns = species.shape[0]
    out = np.empty(ns + N_TRAILING, dtype=R_P)
    out[:ns] = species
    out[ns:] = (
        prim.velocity.x,
        prim.velocity.y,
        prim.velocity.z,
        prim.pressure,
        prim.bulk_density,
        prim.gamma,
    )
    return out


def array_to_prim(array: Sequence[float], prim: Optional[PrimitiveState] = None) -> PrimitiveState:
    a = np.asarray(array, dtype=R_P)
    if a.ndim != 1:
        raise ValueError(f"flat array must be 1-D; got shape {a.shape}")
    if a.shape[0] < N_TRAILING:
        raise ValueError(f"flat array must have at least {N_TRAILING} values; got {a.shape[0]}")

    ns = a.shape[0] - N_TRAILING
    out = prim if prim is not None else PrimitiveState()
    out.species_density = a[:ns].copy()
    out.velocity.x, out.velocity.y, out.velocity.z = (float(c) for c in a[ns : ns + 3])
    out.pressure = float(a[ns + 3])
    out.bulk_density = float(a[ns + 4])
    out.gamma = float(a[ns + 5])
    return out


encode = prim_to_array
decode = array_to_prim


def collection_to_array(
    coll: np.ndarray,
    order: TraversalOrder = DEFAULT_PERSISTENCE_CONFIG.order,
) -> np.ndarray:
    """Коллекция -> 2D массив (n_elements, Ns+6) в порядке обхода. Ns должен быть общий."""

    rows = [prim_to_array(s) for s in iter_states(coll, order=order)]
    if not rows:
        return np.empty((0, N_TRAILING), dtype=R_P)
    widths = {r.shape[0] for r in rows}
    if len(widths) != 1:
        raise ShapeMismatchError(f"collection has mixed species lengths: {sorted(w - N_TRAILING for w in widths)}")
    return np.vstack(rows)


def array_to_collection(
    array: np.ndarray,
    shape: Union[int, Tuple[int, ...]],
    order: TraversalOrder = DEFAULT_PERSISTENCE_CONFIG.order,
) -> np.ndarray:
    a = np.asarray(array, dtype=R_P)
    if a.ndim != 2:
        raise ValueError(f"flat collection must be 2-D; got shape {a.shape}")
    coll = empty_collection(shape)
    if a.shape[0] != coll.size:
        raise ShapeMismatchError(f"expected {coll.size} rows for shape {coll.shape}; got {a.shape[0]}")
    for state, row in zip(iter_states(coll, order=order), a):
        array_to_prim(row, state)
    return coll
