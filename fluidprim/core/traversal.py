"""Обход коллекций значений (numpy object arrays).

Коллекция 1D/2D/3D(/4D) — это np.ndarray с dtype=object, элементы которого
являются самостоятельными объектами. ravel() объектного массива копирует
ссылки, поэтому мутации через список элементов видны в исходной коллекции.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import numpy as np

from fluidprim.config import TraversalOrder

from .validation import ensure_rank


def as_object_array(collection: Any) -> np.ndarray:
    """Привести коллекцию (ndarray или вложенные списки) к объектному массиву."""

    if isinstance(collection, np.ndarray):
        if collection.dtype != object:
            raise TypeError(f"collection must have dtype=object, got {collection.dtype}")
        return collection
    if isinstance(collection, (list, tuple)):
        shape = _nested_shape(collection)
        _ensure_regular(collection, shape)
        arr = np.empty(shape, dtype=object)
        for idx in np.ndindex(arr.shape):
            item: Any = collection
            for i in idx:
                item = item[i]
            arr[idx] = item
        return arr
    raise TypeError(f"expected ndarray or nested list of elements, got {type(collection).__name__}")


def _nested_shape(seq: Sequence[Any]) -> tuple[int, ...]:
    shape: list[int] = []
    item: Any = seq
    while isinstance(item, (list, tuple)):
        shape.append(len(item))
        if not item:
            break
        item = item[0]
    return tuple(shape)


def _ensure_regular(seq: Any, shape: tuple[int, ...], depth: int = 0) -> None:
    if depth == len(shape):
        if isinstance(seq, (list, tuple)):
            raise ValueError(f"nested collection is deeper than {len(shape)} level(s)")
        return
    if not isinstance(seq, (list, tuple)) or len(seq) != shape[depth]:
        raise ValueError(f"ragged nested collection: expected {shape[depth]} item(s) at level {depth}")
    for item in seq:
        _ensure_regular(item, shape, depth + 1)


def flat_items(collection: Any, order: TraversalOrder = "F", max_rank: int = 3) -> List[Any]:
    """Элементы коллекции в порядке обхода (по умолчанию первый индекс самый быстрый)."""

    arr = as_object_array(collection)
    ensure_rank(arr.ndim, 1, max_rank, "collection")
    return list(arr.ravel(order=order))
