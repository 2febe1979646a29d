"""fluidprim.core.validation

Базовые проверки, чтобы ловить несовместимые буферы как можно раньше.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import ShapeMismatchError, UnallocatedSpeciesError


def ensure_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def ensure_rank(ndim: int, min_rank: int, max_rank: int, name: str) -> None:
    if not (min_rank <= ndim <= max_rank):
        raise ValueError(f"{name} must have rank in [{min_rank}, {max_rank}], got {ndim}")


def ensure_allocated(species: Optional[np.ndarray], name: str) -> np.ndarray:
    if species is None:
        raise UnallocatedSpeciesError(f"{name}: species buffer is not allocated")
    return species


def ensure_same_species(a: Optional[np.ndarray], b: Optional[np.ndarray]) -> int:
    """Оба буфера выделены и одной длины; возвращает Ns."""

    a = ensure_allocated(a, "left operand")
    b = ensure_allocated(b, "right operand")
    if a.shape[0] != b.shape[0]:
        raise ShapeMismatchError(f"species length mismatch: {a.shape[0]} != {b.shape[0]}")
    return int(a.shape[0])
