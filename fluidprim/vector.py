"""Трёхкомпонентный вектор (скорость) с алгеброй и чтением/записью.

Минимальный коллаборатор для PrimitiveState:
- `+ - * /` с Vector3 (покомпонентно) и со скаляром с любой стороны;
  порядок операндов сохраняется (k - v -> k - компонента);
- унарные `+`/`-`;
- assign() — копирование из вектора или broadcast скаляра;
- write_*/read_* для одного вектора или набора векторов (одна запись:
  x, y, z каждого элемента подряд, в порядке обхода).
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import IO, Callable, Iterable, List, Sequence, Union

import numpy as np

from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, PersistenceConfig
from fluidprim.core.precision import R_P, is_scalar, to_working
from fluidprim.core.records import (
    read_reals_binary,
    read_reals_formatted,
    write_reals_binary,
    write_reals_formatted,
)
from fluidprim.core.status import IOStatus

BinaryOp = Callable[[np.ndarray, np.ndarray], np.ndarray]


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        self.x = to_working(self.x)
        self.y = to_working(self.y)
        self.z = to_working(self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=R_P)

    @classmethod
    def from_array(cls, a: Sequence[float]) -> "Vector3":
        if len(a) != 3:
            raise ValueError(f"Vector3 needs exactly 3 components; got {len(a)}")
        return cls(float(a[0]), float(a[1]), float(a[2]))

    def copy(self) -> "Vector3":
        return Vector3(self.x, self.y, self.z)

    def assign(self, other: Union["Vector3", float]) -> None:
        if isinstance(other, Vector3):
            self.x, self.y, self.z = other.x, other.y, other.z
            return
        k = to_working(other)
        self.x = self.y = self.z = k

    def _combine(self, other: object, op: BinaryOp, reflected: bool = False):
        if isinstance(other, Vector3):
            rhs = other.to_array()
        elif is_scalar(other):
            rhs = R_P(to_working(other))
        else:
            return NotImplemented
        lhs = self.to_array()
        with np.errstate(all="ignore"):
            out = op(rhs, lhs) if reflected else op(lhs, rhs)
        return Vector3.from_array(out)

    def __add__(self, other):
        return self._combine(other, operator.add)

    def __radd__(self, other):
        return self._combine(other, operator.add, reflected=True)

    def __sub__(self, other):
        return self._combine(other, operator.sub)

    def __rsub__(self, other):
        return self._combine(other, operator.sub, reflected=True)

    def __mul__(self, other):
        return self._combine(other, operator.mul)

    def __rmul__(self, other):
        return self._combine(other, operator.mul, reflected=True)

    def __truediv__(self, other):
        return self._combine(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._combine(other, operator.truediv, reflected=True)

    def __pos__(self) -> "Vector3":
        return self.copy()

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)


VectorArg = Union[Vector3, Iterable[Vector3]]


def _as_list(vectors: VectorArg) -> List[Vector3]:
    if isinstance(vectors, Vector3):
        return [vectors]
    return list(vectors)


def _components(vectors: List[Vector3]) -> List[float]:
    out: List[float] = []
    for v in vectors:
        out.extend((v.x, v.y, v.z))
    return out


def _fill(vectors: List[Vector3], values: np.ndarray) -> None:
    for i, v in enumerate(vectors):
        v.x, v.y, v.z = (float(c) for c in values[3 * i : 3 * i + 3])


def write_binary(
    stream: IO[bytes],
    vectors: VectorArg,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return write_reals_binary(stream, _components(_as_list(vectors)), config)


def read_binary(
    stream: IO[bytes],
    vectors: VectorArg,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    items = _as_list(vectors)
    status, values = read_reals_binary(stream, 3 * len(items), config)
    if values is not None:
        _fill(items, values)
    return status


def write_formatted(
    stream: IO[str],
    fmt: str,
    vectors: VectorArg,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    return write_reals_formatted(stream, fmt, _components(_as_list(vectors)), config)


def read_formatted(
    stream: IO[str],
    fmt: str,
    vectors: VectorArg,
    config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
) -> IOStatus:
    items = _as_list(vectors)
    status, values = read_reals_formatted(stream, fmt, 3 * len(items), config)
    if values is not None:
        _fill(items, values)
    return status
