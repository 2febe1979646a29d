"""Примитивное состояние многокомпонентной жидкости и его алгебра.

PrimitiveState хранит:
- species_density: плотности отдельных компонент [1:Ns] (динамический буфер);
- velocity: вектор скорости;
- pressure, bulk_density, gamma: давление, плотность смеси, показатель адиабаты.

Ключевые правила:
- species_density либо не выделен (None), либо имеет фиксированную длину Ns
  до явного init()/set()/free(). Ns = 0 — валидный выделенный буфер.
- bulk_density НЕ вычисляется из sum(species_density): согласованность
  поддерживает вызывающий код.
- Буфер принадлежит ровно одному экземпляру: любые копии/результаты
  операций получают собственный буфер.

Алгебра (`+ - * /`) строго покомпонентная по всем пяти полям:
- состояние ⊕ состояние: нужна одинаковая Ns, иначе ShapeMismatchError;
- скаляр ⊕ состояние / состояние ⊕ скаляр: скаляр приводится к R_P и
  применяется к каждому полю тем же оператором, порядок операндов сохраняется.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from fluidprim.core.errors import ShapeMismatchError
from fluidprim.core.precision import R_P, is_scalar, to_working
from fluidprim.core.status import IOStatus
from fluidprim.core.traversal import as_object_array, flat_items
from fluidprim.core.validation import ensure_allocated, ensure_non_negative, ensure_same_species
from fluidprim.vector import Vector3

Scalar = Union[int, float, np.number]
BinaryOp = Callable[[Any, Any], Any]


def _as_species(species: Sequence[float]) -> np.ndarray:
    buf = np.array(species, dtype=R_P)
    if buf.ndim != 1:
        raise ValueError(f"species_density must be 1-D; got shape {buf.shape}")
    return buf


def _as_vector(velocity: Union[Vector3, Sequence[float]]) -> Vector3:
    if isinstance(velocity, Vector3):
        return velocity.copy()
    return Vector3.from_array(velocity)


@dataclass(eq=False)
class PrimitiveState:
    species_density: Optional[np.ndarray] = None
    velocity: Vector3 = field(default_factory=Vector3)
    pressure: float = 0.0
    bulk_density: float = 0.0
    gamma: float = 0.0

    def __post_init__(self) -> None:
        if self.species_density is not None:
            self.species_density = _as_species(self.species_density)
        self.velocity = _as_vector(self.velocity)
        self.pressure = to_working(self.pressure)
        self.bulk_density = to_working(self.bulk_density)
        self.gamma = to_working(self.gamma)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    @property
    def is_allocated(self) -> bool:
        return self.species_density is not None

    @property
    def n_species(self) -> int:
        return int(ensure_allocated(self.species_density, "PrimitiveState").shape[0])

    def init(
        self,
        n_species: int,
        *,
        species: Optional[Sequence[float]] = None,
        velocity: Union[Vector3, Sequence[float], None] = None,
        pressure: Optional[Scalar] = None,
        bulk_density: Optional[Scalar] = None,
        gamma: Optional[Scalar] = None,
    ) -> None:
        """(Пере)выделить species ровно под n_species нулей и записать переданные поля."""

        ensure_non_negative(int(n_species), "n_species")
        self.species_density = np.zeros(int(n_species), dtype=R_P)
        if species is not None:
            buf = _as_species(species)
            if buf.shape[0] != n_species:
                raise ShapeMismatchError(
                    f"species has {buf.shape[0]} entries but n_species={n_species}"
                )
            self.species_density[:] = buf
        self._overwrite(velocity, pressure, bulk_density, gamma)

    def set(
        self,
        *,
        species: Optional[Sequence[float]] = None,
        velocity: Union[Vector3, Sequence[float], None] = None,
        pressure: Optional[Scalar] = None,
        bulk_density: Optional[Scalar] = None,
        gamma: Optional[Scalar] = None,
    ) -> None:
        """Как init(), но Ns берётся из самого species; без species буфер не трогаем."""

        if species is not None:
            self.species_density = _as_species(species)
        self._overwrite(velocity, pressure, bulk_density, gamma)

    def free(self) -> IOStatus:
        self.species_density = None
        return IOStatus.OK

    def _overwrite(self, velocity, pressure, bulk_density, gamma) -> None:
        if velocity is not None:
            self.velocity = _as_vector(velocity)
        if pressure is not None:
            self.pressure = to_working(pressure)
        if bulk_density is not None:
            self.bulk_density = to_working(bulk_density)
        if gamma is not None:
            self.gamma = to_working(gamma)

    # ------------------------------------------------------------------
    # copies / assignment
    # ------------------------------------------------------------------
    def copy(self) -> "PrimitiveState":
        out = PrimitiveState(
            velocity=self.velocity,
            pressure=self.pressure,
            bulk_density=self.bulk_density,
            gamma=self.gamma,
        )
        if self.species_density is not None:
            out.species_density = self.species_density.copy()
        return out

    def assign(self, other: Union["PrimitiveState", Scalar]) -> None:
        if isinstance(other, PrimitiveState):
            _assign_state(self, other)
        else:
            _assign_scalar(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrimitiveState):
            return NotImplemented
        if (self.species_density is None) != (other.species_density is None):
            return False
        if self.species_density is not None and not np.array_equal(
            self.species_density, other.species_density
        ):
            return False
        return (
            self.velocity == other.velocity
            and self.pressure == other.pressure
            and self.bulk_density == other.bulk_density
            and self.gamma == other.gamma
        )

    # ------------------------------------------------------------------
    # algebra
    # ------------------------------------------------------------------
    def _binary(self, other: object, op: BinaryOp, reflected: bool = False, out=None):
        if isinstance(other, PrimitiveState):
            left, right = (other, self) if reflected else (self, other)
            return _combine_states(left, right, op, out)
        if is_scalar(other):
            return _combine_scalar(self, other, op, reflected, out)
        return NotImplemented

    def __add__(self, other):
        return self._binary(other, operator.add)

    def __radd__(self, other):
        return self._binary(other, operator.add, reflected=True)

    def __iadd__(self, other):
        return self._binary(other, operator.add, out=self)

    def __sub__(self, other):
        return self._binary(other, operator.sub)

    def __rsub__(self, other):
        return self._binary(other, operator.sub, reflected=True)

    def __isub__(self, other):
        return self._binary(other, operator.sub, out=self)

    def __mul__(self, other):
        return self._binary(other, operator.mul)

    def __rmul__(self, other):
        return self._binary(other, operator.mul, reflected=True)

    def __imul__(self, other):
        return self._binary(other, operator.mul, out=self)

    def __truediv__(self, other):
        return self._binary(other, operator.truediv)

    def __rtruediv__(self, other):
        return self._binary(other, operator.truediv, reflected=True)

    def __itruediv__(self, other):
        return self._binary(other, operator.truediv, out=self)

    def __pos__(self) -> "PrimitiveState":
        return _unary(self, operator.pos)

    def __neg__(self) -> "PrimitiveState":
        return _unary(self, operator.neg)


# ----------------------------------------------------------------------
# operator kernels
# ----------------------------------------------------------------------
def _ensure_species(result: PrimitiveState, ns: int) -> np.ndarray:
    """Выделить буфер результата, если его нет или длина другая; иначе переиспользовать."""

    buf = result.species_density
    if buf is None or buf.shape[0] != ns:
        buf = np.empty(ns, dtype=R_P)
        result.species_density = buf
    return buf


def _combine_states(
    a: PrimitiveState,
    b: PrimitiveState,
    op: BinaryOp,
    out: Optional[PrimitiveState] = None,
) -> PrimitiveState:
    ns = ensure_same_species(a.species_density, b.species_density)
    res = out if out is not None else PrimitiveState()
    with np.errstate(all="ignore"):
        species = op(a.species_density, b.species_density)
        buf = _ensure_species(res, ns)
        buf[:] = species
        res.velocity = op(a.velocity, b.velocity)
        res.pressure = float(op(R_P(a.pressure), R_P(b.pressure)))
        res.bulk_density = float(op(R_P(a.bulk_density), R_P(b.bulk_density)))
        res.gamma = float(op(R_P(a.gamma), R_P(b.gamma)))
    return res


def _combine_scalar(
    s: PrimitiveState,
    scalar: Scalar,
    op: BinaryOp,
    reflected: bool,
    out: Optional[PrimitiveState] = None,
) -> PrimitiveState:
    species = ensure_allocated(s.species_density, "PrimitiveState")
    k = to_working(scalar)
    kr = R_P(k)

    def apply(x):
        return op(kr, x) if reflected else op(x, kr)

    res = out if out is not None else PrimitiveState()
    with np.errstate(all="ignore"):
        values = apply(species)
        buf = _ensure_species(res, species.shape[0])
        buf[:] = values
        # python float: Vector3 handles reflected ops itself
        res.velocity = op(k, s.velocity) if reflected else op(s.velocity, k)
        res.pressure = float(apply(R_P(s.pressure)))
        res.bulk_density = float(apply(R_P(s.bulk_density)))
        res.gamma = float(apply(R_P(s.gamma)))
    return res


def _unary(s: PrimitiveState, op: Callable[[Any], Any]) -> PrimitiveState:
    species = ensure_allocated(s.species_density, "PrimitiveState")
    res = PrimitiveState()
    buf = _ensure_species(res, species.shape[0])
    buf[:] = op(species)
    res.velocity = op(s.velocity)
    res.pressure = float(op(R_P(s.pressure)))
    res.bulk_density = float(op(R_P(s.bulk_density)))
    res.gamma = float(op(R_P(s.gamma)))
    return res


def combine(a: Any, b: Any, op: BinaryOp) -> Any:
    """Поэлементная операция над состояниями и коллекциями одной формы.

    Голые `arr + arr` подчиняются numpy-broadcasting; здесь формы двух
    коллекций обязаны совпадать, иначе ShapeMismatchError. Скаляр или
    одиночное состояние по-прежнему применяются ко всем элементам.
    """

    left = a if isinstance(a, PrimitiveState) or is_scalar(a) else as_object_array(a)
    right = b if isinstance(b, PrimitiveState) or is_scalar(b) else as_object_array(b)
    if isinstance(left, np.ndarray) and isinstance(right, np.ndarray) and left.shape != right.shape:
        raise ShapeMismatchError(f"collection shape mismatch: {left.shape} != {right.shape}")
    return op(left, right)


# ----------------------------------------------------------------------
# assignment
# ----------------------------------------------------------------------
def copy_if_both_allocated(dst: PrimitiveState, src: PrimitiveState) -> bool:
    """Скопировать species только если буферы выделены у ОБОИХ.

    Присваивание никогда не выделяет буфер у dst, которого нет. Если оба
    выделены, но длины разные, dst получает копию длины src.
    Возвращает True, если копирование произошло.
    """

    if dst.species_density is None or src.species_density is None:
        return False
    if dst.species_density.shape != src.species_density.shape:
        dst.species_density = src.species_density.copy()
    else:
        dst.species_density[:] = src.species_density
    return True


def _assign_state(dst: PrimitiveState, src: PrimitiveState) -> None:
    copy_if_both_allocated(dst, src)
    dst.velocity = src.velocity.copy()
    dst.pressure = src.pressure
    dst.bulk_density = src.bulk_density
    dst.gamma = src.gamma


def _assign_scalar(dst: PrimitiveState, scalar: Scalar) -> None:
    k = to_working(scalar)
    if dst.species_density is not None:
        dst.species_density[:] = k
    dst.velocity.assign(k)
    dst.pressure = k
    dst.bulk_density = k
    dst.gamma = k


def assign(dst: Any, src: Any) -> None:
    """Поэлементное присваивание dst = src.

    dst: состояние или коллекция состояний (1D/2D/3D).
    src: состояние, скаляр или коллекция той же формы, что и dst.
    """

    if isinstance(dst, PrimitiveState):
        if not (isinstance(src, PrimitiveState) or is_scalar(src)):
            raise TypeError(f"cannot assign {type(src).__name__} to a PrimitiveState")
        dst.assign(src)
        return

    targets = as_object_array(dst)
    if isinstance(src, PrimitiveState) or is_scalar(src):
        for item in flat_items(targets):
            _checked(item).assign(src)
        return

    sources = as_object_array(src)
    if sources.shape != targets.shape:
        raise ShapeMismatchError(f"collection shape mismatch: {targets.shape} != {sources.shape}")
    for d, s in zip(flat_items(targets), flat_items(sources)):
        _checked(d).assign(_checked(s))


def _checked(item: Any) -> PrimitiveState:
    if not isinstance(item, PrimitiveState):
        raise TypeError(f"collection element must be PrimitiveState, got {type(item).__name__}")
    return item
