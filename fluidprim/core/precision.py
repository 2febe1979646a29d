"""fluidprim.core.precision

Рабочая точность (working precision).

Принцип: любой скаляр (int/float любой разрядности, numpy-скаляры) сначала
приводится к R_P и только потом комбинируется с состоянием.
"""

from __future__ import annotations

import numbers

import numpy as np

# Working precision
R_P = np.float64


def is_scalar(value: object) -> bool:
    """True для вещественных/целых скаляров любого вида (bool не считается числом)."""

    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, numbers.Real)


def to_working(value: numbers.Real) -> float:
    """Привести скаляр к рабочей точности."""

    if not is_scalar(value):
        raise TypeError(f"expected a real or integer scalar, got {type(value).__name__}")
    return float(R_P(value))
