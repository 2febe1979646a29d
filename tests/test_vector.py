import io
import math

import numpy as np
import pytest

from fluidprim import vector
from fluidprim.core.status import IOStatus
from fluidprim.vector import Vector3


class TestVectorAlgebra:
    def test_componentwise(self) -> None:
        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 5.0, 6.0)
        assert a + b == Vector3(5.0, 7.0, 9.0)
        assert a - b == Vector3(-3.0, -3.0, -3.0)
        assert a * b == Vector3(4.0, 10.0, 18.0)
        assert b / a == Vector3(4.0, 2.5, 2.0)

    def test_scalar_order_preserved(self) -> None:
        v = Vector3(1.0, 2.0, 4.0)
        assert 10 - v == Vector3(9.0, 8.0, 6.0)
        assert v - 10 == Vector3(-9.0, -8.0, -6.0)
        assert 8.0 / v == Vector3(8.0, 4.0, 2.0)
        assert v / np.float32(2.0) == Vector3(0.5, 1.0, 2.0)

    def test_division_by_zero_follows_ieee(self) -> None:
        v = Vector3(1.0, -1.0, 0.0) / 0
        assert v.x == math.inf
        assert v.y == -math.inf
        assert math.isnan(v.z)

    def test_unary(self) -> None:
        v = Vector3(1.0, -2.0, 3.0)
        assert -v == Vector3(-1.0, 2.0, -3.0)
        pos = +v
        assert pos == v
        assert pos is not v

    def test_assign(self) -> None:
        v = Vector3()
        v.assign(Vector3(1.0, 2.0, 3.0))
        assert v == Vector3(1.0, 2.0, 3.0)
        v.assign(7)
        assert v == Vector3(7.0, 7.0, 7.0)

    def test_unsupported_operand(self) -> None:
        with pytest.raises(TypeError):
            Vector3() + "x"


class TestVectorIO:
    def test_binary_collection(self) -> None:
        vs = [Vector3(1.0, 2.0, 3.0), Vector3(4.0, 5.0, 6.0)]
        buf = io.BytesIO()
        assert vector.write_binary(buf, vs) == IOStatus.OK
        assert len(buf.getvalue()) == 6 * 8

        buf.seek(0)
        out = [Vector3(), Vector3()]
        assert vector.read_binary(buf, out) == IOStatus.OK
        assert out == vs

    def test_formatted_single(self) -> None:
        buf = io.StringIO()
        assert vector.write_formatted(buf, "*", Vector3(0.1, 0.2, 0.3)) == IOStatus.OK
        assert buf.getvalue() == "0.1 0.2 0.3\n"

        buf.seek(0)
        v = Vector3()
        assert vector.read_formatted(buf, "*", v) == IOStatus.OK
        assert v == Vector3(0.1, 0.2, 0.3)

    def test_short_binary_read(self) -> None:
        v = Vector3()
        assert vector.read_binary(io.BytesIO(b"\x00" * 8), v) == IOStatus.END_OF_FILE
        assert v == Vector3()
