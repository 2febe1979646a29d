import io

import numpy as np
import pytest

from fluidprim.core.status import IOStatus
from fluidprim.lifecycle import empty_collection, init_state
from fluidprim.primitive import PrimitiveState
from fluidprim.storage import read_formatted, write_formatted
from fluidprim.vector import Vector3


def _target(ns: int) -> PrimitiveState:
    s = PrimitiveState()
    s.init(ns)
    return s


class TestListDirected:
    def test_text_layout(self, air_state) -> None:
        buf = io.StringIO()
        assert write_formatted(buf, "*", air_state) == IOStatus.OK
        assert buf.getvalue() == "1.0 2.0\n0.0 0.0 0.0\n101325.0\n3.0\n1.4\n"

    def test_round_trip_exact(self, mixed_state) -> None:
        mixed_state.pressure = 1.0 / 3.0
        buf = io.StringIO()
        assert write_formatted(buf, " * ", mixed_state) == IOStatus.OK
        buf.seek(0)
        target = _target(3)
        assert read_formatted(buf, "*", target) == IOStatus.OK
        assert target == mixed_state

    def test_values_may_span_lines(self) -> None:
        text = "1.0\n2.0, 3.0\n0 0\n1\n101325\n3.0D+00\n1.4\n"
        target = _target(3)
        assert read_formatted(io.StringIO(text), "*", target) == IOStatus.OK
        assert list(target.species_density) == [1.0, 2.0, 3.0]
        assert target.velocity == Vector3(0.0, 0.0, 1.0)
        assert target.bulk_density == 3.0
        assert target.gamma == 1.4

    def test_collection_3d_round_trip(self) -> None:
        rng = np.random.default_rng(0)
        coll = empty_collection((2, 2, 2))
        init_state(coll, 3)
        for s in coll.ravel():
            s.species_density[:] = rng.random(3)
            s.velocity = Vector3(*rng.normal(size=3))
            s.pressure, s.bulk_density, s.gamma = rng.random(3)

        buf = io.StringIO()
        assert write_formatted(buf, "*", coll) == IOStatus.OK
        assert len(buf.getvalue().splitlines()) == 5

        buf.seek(0)
        target = empty_collection((2, 2, 2))
        init_state(target, 3)
        assert read_formatted(buf, "*", target) == IOStatus.OK
        for idx in np.ndindex(coll.shape):
            assert target[idx] == coll[idx]


class TestExplicitFormat:
    def test_format_applied_to_every_statement(self, air_state) -> None:
        buf = io.StringIO()
        assert write_formatted(buf, ".3e", air_state) == IOStatus.OK
        assert buf.getvalue() == (
            "1.000e+00 2.000e+00\n"
            "0.000e+00 0.000e+00 0.000e+00\n"
            "1.013e+05\n"
            "3.000e+00\n"
            "1.400e+00\n"
        )

    def test_round_trip_within_precision(self, mixed_state) -> None:
        buf = io.StringIO()
        assert write_formatted(buf, "15.7E", mixed_state) == IOStatus.OK
        buf.seek(0)
        target = _target(3)
        assert read_formatted(buf, "15.7E", target) == IOStatus.OK
        assert target.species_density == pytest.approx(mixed_state.species_density, rel=1e-7)
        assert target.pressure == pytest.approx(mixed_state.pressure, rel=1e-7)
        assert target.gamma == pytest.approx(mixed_state.gamma, rel=1e-7)

    def test_one_line_per_statement(self) -> None:
        text = "1.0\n2.0\n0 0 0\n101325\n3\n1.4\n"
        target = _target(2)
        status = read_formatted(io.StringIO(text), ".3e", target)
        # species и velocity не прочитаны, но статус — от последней записи
        assert status == IOStatus.OK
        assert list(target.species_density) == [0.0, 0.0]

    def test_grouping_commas_round_trip(self) -> None:
        s = PrimitiveState()
        s.set(species=[1234.5, 2.0], pressure=101325.0, bulk_density=1236.5, gamma=1.4)
        buf = io.StringIO()
        assert write_formatted(buf, ",.1f", s) == IOStatus.OK
        assert buf.getvalue().splitlines()[0] == "1,234.5 2.0"
        buf.seek(0)
        target = _target(2)
        assert read_formatted(buf, ",.1f", target) == IOStatus.OK
        assert list(target.species_density) == [1234.5, 2.0]
        assert target.pressure == 101325.0
        assert target.bulk_density == 1236.5

    def test_bad_format_spec(self, air_state) -> None:
        buf = io.StringIO()
        assert write_formatted(buf, "(10E15.7)", air_state) == IOStatus.FORMAT_ERROR
        assert buf.getvalue() == ""


class TestErrors:
    def test_empty_stream(self) -> None:
        assert read_formatted(io.StringIO(""), "*", _target(2)) == IOStatus.END_OF_FILE

    def test_unparsable_last_token(self) -> None:
        text = "1.0 2.0\n0 0 0\n1\n2\nabc\n"
        assert read_formatted(io.StringIO(text), "*", _target(2)) == IOStatus.FORMAT_ERROR

    def test_unallocated(self) -> None:
        buf = io.StringIO()
        assert write_formatted(buf, "*", PrimitiveState()) == IOStatus.UNALLOCATED
        assert buf.getvalue() == ""

    def test_binary_stream_rejected(self, air_state) -> None:
        assert write_formatted(io.BytesIO(), "*", air_state) == IOStatus.STREAM_ERROR
        assert read_formatted(io.BytesIO(b"1 2\n"), "*", _target(2)) == IOStatus.STREAM_ERROR
