import io
import logging

import numpy as np
import pytest

from fluidprim.config import PersistenceConfig
from fluidprim.core.status import IOStatus
from fluidprim.lifecycle import empty_collection, init_state
from fluidprim.primitive import PrimitiveState
from fluidprim.storage import read_binary, write_binary
from fluidprim.vector import Vector3


class FlakyStream(io.BytesIO):
    """Поток, у которого падают write-вызовы с заданными номерами."""

    def __init__(self, failing_calls) -> None:
        super().__init__()
        self.failing_calls = set(failing_calls)
        self.calls = 0

    def write(self, data):
        call = self.calls
        self.calls += 1
        if call in self.failing_calls:
            raise OSError("disk full")
        return super().write(data)


def _filled(shape, ns: int) -> np.ndarray:
    coll = empty_collection(shape)
    init_state(coll, ns)
    for n, idx in enumerate(np.ndindex(coll.shape)):
        s = coll[idx]
        s.species_density[:] = np.arange(ns) + 10.0 * n
        s.velocity = Vector3(n, -n, 0.5 * n)
        s.pressure = 1000.0 + n
        s.bulk_density = 1.0 + n
        s.gamma = 1.4
    return coll


class TestScalar:
    def test_byte_layout(self, air_state) -> None:
        buf = io.BytesIO()
        assert write_binary(buf, air_state) == IOStatus.OK
        expected = np.array([1.0, 2.0, 0.0, 0.0, 0.0, 101325.0, 3.0, 1.4], dtype="<f8").tobytes()
        assert buf.getvalue() == expected

    def test_round_trip(self, mixed_state) -> None:
        buf = io.BytesIO()
        assert write_binary(buf, mixed_state) == IOStatus.OK
        buf.seek(0)
        target = PrimitiveState()
        target.init(3)
        assert read_binary(buf, target) == IOStatus.OK
        assert target == mixed_state

    def test_big_endian(self, air_state) -> None:
        buf = io.BytesIO()
        cfg = PersistenceConfig(byteorder=">")
        assert write_binary(buf, air_state, cfg) == IOStatus.OK
        assert buf.getvalue()[:8] == np.array([1.0], dtype=">f8").tobytes()

        buf.seek(0)
        target = PrimitiveState(species_density=[0.0, 0.0])
        assert read_binary(buf, target, cfg) == IOStatus.OK
        assert target == air_state

    def test_unallocated_is_reported_without_writing(self) -> None:
        buf = io.BytesIO()
        assert write_binary(buf, PrimitiveState(pressure=1.0)) == IOStatus.UNALLOCATED
        assert buf.getvalue() == b""
        assert read_binary(io.BytesIO(b"\x00" * 64), PrimitiveState()) == IOStatus.UNALLOCATED


class TestCollections:
    def test_field_major_layout_1d(self) -> None:
        coll = _filled((2,), 2)
        buf = io.BytesIO()
        assert write_binary(buf, coll) == IOStatus.OK
        values = np.frombuffer(buf.getvalue(), dtype="<f8")
        expected = [
            0.0, 1.0, 10.0, 11.0,           # species e0, e1
            0.0, 0.0, 0.0, 1.0, -1.0, 0.5,  # velocity e0, e1
            1000.0, 1001.0,                 # pressure
            1.0, 2.0,                       # bulk density
            1.4, 1.4,                       # gamma
        ]
        assert list(values) == expected

    def test_first_index_fastest_2d(self) -> None:
        coll = empty_collection((2, 2))
        init_state(coll, 0)
        for idx in np.ndindex(coll.shape):
            coll[idx].pressure = 10.0 * idx[0] + idx[1]
        buf = io.BytesIO()
        assert write_binary(buf, coll) == IOStatus.OK
        values = np.frombuffer(buf.getvalue(), dtype="<f8")
        # species: 0 значений, velocity: 4*3, затем pressure
        assert list(values[12:16]) == [0.0, 10.0, 1.0, 11.0]

    @pytest.mark.parametrize("shape", [(4,), (2, 3), (2, 2, 3)])
    def test_round_trip(self, shape) -> None:
        coll = _filled(shape, 3)
        buf = io.BytesIO()
        assert write_binary(buf, coll) == IOStatus.OK
        assert len(buf.getvalue()) == coll.size * (3 + 6) * 8

        buf.seek(0)
        target = empty_collection(shape)
        init_state(target, 3)
        assert read_binary(buf, target) == IOStatus.OK
        for idx in np.ndindex(shape):
            assert target[idx] == coll[idx]

    def test_partially_unallocated_collection(self) -> None:
        coll = _filled((3,), 1)
        coll[2].free()
        assert write_binary(io.BytesIO(), coll) == IOStatus.UNALLOCATED


class TestStatusSemantics:
    def test_truncated_stream_reports_end_of_file(self, air_state) -> None:
        buf = io.BytesIO()
        write_binary(buf, air_state)
        truncated = io.BytesIO(buf.getvalue()[: 5 * 8])

        target = PrimitiveState(species_density=[0.0, 0.0], pressure=-1.0)
        assert read_binary(truncated, target) == IOStatus.END_OF_FILE
        assert list(target.species_density) == [1.0, 2.0]
        assert target.pressure == -1.0

    def test_earlier_failure_masked_by_last_statement(self, air_state, caplog) -> None:
        stream = FlakyStream(failing_calls=[0])
        with caplog.at_level(logging.WARNING, logger="fluidprim.core.records"):
            status = write_binary(stream, air_state)
        assert status == IOStatus.OK
        assert "statement 0 failed with STREAM_ERROR" in caplog.text
        # species не записаны: в потоке только velocity + 3 скаляра
        assert len(stream.getvalue()) == 6 * 8

    def test_last_statement_failure_reported(self, air_state) -> None:
        stream = FlakyStream(failing_calls=[4])
        assert write_binary(stream, air_state) == IOStatus.STREAM_ERROR

    def test_text_stream_is_a_stream_error(self, air_state) -> None:
        assert write_binary(io.StringIO(), air_state) == IOStatus.STREAM_ERROR
        target = PrimitiveState(species_density=[0.0, 0.0])
        assert read_binary(io.StringIO("abc"), target) == IOStatus.STREAM_ERROR
