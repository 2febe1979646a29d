"""Чтение/запись PrimitiveState: бинарные и текстовые потоки, HDF5."""

from __future__ import annotations

from fluidprim.storage.binary import read_binary, write_binary
from fluidprim.storage.formatted import read_formatted, write_formatted

__all__ = [
    "write_binary",
    "read_binary",
    "write_formatted",
    "read_formatted",
]
