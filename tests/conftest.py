"""Pytest configuration.

Goal: make `import fluidprim` work reliably when running tests without installing
package (editable install).

This repo uses a flat layout (fluidprim/ at repo root). Some environments run
pytest with a working directory where repo root isn't on sys.path, leading to
`ModuleNotFoundError: fluidprim`.

This conftest ensures repo root is on sys.path and provides shared fixtures.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from fluidprim.primitive import PrimitiveState  # noqa: E402
from fluidprim.vector import Vector3  # noqa: E402


@pytest.fixture()
def air_state() -> PrimitiveState:
    return PrimitiveState(
        species_density=[1.0, 2.0],
        velocity=Vector3(0.0, 0.0, 0.0),
        pressure=101325.0,
        bulk_density=3.0,
        gamma=1.4,
    )


@pytest.fixture()
def mixed_state() -> PrimitiveState:
    return PrimitiveState(
        species_density=[0.5, 1.5, 4.0],
        velocity=Vector3(1.0, -2.0, 3.0),
        pressure=2.0e5,
        bulk_density=6.0,
        gamma=1.3,
    )
