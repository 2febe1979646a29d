from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import h5py
import numpy as np

from fluidprim.config import DEFAULT_PERSISTENCE_CONFIG, PersistenceConfig
from fluidprim.core.precision import R_P
from fluidprim.core.status import IOStatus
from fluidprim.primitive import PrimitiveState

logger = logging.getLogger(__name__)

GROUP = "primitives"
LAYOUT = "primitive"


def _shaped(prim: Any) -> np.ndarray:
    if isinstance(prim, PrimitiveState):
        coll = np.empty((), dtype=object)
        coll[()] = prim
        return coll
    if not isinstance(prim, np.ndarray) or prim.dtype != object:
        raise TypeError(f"expected PrimitiveState or object ndarray, got {type(prim).__name__}")
    return prim


def _state_at(coll: np.ndarray, idx: tuple) -> PrimitiveState:
    item = coll[idx]
    if not isinstance(item, PrimitiveState):
        raise TypeError(f"collection element must be PrimitiveState, got {type(item).__name__}")
    return item


class H5PrimitiveStore:
    """HDF5-хранилище состояний: одна группа на скаляр/коллекцию.

    В отличие от последовательных потоков layout самоописываемый:
    форма коллекции и Ns хранятся в атрибутах, species читаются с
    перевыделением буфера.
    """

    def __init__(
        self,
        path: str | Path,
        mode: str = "a",
        config: PersistenceConfig = DEFAULT_PERSISTENCE_CONFIG,
    ):
        self.path = Path(path)
        if mode != "r":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.config = config

        self.h5 = h5py.File(self.path, mode)
        self.grp = self.h5.get(GROUP) if mode == "r" else self.h5.require_group(GROUP)

    def __enter__(self) -> "H5PrimitiveStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def names(self) -> List[str]:
        if self.grp is None:
            return []
        return sorted(self.grp.keys())

    def _dataset_kwargs(self, arr: np.ndarray) -> Dict[str, Any]:
        # scalar/empty datasets не поддерживают фильтры
        if arr.ndim == 0 or arr.size == 0:
            return {}
        return {
            "compression": self.config.h5_compression,
            "compression_opts": self.config.h5_compression_opts,
        }

    def write(self, name: str, prim: Any) -> IOStatus:
        coll = _shaped(prim)
        shape = coll.shape
        states = [_state_at(coll, idx) for idx in np.ndindex(shape)]
        if not all(s.is_allocated for s in states):
            return IOStatus.UNALLOCATED

        lengths = {s.n_species for s in states}
        if len(lengths) > 1:
            logger.warning("h5 write %s: mixed species lengths %s", name, sorted(lengths))
            return IOStatus.FORMAT_ERROR
        ns = lengths.pop() if lengths else 0

        data = {
            "species": np.empty(shape + (ns,), dtype=R_P),
            "velocity": np.empty(shape + (3,), dtype=R_P),
            "pressure": np.empty(shape, dtype=R_P),
            "bulk_density": np.empty(shape, dtype=R_P),
            "gamma": np.empty(shape, dtype=R_P),
        }
        for idx, s in zip(np.ndindex(shape), states):
            data["species"][idx] = s.species_density
            data["velocity"][idx] = s.velocity.to_array()
            data["pressure"][idx] = s.pressure
            data["bulk_density"][idx] = s.bulk_density
            data["gamma"][idx] = s.gamma

        try:
            if name in self.grp:
                del self.grp[name]
            g = self.grp.create_group(name)
            for key, arr in data.items():
                g.create_dataset(key, data=arr, **self._dataset_kwargs(arr))
            g.attrs["layout"] = LAYOUT
            g.attrs["n_species"] = ns
            g.attrs["ndim"] = len(shape)
            self.h5.flush()
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("h5 write %s failed: %s", name, exc)
            return IOStatus.STREAM_ERROR
        return IOStatus.OK

    def read(self, name: str, prim: Any) -> IOStatus:
        coll = _shaped(prim)
        if self.grp is None or name not in self.grp:
            logger.warning("h5 read: no entry %r in %s", name, self.path)
            return IOStatus.FORMAT_ERROR
        g = self.grp[name]
        try:
            if g.attrs.get("layout") != LAYOUT:
                return IOStatus.FORMAT_ERROR
            stored_shape = g["pressure"].shape
            if stored_shape != coll.shape:
                logger.warning("h5 read %s: stored shape %s != target %s", name, stored_shape, coll.shape)
                return IOStatus.FORMAT_ERROR
            species = g["species"][()]
            velocity = g["velocity"][()]
            pressure = g["pressure"][()]
            bulk_density = g["bulk_density"][()]
            gamma = g["gamma"][()]
        except (OSError, KeyError, ValueError) as exc:
            logger.warning("h5 read %s failed: %s", name, exc)
            return IOStatus.STREAM_ERROR

        for idx in np.ndindex(coll.shape):
            s = _state_at(coll, idx)
            s.species_density = np.array(species[idx], dtype=R_P)
            s.velocity.x, s.velocity.y, s.velocity.z = (float(c) for c in velocity[idx])
            s.pressure = float(pressure[idx])
            s.bulk_density = float(bulk_density[idx])
            s.gamma = float(gamma[idx])
        return IOStatus.OK

    def close(self):
        self.h5.close()
