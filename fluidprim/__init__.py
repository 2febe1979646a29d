"""fluidprim package.

Важно: пакет не должен иметь побочных эффектов при импорте.
Поэтому здесь нет eager-import'ов (numpy/h5py подтягиваются подмодулями).

Импортируй нужное напрямую:
- from fluidprim.primitive import PrimitiveState
- from fluidprim.lifecycle import init_state, set_state, free_state
- from fluidprim.codec import prim_to_array, array_to_prim
- from fluidprim.storage import write_binary, read_formatted
"""

from __future__ import annotations

__all__: list[str] = []
