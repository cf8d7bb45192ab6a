"""
convert turns raw bundle bytes into float32 arrays.

This is the only place where bytes are reinterpreted as floats. The
contract: the span holds little-endian IEEE-754 binary32 values and its
view declares dtype F32. When the span starts on a 4-byte boundary the
returned array aliases the span; otherwise the values are decoded into a
fresh, owned array. Both paths yield bit-identical values.
"""
from __future__ import annotations

import sys

import numpy as np

from bertinfer.errors import DtypeError, ShapeError
from bertinfer.weight.bundle import TensorView

F32_SIZE = 4
_F32_LE = np.dtype("<f4")
_NATIVE_LITTLE = sys.byteorder == "little"


def is_aligned(buffer: memoryview | bytes | bytearray, alignment: int = F32_SIZE) -> bool:
    """
    is_aligned reports whether the buffer's first byte sits on an alignment boundary.
    """
    if len(buffer) == 0:
        return True
    address = np.frombuffer(buffer, dtype=np.uint8).ctypes.data
    return address % alignment == 0


def to_f32(view: TensorView) -> np.ndarray:
    """
    to_f32 returns the view's values as a flat float32 array.

    Raises DtypeError when the view is not F32.
    """
    if view.dtype != "F32":
        raise DtypeError(f"{view.name}: expected dtype F32, got {view.dtype}")
    data = view.data
    if len(data) % F32_SIZE != 0:
        raise ShapeError(
            f"{view.name}: {len(data)} bytes is not a whole number of float32 values"
        )
    if len(data) == 0:
        return np.empty(0, dtype=np.float32)

    values = np.frombuffer(data, dtype=_F32_LE)
    if not _NATIVE_LITTLE:
        # byte-swapped into native order, necessarily a copy
        return values.astype(np.float32)
    if is_aligned(data):
        return values
    return values.copy()
