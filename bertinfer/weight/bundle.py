"""
bundle provides read access to safetensors weight bundles.

A bundle is laid out as:

    [8 bytes: little-endian u64 header length N]
    [N bytes: JSON header {name: {dtype, shape, data_offsets}, "__metadata__": {...}}]
    [byte arena: tensor payloads addressed by data_offsets]

The file is memory-mapped copy-on-write, so tensor views are backed by the
page cache and writing through them never touches the file.
"""
from __future__ import annotations

import json
import logging
import math
import mmap
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from bertinfer.errors import BundleFormatError, MissingTensorError

logger = logging.getLogger(__name__)

METADATA_KEY = "__metadata__"

# Element sizes in bytes for the dtype tags safetensors writes.
DTYPE_SIZES: dict[str, int] = {
    "F64": 8,
    "F32": 4,
    "F16": 2,
    "BF16": 2,
    "I64": 8,
    "I32": 4,
    "I16": 2,
    "I8": 1,
    "U8": 1,
    "BOOL": 1,
}

_HEADER_LEN = struct.Struct("<Q")


@dataclass(frozen=True, slots=True)
class TensorView:
    """
    TensorView is a read-only window onto one tensor inside a bundle.

    The data span is only valid while the bundle's mapping is open.
    """
    name: str
    dtype: str
    shape: tuple[int, ...]
    data: memoryview

    @property
    def numel(self) -> int:
        """
        numel returns the number of elements described by shape.
        """
        return math.prod(self.shape)


class BundleReader:
    """Indexes the tensors of a safetensors bundle by name.

    Construct with `BundleReader.open(path)` to memory-map a file, or pass
    any buffer (bytes, bytearray, mmap) directly. Lookups are O(1) and never
    copy tensor data.

    Closing the reader releases the mapping; this raises BufferError while
    any array or CPU tensor still aliases it, since those must not outlive
    the mapping.
    """

    def __init__(self, buffer: bytes | bytearray | memoryview | mmap.mmap, *, source: str = "<memory>") -> None:
        self.source = source
        self._buffer = buffer
        self._view = memoryview(buffer)
        self._entries: dict[str, tuple[str, tuple[int, ...], int, int]] = {}
        self._metadata: dict[str, str] = {}
        self._parse()

    @classmethod
    def open(cls, path: Path | str) -> "BundleReader":
        """Memory-map a bundle file.

        Raises FileNotFoundError for a missing file and BundleFormatError
        when the contents are not a valid bundle.
        """
        path = Path(path)
        with path.open("rb") as f:
            try:
                mapped = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_COPY)
            except ValueError as e:
                # mmap refuses zero-length files
                raise BundleFormatError(f"Cannot map {path}: {e}") from e
        logger.debug("mapped %s (%d bytes)", path, len(mapped))
        return cls(mapped, source=str(path))

    def _parse(self) -> None:
        total = len(self._view)
        if total < _HEADER_LEN.size:
            raise BundleFormatError(
                f"{self.source}: {total} bytes is too short for a header length"
            )
        (header_len,) = _HEADER_LEN.unpack_from(self._view, 0)
        start = _HEADER_LEN.size + header_len
        if start > total:
            raise BundleFormatError(
                f"{self.source}: header length {header_len} runs past end of file ({total} bytes)"
            )
        try:
            header = json.loads(bytes(self._view[_HEADER_LEN.size:start]).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BundleFormatError(f"{self.source}: invalid header: {e}") from e
        if not isinstance(header, dict):
            raise BundleFormatError(f"{self.source}: header must be a JSON object")

        arena = total - start
        for name, info in header.items():
            if name == METADATA_KEY:
                if not isinstance(info, dict):
                    raise BundleFormatError(f"{self.source}: {METADATA_KEY} must be an object")
                self._metadata = {str(k): str(v) for k, v in info.items()}
                continue
            self._entries[name] = self._entry(name, info, start=start, arena=arena)

    def _entry(
        self, name: str, info: object, *, start: int, arena: int
    ) -> tuple[str, tuple[int, ...], int, int]:
        if not isinstance(info, dict):
            raise BundleFormatError(f"{self.source}: entry {name!r} must be an object")
        dtype = info.get("dtype")
        if dtype not in DTYPE_SIZES:
            raise BundleFormatError(f"{self.source}: {name!r} has unknown dtype {dtype!r}")
        shape = info.get("shape")
        if not isinstance(shape, list) or not all(
            isinstance(d, int) and not isinstance(d, bool) and d >= 0 for d in shape
        ):
            raise BundleFormatError(f"{self.source}: {name!r} has invalid shape {shape!r}")
        offsets = info.get("data_offsets")
        if (
            not isinstance(offsets, list)
            or len(offsets) != 2
            or not all(isinstance(o, int) and not isinstance(o, bool) for o in offsets)
        ):
            raise BundleFormatError(
                f"{self.source}: {name!r} has invalid data_offsets {offsets!r}"
            )
        begin, end = offsets
        if not 0 <= begin <= end <= arena:
            raise BundleFormatError(
                f"{self.source}: {name!r} offsets [{begin}, {end}] outside arena of {arena} bytes"
            )
        expected = math.prod(shape) * DTYPE_SIZES[dtype]
        if end - begin != expected:
            raise BundleFormatError(
                f"{self.source}: {name!r} spans {end - begin} bytes, "
                f"expected {expected} for {dtype}{shape}"
            )
        return dtype, tuple(shape), start + begin, start + end

    def names(self) -> list[str]:
        """Tensor names in header order."""
        return list(self._entries)

    def metadata(self) -> dict[str, str]:
        """The free-form string metadata stored with the bundle."""
        return dict(self._metadata)

    def get(self, name: str) -> TensorView | None:
        """Return the named tensor, or None when the bundle lacks it."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        dtype, shape, begin, end = entry
        return TensorView(name=name, dtype=dtype, shape=shape, data=self._view[begin:end])

    def tensor(self, name: str) -> TensorView:
        """Return the named tensor, raising MissingTensorError when absent."""
        view = self.get(name)
        if view is None:
            raise MissingTensorError([name])
        return view

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def close(self) -> None:
        """Release the mapping."""
        self._view.release()
        if isinstance(self._buffer, mmap.mmap):
            self._buffer.close()

    def __enter__(self) -> "BundleReader":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
