"""Validated access to bundle tensors as device-resident torch tensors.

When assembling a model a lot can go wrong: missing keys, legacy names,
non-float dtypes. TensorReader turns bundle views into tensors on a Device
and fails with the list of every key it tried instead of a bare KeyError.
"""
from __future__ import annotations

from collections.abc import Sequence

from torch import Tensor

from bertinfer.backend.device import Device
from bertinfer.errors import MissingTensorError
from bertinfer.weight.bundle import BundleReader, TensorView
from bertinfer.weight.convert import to_f32


class TensorReader:
    """Looks up bundle tensors and materializes them on a device.

    Tracks which keys were consumed so callers can report leftovers.
    """

    def __init__(self, bundle: BundleReader, device: Device) -> None:
        self.bundle = bundle
        self.device = device
        self.used: set[str] = set()

    def _materialize(self, view: TensorView) -> Tensor:
        self.used.add(view.name)
        return self.device.tensor(to_f32(view), view.shape)

    def get(self, key: str) -> Tensor:
        """Get a required tensor, raising MissingTensorError if absent."""
        return self._materialize(self.bundle.tensor(key))

    def first(self, groups: Sequence[Sequence[str]]) -> tuple[Tensor, ...]:
        """Return the tensors of the first key group fully present.

        Groups are tried in order; a group counts only if every key in it
        exists, so a half-migrated pair never mixes conventions.
        """
        for group in groups:
            if all(k in self.bundle for k in group):
                return tuple(self.get(k) for k in group)
        raise MissingTensorError([k for group in groups for k in group])

    def unused(self) -> list[str]:
        """Bundle keys never consumed, in bundle order."""
        return [name for name in self.bundle.names() if name not in self.used]
