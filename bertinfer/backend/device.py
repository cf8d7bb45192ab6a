"""
device provides the compute backend handle used by every module.

A Device builds float32 tensors from host data and reads results back. On
CPU the tensor aliases the host array, so weights viewed straight out of a
memory-mapped bundle are never copied; on CUDA the data is uploaded once.
"""
from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import torch
from torch import Tensor

from bertinfer.errors import BackendError, ShapeError


class Device:
    """
    Device wraps a torch.device with construction and readback helpers.
    """
    def __init__(self, device: torch.device) -> None:
        if device.type == "cuda" and not torch.cuda.is_available():
            raise BackendError(f"Requested {device} but CUDA is not available")
        if device.type not in ("cpu", "cuda"):
            raise BackendError(f"Unsupported device type: {device.type}")
        self.device: torch.device = device

    @classmethod
    def cpu(cls) -> "Device":
        """
        cpu returns the host backend.
        """
        return cls(torch.device("cpu"))

    @classmethod
    def auto(cls) -> "Device":
        """
        auto picks the first CUDA device when present, else the CPU.
        """
        if torch.cuda.is_available():
            return cls(torch.device("cuda", 0))
        return cls.cpu()

    @classmethod
    def parse(cls, spec: str) -> "Device":
        """
        parse builds a Device from "auto", "cpu", "cuda" or "cuda:N".
        """
        spec = spec.strip().lower()
        if spec == "auto":
            return cls.auto()
        try:
            device = torch.device(spec)
        except RuntimeError as e:
            raise BackendError(f"Invalid device {spec!r}: {e}") from e
        return cls(device)

    @property
    def type(self) -> str:
        return self.device.type

    def tensor(self, data: np.ndarray, shape: Sequence[int]) -> Tensor:
        """
        tensor builds a float32 tensor of the given shape from host data.

        Raises ShapeError when the element count does not match the shape.
        """
        shape = tuple(int(d) for d in shape)
        host = np.asarray(data, dtype=np.float32).reshape(-1)
        if host.size != math.prod(shape):
            raise ShapeError(
                f"Cannot view {host.size} values as shape {shape}"
            )
        if not host.flags.writeable:
            # torch refuses to alias read-only memory without a warning
            host = host.copy()
        t = torch.from_numpy(host).reshape(shape)
        if self.device.type != "cpu":
            t = t.to(self.device)
        return t.requires_grad_(False)

    def ids(self, values: Sequence[int]) -> Tensor:
        """
        ids builds an int64 index tensor.
        """
        return torch.tensor(list(values), dtype=torch.long, device=self.device)

    def cpu_data(self, t: Tensor) -> list[float]:
        """
        cpu_data copies a tensor back to the host as a flat list.
        """
        return t.detach().to("cpu", dtype=torch.float32).reshape(-1).tolist()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Device) and other.device == self.device

    def __hash__(self) -> int:
        return hash(self.device)

    def __repr__(self) -> str:
        return f"Device({self.device})"
