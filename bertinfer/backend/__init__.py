"""Compute backends: where tensors live and forward passes run.

Every module holds torch tensors bound to one Device. The same module code
runs on CPU or CUDA; the device is chosen at startup from configuration.
"""
from __future__ import annotations

from bertinfer.backend.device import Device

__all__ = ["Device"]
