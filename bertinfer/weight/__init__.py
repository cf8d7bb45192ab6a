"""Weight storage: memory-mapped safetensors bundles and float32 views.

Pretrained weights arrive as one flat safetensors file. This package maps
that file, indexes its tensors by name, and turns raw byte spans into
numeric arrays without copying whenever the bytes are suitably aligned.
"""
from __future__ import annotations

from bertinfer.weight.bundle import BundleReader, TensorView
from bertinfer.weight.convert import is_aligned, to_f32

__all__ = ["BundleReader", "TensorView", "is_aligned", "to_f32"]
