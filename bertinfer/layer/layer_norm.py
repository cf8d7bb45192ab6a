"""Standard LayerNorm with a learned affine transform.

BERT normalizes after every residual add. Older TensorFlow-converted
checkpoints call the scale and shift gamma/beta; by the time tensors reach
this class that distinction is gone.
"""
from __future__ import annotations

import torch.nn.functional as F
from torch import Tensor, nn
from typing_extensions import override

from bertinfer.errors import ShapeError


class LayerNorm(nn.Module):
    """Normalizes the last dimension to zero mean, unit variance, then scales."""

    weight: Tensor
    bias: Tensor

    def __init__(self, weight: Tensor, bias: Tensor, eps: float = 1e-12) -> None:
        """Initialize from scale, shift and epsilon.

        Args:
            weight: Scale (gamma), shape (d_model,).
            bias: Shift (beta), shape (d_model,).
            eps: Added to the variance for numerical stability.
        """
        super().__init__()
        if weight.ndim != 1 or tuple(bias.shape) != tuple(weight.shape):
            raise ShapeError(
                f"LayerNorm expects matching 1-D weight and bias, got "
                f"{tuple(weight.shape)} and {tuple(bias.shape)}"
            )
        self.register_buffer("weight", weight)
        self.register_buffer("bias", bias)
        self.eps = float(eps)

    @property
    def d_model(self) -> int:
        return int(self.weight.shape[0])

    @override
    def forward(self, x: Tensor) -> Tensor:
        """Apply layer normalization."""
        if x.shape[-1] != self.d_model:
            raise ShapeError(
                f"LayerNorm expects last dim {self.d_model}, got input {tuple(x.shape)}"
            )
        return F.layer_norm(x, (self.d_model,), self.weight, self.bias, self.eps)
