"""Affine projection y = x W^T + b.

Weights follow the PyTorch convention of (out_features, in_features), which
is also how BERT checkpoints store them.
"""
from __future__ import annotations

import torch.nn.functional as F
from torch import Tensor, nn
from typing_extensions import override

from bertinfer.errors import ShapeError


class Linear(nn.Module):
    """A dense projection with bias.

    Shapes are validated at construction so that a checkpoint with a stray
    tensor fails while loading rather than mid-inference.
    """

    weight: Tensor
    bias: Tensor

    def __init__(self, weight: Tensor, bias: Tensor) -> None:
        """Wrap an (out, in) weight and an (out,) bias.

        Raises:
            ShapeError: if the weight is not 2-D or the bias does not match
                its output dimension.
        """
        super().__init__()
        if weight.ndim != 2:
            raise ShapeError(f"Linear weight must be 2-D, got {tuple(weight.shape)}")
        if tuple(bias.shape) != (weight.shape[0],):
            raise ShapeError(
                f"Linear bias shape {tuple(bias.shape)} does not match "
                f"weight shape {tuple(weight.shape)}"
            )
        self.register_buffer("weight", weight)
        self.register_buffer("bias", bias)

    @property
    def d_in(self) -> int:
        return int(self.weight.shape[1])

    @property
    def d_out(self) -> int:
        return int(self.weight.shape[0])

    @override
    def forward(self, x: Tensor) -> Tensor:
        """Apply the projection over the last dimension."""
        if x.shape[-1] != self.d_in:
            raise ShapeError(
                f"Linear expects last dim {self.d_in}, got input {tuple(x.shape)}"
            )
        return F.linear(x, self.weight, self.bias)
