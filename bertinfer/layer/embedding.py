"""Embedding lookup table.

Token, position and segment embeddings are all plain row lookups into a
(num_embeddings, hidden) table.
"""
from __future__ import annotations

import torch.nn.functional as F
from torch import Tensor, nn
from typing_extensions import override

from bertinfer.errors import ShapeError


class Embedding(nn.Module):
    """Looks up one row of the table per index."""

    weight: Tensor

    def __init__(self, weight: Tensor) -> None:
        super().__init__()
        if weight.ndim != 2:
            raise ShapeError(f"Embedding table must be 2-D, got {tuple(weight.shape)}")
        self.register_buffer("weight", weight)

    @property
    def num_embeddings(self) -> int:
        return int(self.weight.shape[0])

    @property
    def dim(self) -> int:
        return int(self.weight.shape[1])

    @override
    def forward(self, ids: Tensor) -> Tensor:
        """Map indices of shape (T,) to vectors of shape (T, dim)."""
        return F.embedding(ids, self.weight)
