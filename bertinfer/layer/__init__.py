"""Neural network layers: the leaf modules of the encoder tree.

Each layer wraps one or two frozen tensors taken from a weight bundle and
exposes a pure forward operation. Weights are registered as buffers, so
they follow the module across devices but never require gradients.
"""
from __future__ import annotations

from bertinfer.layer.activation import get_activation
from bertinfer.layer.embedding import Embedding
from bertinfer.layer.layer_norm import LayerNorm
from bertinfer.layer.linear import Linear

__all__ = ["Embedding", "LayerNorm", "Linear", "get_activation"]
