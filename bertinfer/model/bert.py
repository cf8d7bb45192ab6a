"""BERT encoder modules for single-sequence classification.

All forward methods take one unbatched sequence: ids are shape (T,) and
hidden states are shape (T, hidden). The classifier returns one logit per
class. The attention head count is not stored in checkpoints, so attention
modules start without one and receive it from BertClassifier.set_num_heads.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

import torch
from torch import Tensor, nn
from typing_extensions import override

from bertinfer.errors import ShapeError
from bertinfer.layer.activation import Activation, get_activation
from bertinfer.layer.embedding import Embedding
from bertinfer.layer.layer_norm import LayerNorm
from bertinfer.layer.linear import Linear


class BertEmbeddings(nn.Module):
    """Sum of token, position and segment embeddings, then LayerNorm."""

    def __init__(
        self,
        input_embeddings: Embedding,
        position_embeddings: Embedding,
        type_embeddings: Embedding,
        layer_norm: LayerNorm,
    ) -> None:
        super().__init__()
        dims = {
            input_embeddings.dim,
            position_embeddings.dim,
            type_embeddings.dim,
            layer_norm.d_model,
        }
        if len(dims) != 1:
            raise ShapeError(f"Embedding widths disagree: {sorted(dims)}")
        self.input_embeddings = input_embeddings
        self.position_embeddings = position_embeddings
        self.type_embeddings = type_embeddings
        self.layer_norm = layer_norm

    @property
    def hidden_size(self) -> int:
        return self.input_embeddings.dim

    @override
    def forward(self, input_ids: Tensor, position_ids: Tensor, type_ids: Tensor) -> Tensor:
        x = (
            self.input_embeddings(input_ids)
            + self.position_embeddings(position_ids)
            + self.type_embeddings(type_ids)
        )
        return self.layer_norm(x)


class BertAttention(nn.Module):
    """Multi-head self-attention followed by projection, residual and LayerNorm.

    The head count must divide the hidden size; anything else is a
    model/config mismatch and fails the forward pass.
    """

    def __init__(
        self,
        query: Linear,
        key: Linear,
        value: Linear,
        output: Linear,
        output_ln: LayerNorm,
        num_heads: int | None = None,
    ) -> None:
        super().__init__()
        self.query = query
        self.key = key
        self.value = value
        self.output = output
        self.output_ln = output_ln
        self.num_heads = num_heads

    def head_dim(self, hidden: int) -> int:
        """Per-head width for a hidden size, validating the head count."""
        heads = self.num_heads
        if heads is None:
            raise ShapeError("Attention head count was never set")
        if heads <= 0:
            raise ShapeError(f"Attention head count must be > 0, got {heads}")
        if hidden % heads != 0:
            raise ShapeError(
                f"Hidden size {hidden} is not divisible by {heads} attention heads"
            )
        return hidden // heads

    def _split(self, x: Tensor, heads: int, head_dim: int) -> Tensor:
        # (T, H*D) -> (H, T, D)
        return x.view(x.shape[0], heads, head_dim).transpose(0, 1)

    @override
    def forward(self, x: Tensor) -> Tensor:
        if x.ndim != 2:
            raise ShapeError(f"Expected hidden states (T, hidden), got {tuple(x.shape)}")
        t, hidden = x.shape
        head_dim = self.head_dim(hidden)
        heads = hidden // head_dim

        q = self._split(self.query(x), heads, head_dim)
        k = self._split(self.key(x), heads, head_dim)
        v = self._split(self.value(x), heads, head_dim)

        scores = torch.matmul(q, k.transpose(-2, -1)) / math.sqrt(float(head_dim))
        weights = torch.softmax(scores, dim=-1)
        context = torch.matmul(weights, v).transpose(0, 1).reshape(t, hidden)
        return self.output_ln(x + self.output(context))


class Mlp(nn.Module):
    """Feed-forward block: expand, activate, contract, residual, LayerNorm."""

    def __init__(
        self,
        intermediate: Linear,
        output: Linear,
        output_ln: LayerNorm,
        activation: str = "gelu",
    ) -> None:
        super().__init__()
        if intermediate.d_out != output.d_in:
            raise ShapeError(
                f"Intermediate width {intermediate.d_out} does not feed "
                f"output projection expecting {output.d_in}"
            )
        self.intermediate = intermediate
        self.output = output
        self.output_ln = output_ln
        self.activation_name = activation
        self.activation: Activation = get_activation(activation)

    @override
    def forward(self, x: Tensor) -> Tensor:
        h = self.activation(self.intermediate(x))
        return self.output_ln(x + self.output(h))


class BertLayer(nn.Module):
    """One encoder block: self-attention then feed-forward."""

    def __init__(self, attention: BertAttention, mlp: Mlp) -> None:
        super().__init__()
        self.attention = attention
        self.mlp = mlp

    @override
    def forward(self, x: Tensor) -> Tensor:
        return self.mlp(self.attention(x))


class BertEncoder(nn.Module):
    """A stack of encoder layers applied in order."""

    def __init__(self, layers: Iterable[BertLayer]) -> None:
        super().__init__()
        self.layers = nn.ModuleList(layers)

    def __len__(self) -> int:
        return len(self.layers)

    @override
    def forward(self, x: Tensor) -> Tensor:
        for layer in self.layers:
            x = layer(x)
        return x


class Bert(nn.Module):
    """Embeddings followed by the encoder stack."""

    def __init__(self, embeddings: BertEmbeddings, encoder: BertEncoder) -> None:
        super().__init__()
        self.embeddings = embeddings
        self.encoder = encoder

    @override
    def forward(self, input_ids: Tensor, position_ids: Tensor, type_ids: Tensor) -> Tensor:
        return self.encoder(self.embeddings(input_ids, position_ids, type_ids))


class BertPooler(nn.Module):
    """Reduces a sequence to its first position, projected and squashed with tanh."""

    def __init__(self, dense: Linear) -> None:
        super().__init__()
        self.dense = dense

    @override
    def forward(self, hidden: Tensor) -> Tensor:
        if hidden.ndim != 2 or hidden.shape[0] == 0:
            raise ShapeError(f"Pooler expects a non-empty (T, hidden) input, got {tuple(hidden.shape)}")
        return torch.tanh(self.dense(hidden[0]))


class BertClassifier(nn.Module):
    """BERT encoder, pooler and a linear head over the classes.

    forward returns raw logits of shape (num_classes,); run returns the
    softmax probabilities.
    """

    def __init__(self, bert: Bert, pooler: BertPooler, classifier: Linear) -> None:
        super().__init__()
        self.bert = bert
        self.pooler = pooler
        self.classifier = classifier

    @property
    def num_classes(self) -> int:
        return self.classifier.d_out

    def attention_modules(self) -> list[BertAttention]:
        return [layer.attention for layer in self.bert.encoder.layers]

    def set_num_heads(self, num_heads: int) -> None:
        """Inject the head count into every attention module."""
        for attention in self.attention_modules():
            attention.num_heads = int(num_heads)

    @override
    def forward(self, input_ids: Tensor, position_ids: Tensor, type_ids: Tensor) -> Tensor:
        lengths = {int(input_ids.numel()), int(position_ids.numel()), int(type_ids.numel())}
        if len(lengths) != 1:
            raise ShapeError(
                "input, position and type ids must have equal lengths, got "
                f"{input_ids.numel()}, {position_ids.numel()}, {type_ids.numel()}"
            )
        hidden = self.bert(input_ids, position_ids, type_ids)
        return self.classifier(self.pooler(hidden))

    @torch.inference_mode()
    def run(self, input_ids: Tensor, position_ids: Tensor, type_ids: Tensor) -> Tensor:
        """Forward pass followed by softmax over classes."""
        return torch.softmax(self.forward(input_ids, position_ids, type_ids), dim=-1)
