"""BERT module tree: embeddings, encoder layers, pooler and classifier head.

The tree mirrors the checkpoint's key hierarchy one-to-one. Each module owns
its child modules and tensors exclusively; nothing is shared between layers.
"""
from __future__ import annotations

from bertinfer.model.bert import (
    Bert,
    BertAttention,
    BertClassifier,
    BertEmbeddings,
    BertEncoder,
    BertLayer,
    BertPooler,
    Mlp,
)

__all__ = [
    "Bert",
    "BertAttention",
    "BertClassifier",
    "BertEmbeddings",
    "BertEncoder",
    "BertLayer",
    "BertPooler",
    "Mlp",
]
