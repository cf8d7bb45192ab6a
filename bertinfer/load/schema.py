"""
schema describes where each BERT tensor lives in a checkpoint's key space.

Checkpoints are flat name -> tensor stores, so the naming convention is the
schema. Each Slot names the constructor argument it fills, the kind of
module to build, and candidate key prefixes in priority order. Parameter
names per kind are also tried in priority order, which is how legacy
TensorFlow-era names (LayerNorm gamma/beta, the pretraining
cls.seq_relationship head) are supported. Adding a new legacy variant means
adding an entry here, not touching the assembler.
"""
from __future__ import annotations

import enum
import re
from collections.abc import Iterable
from dataclasses import dataclass


class SlotKind(enum.Enum):
    """The module type a slot materializes into."""

    EMBEDDING = "embedding"
    LINEAR = "linear"
    LAYER_NORM = "layer_norm"


# Parameter suffixes per kind, modern names first.
PARAM_VARIANTS: dict[SlotKind, tuple[tuple[str, ...], ...]] = {
    SlotKind.EMBEDDING: (("weight",),),
    SlotKind.LINEAR: (("weight", "bias"),),
    SlotKind.LAYER_NORM: (("weight", "bias"), ("gamma", "beta")),
}


@dataclass(frozen=True, slots=True)
class Slot:
    """
    Slot maps one module constructor argument to candidate key prefixes.
    """
    field: str
    kind: SlotKind
    prefixes: tuple[str, ...]

    def candidates(self, index: int | None = None) -> list[tuple[str, ...]]:
        """
        candidates expands prefixes and parameter variants into key groups.

        Groups are ordered by prefix first, then by parameter variant.
        """
        groups: list[tuple[str, ...]] = []
        for template in self.prefixes:
            prefix = template.format(index=index)
            for params in PARAM_VARIANTS[self.kind]:
                groups.append(tuple(f"{prefix}.{p}" for p in params))
        return groups


LAYER_PREFIX = "bert.encoder.layer.{index}"

EMBEDDING_SLOTS: tuple[Slot, ...] = (
    Slot("input_embeddings", SlotKind.EMBEDDING, ("bert.embeddings.word_embeddings",)),
    Slot("position_embeddings", SlotKind.EMBEDDING, ("bert.embeddings.position_embeddings",)),
    Slot("type_embeddings", SlotKind.EMBEDDING, ("bert.embeddings.token_type_embeddings",)),
    Slot("layer_norm", SlotKind.LAYER_NORM, ("bert.embeddings.LayerNorm",)),
)

ATTENTION_SLOTS: tuple[Slot, ...] = (
    Slot("query", SlotKind.LINEAR, (f"{LAYER_PREFIX}.attention.self.query",)),
    Slot("key", SlotKind.LINEAR, (f"{LAYER_PREFIX}.attention.self.key",)),
    Slot("value", SlotKind.LINEAR, (f"{LAYER_PREFIX}.attention.self.value",)),
    Slot("output", SlotKind.LINEAR, (f"{LAYER_PREFIX}.attention.output.dense",)),
    Slot("output_ln", SlotKind.LAYER_NORM, (f"{LAYER_PREFIX}.attention.output.LayerNorm",)),
)

MLP_SLOTS: tuple[Slot, ...] = (
    Slot("intermediate", SlotKind.LINEAR, (f"{LAYER_PREFIX}.intermediate.dense",)),
    Slot("output", SlotKind.LINEAR, (f"{LAYER_PREFIX}.output.dense",)),
    Slot("output_ln", SlotKind.LAYER_NORM, (f"{LAYER_PREFIX}.output.LayerNorm",)),
)

POOLER_SLOT = Slot("dense", SlotKind.LINEAR, ("bert.pooler.dense",))

CLASSIFIER_PREFIXES: tuple[str, ...] = ("classifier", "cls.seq_relationship")
CLASSIFIER_SLOT = Slot("classifier", SlotKind.LINEAR, CLASSIFIER_PREFIXES)

DEFAULT_NUM_LAYERS = 12

_LAYER_KEY = re.compile(r"^bert\.encoder\.layer\.(\d+)\.")


def count_layers(names: Iterable[str]) -> int:
    """
    count_layers returns one past the highest encoder layer index present.
    """
    indices = {int(m.group(1)) for name in names if (m := _LAYER_KEY.match(name))}
    return max(indices) + 1 if indices else 0
