"""Inference driver: ids in, ranked labelled probabilities out.

One call runs one forward pass over one sequence. Weights are never
reloaded between calls, so repeating a prompt only repeats the forward
pass. Ranking is descending by probability; equal probabilities are
ordered by ascending class index so results never depend on sort
stability.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import torch

from bertinfer.backend.device import Device
from bertinfer.config.model import BertConfig
from bertinfer.errors import ShapeError
from bertinfer.model.bert import BertClassifier


@dataclass(frozen=True, slots=True)
class Prediction:
    """One class of a ranked result."""

    label: str
    probability: float
    index: int

    def as_pair(self) -> tuple[str, float]:
        return self.label, self.probability


def get_label(id2label: Mapping[str, str] | None, index: int) -> str:
    """Resolve a class index to its label, or a LABEL_<i> placeholder."""
    if id2label is not None:
        label = id2label.get(str(index))
        if label is not None:
            return label
    return f"LABEL_{index}"


def rank(
    probabilities: Sequence[float],
    id2label: Mapping[str, str] | None = None,
) -> list[Prediction]:
    """Pair probabilities with labels, sorted descending, ties by index."""
    order = sorted(range(len(probabilities)), key=lambda i: (-probabilities[i], i))
    return [
        Prediction(label=get_label(id2label, i), probability=float(probabilities[i]), index=i)
        for i in order
    ]


class InferenceDriver:
    """Runs a BertClassifier for single prompts.

    Holds the model, the config that supplies labels, and the device the
    model lives on. Safe to call repeatedly; nothing is mutated between
    calls.
    """

    def __init__(self, model: BertClassifier, config: BertConfig, device: Device) -> None:
        self.model = model
        self.config = config
        self.device = device

    def probabilities(
        self,
        input_ids: Sequence[int],
        position_ids: Sequence[int],
        type_ids: Sequence[int],
    ) -> list[float]:
        """Class probabilities for one sequence, in class-index order."""
        if not (len(input_ids) == len(position_ids) == len(type_ids)):
            raise ShapeError(
                "input, position and type ids must have equal lengths, got "
                f"{len(input_ids)}, {len(position_ids)}, {len(type_ids)}"
            )
        if len(input_ids) == 0:
            raise ShapeError("Cannot classify an empty sequence")
        with torch.inference_mode():
            probs = self.model.run(
                self.device.ids(input_ids),
                self.device.ids(position_ids),
                self.device.ids(type_ids),
            )
        return self.device.cpu_data(probs)

    def classify(
        self,
        input_ids: Sequence[int],
        type_ids: Sequence[int],
        position_ids: Sequence[int] | None = None,
    ) -> list[Prediction]:
        """Ranked predictions for one sequence.

        Positions default to 0..len(input_ids)-1.
        """
        if position_ids is None:
            position_ids = range(len(input_ids))
        probs = self.probabilities(input_ids, position_ids, type_ids)
        return rank(probs, self.config.id2label)
