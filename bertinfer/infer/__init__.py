"""Inference: running the assembled classifier and ranking its classes."""
from __future__ import annotations

from bertinfer.infer.driver import InferenceDriver, Prediction, get_label, rank

__all__ = ["InferenceDriver", "Prediction", "get_label", "rank"]
