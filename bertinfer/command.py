"""Typed CLI command payloads.

Each command type represents a distinct user intent. The CLI parses arguments
into these typed objects, which are then dispatched to the appropriate handler.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bertinfer.config.run import RunConfig


@dataclass(frozen=True, slots=True)
class ClassifyCommand:
    """Request to classify a prompt one or more times."""

    run: RunConfig


@dataclass(frozen=True, slots=True)
class InspectCommand:
    """Request to list the tensors of a bundle without building a model."""

    bundle: Path


Command = ClassifyCommand | InspectCommand
