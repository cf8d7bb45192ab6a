"""Run parameters collected from the command line."""
from __future__ import annotations

from pathlib import Path

from bertinfer.config import Config, PositiveInt

DEFAULT_PROMPT = "Stocks rallied and the British pound gained"
DEFAULT_MODEL_ID = "Narsil/finbert"


class RunConfig(Config):
    """What to classify, how many times, and with which model files."""

    prompt: str = DEFAULT_PROMPT
    number: PositiveInt = 1
    model_id: str = DEFAULT_MODEL_ID
    directory: Path = Path(".")
    device: str = "auto"
    download: bool = False
