"""Classifier hyperparameters read from a Hugging Face config.json.

The weight bundle stores tensors but not how to use them: the number of
attention heads, the activation, the normalization epsilon and the class
labels all live in the accompanying config file.
"""
from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError, field_validator

from bertinfer.config import Config, PositiveFloat, PositiveInt
from bertinfer.errors import ConfigError


class BertConfig(Config):
    """Run parameters for a BERT sequence classifier.

    Only the head count is required; everything else falls back to the
    values of the bert-base checkpoints.
    """

    num_attention_heads: PositiveInt
    id2label: dict[str, str] | None = None
    num_hidden_layers: PositiveInt = 12
    layer_norm_eps: PositiveFloat = 1e-12
    hidden_act: str = "gelu"

    @field_validator("id2label")
    @classmethod
    def _check_label_keys(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        if value is None:
            return None
        for key in value:
            try:
                index = int(key)
            except ValueError as e:
                raise ValueError(f"id2label key {key!r} is not an integer") from e
            if index < 0:
                raise ValueError(f"id2label key {key!r} is negative")
        return value

    @classmethod
    def from_file(cls, path: Path | str) -> "BertConfig":
        """Load and validate a config.json.

        Raises FileNotFoundError when the file is absent and ConfigError when
        it is not valid JSON or fails validation.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Could not parse config {path}: {e}") from e
        if not isinstance(payload, dict):
            raise ConfigError(
                f"Config {path} must be a JSON object, got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
