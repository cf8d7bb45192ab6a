"""Tokenizer abstraction for classification prompts.

Classification needs token ids and segment (type) ids, with the model's
boundary tokens such as [CLS] and [SEP] added. The heavy lifting is done by
the Hugging Face `tokenizers` library; this module only fixes the interface
the inference driver relies on.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from pathlib import Path

from tokenizers import Tokenizer as _HFTokenizer


@dataclass(frozen=True, slots=True)
class Encoding:
    """Token ids and segment ids of one encoded prompt."""

    ids: list[int]
    type_ids: list[int]

    def __len__(self) -> int:
        return len(self.ids)


class Tokenizer(abc.ABC):
    """Abstract base class for text-to-token encoding."""

    @abc.abstractmethod
    def encode(self, text: str) -> Encoding:
        """Convert text to token and type ids, boundary tokens included."""


class HFTokenizer(Tokenizer):
    """Tokenizer backed by a `tokenizers` tokenizer.json.

    Encodes without special tokens first, then runs the tokenizer's
    post-processor so the model-specific boundary tokens are added.
    """

    def __init__(self, tokenizer: _HFTokenizer) -> None:
        self._tokenizer = tokenizer

    @classmethod
    def from_file(cls, path: Path | str) -> "HFTokenizer":
        """Load a tokenizer.json, raising FileNotFoundError if absent."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tokenizer file not found: {path}")
        return cls(_HFTokenizer.from_file(str(path)))

    def encode(self, text: str) -> Encoding:
        """Convert text to token ids using the wrapped tokenizer."""
        encoded = self._tokenizer.encode(str(text), add_special_tokens=False)
        encoded = self._tokenizer.post_process(encoded, None, add_special_tokens=True)
        return Encoding(ids=list(encoded.ids), type_ids=list(encoded.type_ids))
