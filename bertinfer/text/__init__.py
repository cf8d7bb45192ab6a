"""Text handling: turning prompts into token and segment ids."""
from __future__ import annotations

from bertinfer.text.tokenizer import Encoding, HFTokenizer, Tokenizer

__all__ = ["Encoding", "HFTokenizer", "Tokenizer"]
