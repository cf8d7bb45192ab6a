"""
tokenizer_test provides tests for the tokenizer wrapper.
"""
from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from tokenizers import Tokenizer, models, pre_tokenizers, processors

from bertinfer.text.tokenizer import HFTokenizer

_VOCAB = {"[UNK]": 0, "[CLS]": 101, "[SEP]": 102, "stocks": 5, "rallied": 6}


def _word_level() -> Tokenizer:
    tok = Tokenizer(models.WordLevel(vocab=_VOCAB, unk_token="[UNK]"))
    tok.pre_tokenizer = pre_tokenizers.Whitespace()
    tok.post_processor = processors.TemplateProcessing(
        single="[CLS] $A [SEP]",
        pair="[CLS] $A [SEP] $B:1 [SEP]:1",
        special_tokens=[("[CLS]", 101), ("[SEP]", 102)],
    )
    return tok


class HFTokenizerTest(unittest.TestCase):
    """
    HFTokenizerTest checks boundary tokens and type ids.
    """
    def test_encode_adds_boundary_tokens(self) -> None:
        encoding = HFTokenizer(_word_level()).encode("stocks rallied")
        self.assertEqual(encoding.ids, [101, 5, 6, 102])
        self.assertEqual(encoding.type_ids, [0, 0, 0, 0])
        self.assertEqual(len(encoding), 4)

    def test_unknown_words_map_to_unk(self) -> None:
        encoding = HFTokenizer(_word_level()).encode("bonds")
        self.assertEqual(encoding.ids, [101, 0, 102])

    def test_from_file_round_trips(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "tokenizer.json"
            _word_level().save(str(path))
            encoding = HFTokenizer.from_file(path).encode("rallied")
        self.assertEqual(encoding.ids, [101, 6, 102])

    def test_from_file_missing(self) -> None:
        with self.assertRaises(FileNotFoundError):
            HFTokenizer.from_file("/nonexistent/tokenizer.json")


if __name__ == "__main__":
    unittest.main()
