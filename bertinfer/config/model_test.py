"""
model_test provides tests for BertConfig parsing.
"""
from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from bertinfer.config.model import BertConfig
from bertinfer.config.run import DEFAULT_MODEL_ID, RunConfig
from bertinfer.errors import ConfigError


class BertConfigTest(unittest.TestCase):
    """
    BertConfigTest validates config.json handling.
    """
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, payload: object) -> Path:
        path = self.dir / "config.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_from_file_reads_heads_and_labels(self) -> None:
        path = self._write(
            {
                "num_attention_heads": 12,
                "id2label": {"0": "positive", "1": "negative", "2": "neutral"},
                "architectures": ["BertForSequenceClassification"],
            }
        )
        cfg = BertConfig.from_file(path)
        self.assertEqual(cfg.num_attention_heads, 12)
        self.assertEqual(cfg.id2label, {"0": "positive", "1": "negative", "2": "neutral"})
        self.assertEqual(cfg.num_hidden_layers, 12)
        self.assertEqual(cfg.hidden_act, "gelu")

    def test_labels_are_optional(self) -> None:
        cfg = BertConfig.from_file(self._write({"num_attention_heads": 4}))
        self.assertIsNone(cfg.id2label)

    def test_missing_file_is_io_error(self) -> None:
        with self.assertRaises(FileNotFoundError):
            BertConfig.from_file(self.dir / "absent.json")

    def test_malformed_json_is_config_error(self) -> None:
        path = self.dir / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigError):
            BertConfig.from_file(path)

    def test_non_positive_heads_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            BertConfig.from_file(self._write({"num_attention_heads": 0}))

    def test_missing_heads_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            BertConfig.from_file(self._write({"id2label": {"0": "a"}}))

    def test_non_integer_label_key_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            BertConfig(num_attention_heads=2, id2label={"zero": "a"})

    def test_config_is_frozen(self) -> None:
        cfg = BertConfig(num_attention_heads=2)
        with self.assertRaises(ValidationError):
            cfg.num_attention_heads = 3  # type: ignore[misc]


class RunConfigTest(unittest.TestCase):
    """
    RunConfigTest checks run defaults.
    """
    def test_defaults(self) -> None:
        cfg = RunConfig()
        self.assertEqual(cfg.number, 1)
        self.assertEqual(cfg.model_id, DEFAULT_MODEL_ID)
        self.assertEqual(cfg.device, "auto")

    def test_number_must_be_positive(self) -> None:
        with self.assertRaises(ValidationError):
            RunConfig(number=0)


if __name__ == "__main__":
    unittest.main()
