"""
Unit tests for artifact naming and download hints.
"""
from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path

from rich.console import Console

from bertinfer.console import logger
from bertinfer.console.logger import BERTINFER_THEME
from bertinfer.load.artifacts import ArtifactKind, ModelArtifacts


class TestModelArtifacts(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.artifacts = ModelArtifacts("Narsil/finbert", self.dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_paths_follow_model_id(self) -> None:
        self.assertEqual(self.artifacts.slug, "Narsil-finbert")
        self.assertEqual(self.artifacts.path(ArtifactKind.MODEL), self.dir / "model-Narsil-finbert.safetensors")
        self.assertEqual(self.artifacts.path(ArtifactKind.TOKENIZER), self.dir / "tokenizer-Narsil-finbert.json")
        self.assertEqual(self.artifacts.path(ArtifactKind.CONFIG), self.dir / "config-Narsil-finbert.json")

    def test_url(self) -> None:
        self.assertEqual(
            self.artifacts.url(ArtifactKind.CONFIG),
            "https://huggingface.co/Narsil/finbert/resolve/main/config.json",
        )

    def test_model_hint_lists_every_file(self) -> None:
        hint = self.artifacts.hint(ArtifactKind.MODEL)
        for kind in ArtifactKind:
            self.assertIn(self.artifacts.command(kind), hint)
        self.assertTrue(hint.endswith("or rerun with --download."))

    def test_tokenizer_hint_lists_only_tokenizer(self) -> None:
        hint = self.artifacts.hint(ArtifactKind.TOKENIZER)
        self.assertIn("tokenizer.json", hint)
        self.assertNotIn("model.safetensors", hint)

    def test_command_is_curl(self) -> None:
        command = self.artifacts.command(ArtifactKind.MODEL)
        self.assertTrue(command.startswith("curl https://huggingface.co/Narsil/finbert/resolve/main/model.safetensors"))
        self.assertTrue(command.endswith("-L"))

    def test_missing_and_require(self) -> None:
        self.assertEqual(self.artifacts.missing(), list(ArtifactKind))
        self.artifacts.path(ArtifactKind.CONFIG).write_text("{}", encoding="utf-8")
        self.assertEqual(self.artifacts.missing(), [ArtifactKind.MODEL, ArtifactKind.TOKENIZER])
        self.assertEqual(self.artifacts.require(ArtifactKind.CONFIG), self.artifacts.path(ArtifactKind.CONFIG))

    def test_require_missing_prints_hint(self) -> None:
        output = io.StringIO()
        saved = logger.console
        logger.console = Console(file=output, width=300, theme=BERTINFER_THEME)
        try:
            with self.assertRaises(FileNotFoundError):
                self.artifacts.require(ArtifactKind.TOKENIZER)
        finally:
            logger.console = saved
        self.assertIn("Tokenizer not found", output.getvalue())

    def test_model_id_needs_org(self) -> None:
        with self.assertRaises(ValueError):
            ModelArtifacts("finbert")


if __name__ == "__main__":
    unittest.main()
