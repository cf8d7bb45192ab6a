"""Hugging Face Hub integration for fetching missing artifacts.

Instead of copying curl commands, a run can fetch the model, tokenizer and
config itself. Files land in the Hub cache and are then copied to the local
names ModelArtifacts expects.
"""
from __future__ import annotations

import shutil
from pathlib import Path

from huggingface_hub import hf_hub_download

from bertinfer.console import logger
from bertinfer.load.artifacts import ArtifactKind, ModelArtifacts


class HubDownloader:
    """Downloads a model's artifacts from the Hugging Face Hub.

    Only files that are missing locally are fetched; existing files are
    left untouched.
    """

    def __init__(
        self,
        artifacts: ModelArtifacts,
        *,
        revision: str | None = None,
        cache_dir: str | None = None,
    ) -> None:
        """Configure the downloader for one model.

        Args:
            artifacts: Where the files should end up.
            revision: Git ref (branch, tag, commit) to download from.
            cache_dir: Local directory for the Hub cache.
        """
        self.artifacts = artifacts
        self.revision = revision
        self.cache_dir = cache_dir

    def fetch(self, kind: ArtifactKind) -> Path:
        """Download one artifact and place it at its expected path."""
        target = self.artifacts.path(kind)
        try:
            cached = hf_hub_download(
                repo_id=self.artifacts.model_id,
                filename=kind.value,
                revision=self.revision,
                cache_dir=self.cache_dir,
            )
        except Exception as e:
            raise ValueError(
                f"Failed to download {kind.value!r} from {self.artifacts.model_id!r} "
                f"(revision={self.revision!r}, cache_dir={self.cache_dir!r}): {e}"
            ) from e
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(cached, target)
        logger.path(str(target), label=f"downloaded {kind.label.lower()}")
        return target

    def fetch_missing(self) -> list[Path]:
        """Download every artifact not yet present."""
        fetched = [self.fetch(kind) for kind in self.artifacts.missing()]
        if fetched:
            logger.success(f"Fetched {len(fetched)} file(s) for {self.artifacts.model_id}")
        return fetched
