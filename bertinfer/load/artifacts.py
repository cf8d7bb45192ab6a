"""
artifacts locates the three files a classification run needs.

Files are named after the Hub model id, e.g. for "Narsil/finbert":

    model-Narsil-finbert.safetensors
    tokenizer-Narsil-finbert.json
    config-Narsil-finbert.json

When one is missing the run stops, but first prints the command that
fetches it.
"""
from __future__ import annotations

import enum
from pathlib import Path

from bertinfer.console import logger

HUB_URL = "https://huggingface.co"


class ArtifactKind(str, enum.Enum):
    """The file kinds a run needs, valued by their Hub file names."""

    MODEL = "model.safetensors"
    TOKENIZER = "tokenizer.json"
    CONFIG = "config.json"

    @property
    def label(self) -> str:
        return self.name.capitalize()


class ModelArtifacts:
    """
    ModelArtifacts maps a model id to local file paths and download hints.
    """
    def __init__(self, model_id: str, directory: Path | str = ".") -> None:
        if not model_id or "/" not in model_id:
            raise ValueError(f"model_id must look like org/model, got {model_id!r}")
        self.model_id = model_id
        self.directory = Path(directory)

    @property
    def slug(self) -> str:
        return self.model_id.replace("/", "-")

    def path(self, kind: ArtifactKind) -> Path:
        """
        path returns where the artifact is expected on disk.
        """
        match kind:
            case ArtifactKind.MODEL:
                name = f"model-{self.slug}.safetensors"
            case ArtifactKind.TOKENIZER:
                name = f"tokenizer-{self.slug}.json"
            case ArtifactKind.CONFIG:
                name = f"config-{self.slug}.json"
            case _:
                raise ValueError(f"Unknown artifact kind: {kind}")
        return self.directory / name

    def url(self, kind: ArtifactKind) -> str:
        return f"{HUB_URL}/{self.model_id}/resolve/main/{kind.value}"

    def command(self, kind: ArtifactKind) -> str:
        """
        command returns the curl invocation that downloads one artifact.
        """
        return f"curl {self.url(kind)} -o {self.path(kind)} -L"

    def hint(self, kind: ArtifactKind) -> str:
        """
        hint explains how to obtain a missing artifact.

        A missing model usually means nothing was downloaded yet, so its hint
        lists all three files.
        """
        kinds = list(ArtifactKind) if kind is ArtifactKind.MODEL else [kind]
        lines = [f"{kind.label} not found, try downloading it with"]
        lines.extend(f"  {self.command(k)}" for k in kinds)
        lines.append("or rerun with --download.")
        return "\n".join(lines)

    def missing(self) -> list[ArtifactKind]:
        return [kind for kind in ArtifactKind if not self.path(kind).exists()]

    def require(self, kind: ArtifactKind) -> Path:
        """
        require returns the artifact path, or prints the hint and raises.
        """
        path = self.path(kind)
        if not path.exists():
            logger.panel(self.hint(kind), title=f"{kind.label} missing", style="warning")
            raise FileNotFoundError(f"{kind.label} file not found: {path}")
        return path
