"""
runner wires files, tokenizer, model and driver into one classification run.

Stages run strictly in order on the calling thread: locate (and optionally
download) artifacts, map the bundle, load tokenizer and config, assemble
the model, encode the prompt once, then run inference `number` times.
Each stage is timed from the start of the run.
"""
from __future__ import annotations

import time

from bertinfer.backend.device import Device
from bertinfer.config.model import BertConfig
from bertinfer.config.run import RunConfig
from bertinfer.console import logger
from bertinfer.infer.driver import InferenceDriver, Prediction
from bertinfer.load.artifacts import ArtifactKind, ModelArtifacts
from bertinfer.load.assembler import assemble
from bertinfer.load.hub import HubDownloader
from bertinfer.load.schema import count_layers
from bertinfer.text.tokenizer import HFTokenizer, Tokenizer
from bertinfer.weight.bundle import BundleReader


class ClassifyRunner:
    """
    ClassifyRunner executes a ClassifyCommand's run configuration.
    """
    def __init__(self, run: RunConfig) -> None:
        self.run = run
        self.artifacts = ModelArtifacts(run.model_id, run.directory)
        self._start = time.perf_counter()

    def _elapsed(self, stage: str) -> None:
        logger.elapsed(stage, time.perf_counter() - self._start)

    def load(self) -> tuple[InferenceDriver, Tokenizer]:
        """
        load prepares the driver and tokenizer, raising on any missing piece.
        """
        self._start = time.perf_counter()
        if self.run.download and self.artifacts.missing():
            HubDownloader(self.artifacts).fetch_missing()

        bundle = BundleReader.open(self.artifacts.require(ArtifactKind.MODEL))
        self._elapsed("Safetensors")

        tokenizer = HFTokenizer.from_file(self.artifacts.require(ArtifactKind.TOKENIZER))
        self._elapsed("Tokenizer")

        config = BertConfig.from_file(self.artifacts.require(ArtifactKind.CONFIG))
        device = Device.parse(self.run.device)
        model = assemble(bundle, device, config)
        self._elapsed("Loaded")
        logger.key_value(
            {
                "device": device.device,
                "layers": len(model.bert.encoder),
                "heads": config.num_attention_heads,
                "classes": model.num_classes,
                "tensors": f"{len(bundle)} ({count_layers(bundle.names())} layers in bundle)",
            },
            title="Model",
        )
        return InferenceDriver(model, config, device), tokenizer

    def execute(self) -> list[list[Prediction]]:
        """
        execute runs the prompt `number` times and returns every ranking.
        """
        driver, tokenizer = self.load()
        encoding = tokenizer.encode(self.run.prompt)
        self._elapsed("Loaded & encoded")

        results: list[list[Prediction]] = []
        for _ in range(self.run.number):
            logger.info(f"Running bert inference on {self.run.prompt!r}")
            inference_start = time.perf_counter()
            ranked = driver.classify(encoding.ids, encoding.type_ids)
            logger.predictions([p.as_pair() for p in ranked], title="Probs")
            logger.elapsed("Inference", time.perf_counter() - inference_start)
            results.append(ranked)
        self._elapsed("Total Inference")
        return results


def inspect_bundle(bundle: BundleReader) -> None:
    """
    inspect_bundle prints every tensor's dtype and shape.
    """
    logger.header("Bundle", bundle.source)
    metadata = bundle.metadata()
    if metadata:
        logger.key_value(metadata, title="Metadata")
    logger.table(
        title=f"{len(bundle)} tensors, {count_layers(bundle.names())} encoder layers",
        columns=["name", "dtype", "shape"],
        rows=[
            [view.name, view.dtype, str(list(view.shape))]
            for view in (bundle.tensor(name) for name in bundle.names())
        ],
    )
