"""
assembler rebuilds a BertClassifier from a flat safetensors bundle.

The bundle holds tensors only. The assembler walks the slot tables in
`schema`, materializes each tensor on the target device and wires the
modules into a strict tree. Any missing or ill-shaped tensor aborts the
whole assembly; there is no partially loaded model.
"""
from __future__ import annotations

import logging

from torch import nn

from bertinfer.backend.device import Device
from bertinfer.config.model import BertConfig
from bertinfer.errors import ShapeError
from bertinfer.layer.embedding import Embedding
from bertinfer.layer.layer_norm import LayerNorm
from bertinfer.layer.linear import Linear
from bertinfer.load.schema import (
    ATTENTION_SLOTS,
    CLASSIFIER_SLOT,
    DEFAULT_NUM_LAYERS,
    EMBEDDING_SLOTS,
    MLP_SLOTS,
    POOLER_SLOT,
    Slot,
    SlotKind,
    count_layers,
)
from bertinfer.load.tensor_reader import TensorReader
from bertinfer.model.bert import (
    Bert,
    BertAttention,
    BertClassifier,
    BertEmbeddings,
    BertEncoder,
    BertLayer,
    BertPooler,
    Mlp,
)
from bertinfer.weight.bundle import BundleReader

logger = logging.getLogger(__name__)


class BertAssembler:
    """
    BertAssembler loads BERT sequence-classification checkpoints.
    """
    def __init__(
        self,
        bundle: BundleReader,
        device: Device,
        *,
        num_layers: int = DEFAULT_NUM_LAYERS,
        eps: float = 1e-12,
        activation: str = "gelu",
    ) -> None:
        """
        __init__ initializes an assembler over a bundle.
        """
        if num_layers < 0:
            raise ValueError(f"num_layers must be >= 0, got {num_layers}")
        self.reader: TensorReader = TensorReader(bundle, device)
        self.num_layers: int = int(num_layers)
        self.eps: float = float(eps)
        self.activation: str = activation

    def build(self) -> BertClassifier:
        """
        build materializes the full module tree.
        """
        embeddings = BertEmbeddings(**self._fill(EMBEDDING_SLOTS))
        hidden = embeddings.hidden_size

        layers = [self._layer(index, hidden) for index in range(self.num_layers)]
        encoder = BertEncoder(layers)

        pooler = BertPooler(**self._fill((POOLER_SLOT,)))
        self._expect_linear(pooler.dense, "bert.pooler.dense", d_in=hidden, d_out=hidden)

        classifier = self._build(CLASSIFIER_SLOT)
        assert isinstance(classifier, Linear)
        self._expect_linear(classifier, "classifier", d_in=hidden)

        unused = self.reader.unused()
        if unused:
            logger.debug("ignored %d unused tensors: %s", len(unused), ", ".join(unused))
        return BertClassifier(Bert(embeddings, encoder), pooler, classifier)

    def _layer(self, index: int, hidden: int) -> BertLayer:
        """
        _layer builds encoder layer `index` and checks its widths.
        """
        attention = BertAttention(**self._fill(ATTENTION_SLOTS, index))
        mlp = Mlp(**self._fill(MLP_SLOTS, index), activation=self.activation)

        where = f"layer {index}"
        for name in ("query", "key", "value", "output"):
            self._expect_linear(getattr(attention, name), f"{where} {name}", d_in=hidden, d_out=hidden)
        self._expect_norm(attention.output_ln, f"{where} attention LayerNorm", hidden)
        self._expect_linear(mlp.intermediate, f"{where} intermediate", d_in=hidden)
        self._expect_linear(mlp.output, f"{where} output", d_out=hidden)
        self._expect_norm(mlp.output_ln, f"{where} output LayerNorm", hidden)
        return BertLayer(attention, mlp)

    def _fill(self, slots: tuple[Slot, ...], index: int | None = None) -> dict[str, nn.Module]:
        """
        _fill builds one module per slot, keyed by constructor argument.
        """
        return {slot.field: self._build(slot, index) for slot in slots}

    def _build(self, slot: Slot, index: int | None = None) -> nn.Module:
        """
        _build materializes a single slot, trying key variants in order.
        """
        tensors = self.reader.first(slot.candidates(index))
        match slot.kind:
            case SlotKind.EMBEDDING:
                return Embedding(*tensors)
            case SlotKind.LINEAR:
                return Linear(*tensors)
            case SlotKind.LAYER_NORM:
                return LayerNorm(*tensors, eps=self.eps)
            case _:
                raise ValueError(f"Unknown slot kind: {slot.kind}")

    @staticmethod
    def _expect_linear(
        layer: Linear,
        where: str,
        *,
        d_in: int | None = None,
        d_out: int | None = None,
    ) -> None:
        if d_in is not None and layer.d_in != d_in:
            raise ShapeError(f"{where}: expected input width {d_in}, got weight {tuple(layer.weight.shape)}")
        if d_out is not None and layer.d_out != d_out:
            raise ShapeError(f"{where}: expected output width {d_out}, got weight {tuple(layer.weight.shape)}")

    @staticmethod
    def _expect_norm(layer: LayerNorm, where: str, hidden: int) -> None:
        if layer.d_model != hidden:
            raise ShapeError(f"{where}: expected width {hidden}, got {layer.d_model}")


def assemble(
    bundle: BundleReader,
    device: Device,
    config: BertConfig,
    *,
    num_layers: int | None = None,
) -> BertClassifier:
    """
    assemble builds a classifier and injects the config's head count.

    num_layers defaults to the config's num_hidden_layers.
    """
    layers = config.num_hidden_layers if num_layers is None else num_layers
    present = count_layers(bundle.names())
    if present != layers:
        logger.warning(
            "bundle has %d encoder layers, assembling %d", present, layers
        )
    model = BertAssembler(
        bundle,
        device,
        num_layers=layers,
        eps=config.layer_norm_eps,
        activation=config.hidden_act,
    ).build()
    model.set_num_heads(config.num_attention_heads)
    return model.eval()
