"""
toy builds small BERT checkpoints for tests.

Keys follow the bert-base naming used by BertForSequenceClassification.
With identity=True every projection is an identity-like matrix and every
bias is zero; embeddings and the classifier head are always seeded random
so outputs are not trivially uniform.
"""
from __future__ import annotations

import json
from pathlib import Path

import torch
from safetensors.torch import save_file
from tokenizers import Tokenizer, models, pre_tokenizers, processors

VOCAB = {"[UNK]": 0, "[CLS]": 101, "[SEP]": 102, "stocks": 5, "rallied": 6, "fell": 7}


def toy_state(
    *,
    num_layers: int = 3,
    hidden: int = 4,
    intermediate: int = 8,
    num_classes: int = 3,
    vocab: int = 128,
    positions: int = 16,
    identity: bool = True,
    seed: int = 0,
) -> dict[str, torch.Tensor]:
    """
    toy_state returns a complete modern-named classifier state dict.
    """
    gen = torch.Generator().manual_seed(seed)

    def randn(*shape: int, scale: float = 1.0) -> torch.Tensor:
        return torch.randn(*shape, generator=gen) * scale

    def dense(prefix: str, d_out: int, d_in: int) -> dict[str, torch.Tensor]:
        if identity:
            return {
                f"{prefix}.weight": torch.eye(d_out, d_in),
                f"{prefix}.bias": torch.zeros(d_out),
            }
        return {
            f"{prefix}.weight": randn(d_out, d_in, scale=0.5),
            f"{prefix}.bias": randn(d_out, scale=0.1),
        }

    def norm(prefix: str) -> dict[str, torch.Tensor]:
        if identity:
            return {f"{prefix}.weight": torch.ones(hidden), f"{prefix}.bias": torch.zeros(hidden)}
        return {
            f"{prefix}.weight": 1.0 + randn(hidden, scale=0.1),
            f"{prefix}.bias": randn(hidden, scale=0.1),
        }

    state: dict[str, torch.Tensor] = {
        "bert.embeddings.word_embeddings.weight": randn(vocab, hidden),
        "bert.embeddings.position_embeddings.weight": randn(positions, hidden),
        "bert.embeddings.token_type_embeddings.weight": randn(2, hidden),
    }
    state.update(norm("bert.embeddings.LayerNorm"))
    for i in range(num_layers):
        p = f"bert.encoder.layer.{i}"
        for name in ("query", "key", "value"):
            state.update(dense(f"{p}.attention.self.{name}", hidden, hidden))
        state.update(dense(f"{p}.attention.output.dense", hidden, hidden))
        state.update(norm(f"{p}.attention.output.LayerNorm"))
        state.update(dense(f"{p}.intermediate.dense", intermediate, hidden))
        state.update(dense(f"{p}.output.dense", hidden, intermediate))
        state.update(norm(f"{p}.output.LayerNorm"))
    state.update(dense("bert.pooler.dense", hidden, hidden))
    state["classifier.weight"] = randn(num_classes, hidden)
    state["classifier.bias"] = randn(num_classes, scale=0.1)
    return state


def legacy(
    state: dict[str, torch.Tensor], *, norms: bool = True, head: bool = True
) -> dict[str, torch.Tensor]:
    """
    legacy renames LayerNorm params to gamma/beta and the head to cls.seq_relationship.
    """
    out: dict[str, torch.Tensor] = {}
    for key, value in state.items():
        if norms and ".LayerNorm." in key:
            key = key.replace(".LayerNorm.weight", ".LayerNorm.gamma")
            key = key.replace(".LayerNorm.bias", ".LayerNorm.beta")
        if head and key.startswith("classifier."):
            key = "cls.seq_relationship." + key[len("classifier."):]
        out[key] = value
    return out


def write_bundle(state: dict[str, torch.Tensor], path: Path) -> Path:
    save_file({k: v.contiguous() for k, v in state.items()}, str(path))
    return path


def toy_tokenizer() -> Tokenizer:
    tok = Tokenizer(models.WordLevel(vocab=VOCAB, unk_token="[UNK]"))
    tok.pre_tokenizer = pre_tokenizers.Whitespace()
    tok.post_processor = processors.TemplateProcessing(
        single="[CLS] $A [SEP]",
        special_tokens=[("[CLS]", 101), ("[SEP]", 102)],
    )
    return tok


def write_artifacts(
    directory: Path,
    model_id: str,
    *,
    state: dict[str, torch.Tensor] | None = None,
    config: dict[str, object] | None = None,
) -> None:
    """
    write_artifacts writes model, tokenizer and config under ModelArtifacts names.
    """
    slug = model_id.replace("/", "-")
    write_bundle(state if state is not None else toy_state(), directory / f"model-{slug}.safetensors")
    toy_tokenizer().save(str(directory / f"tokenizer-{slug}.json"))
    payload = config if config is not None else {
        "num_attention_heads": 2,
        "num_hidden_layers": 3,
        "id2label": {"0": "positive", "1": "negative", "2": "neutral"},
    }
    (directory / f"config-{slug}.json").write_text(json.dumps(payload), encoding="utf-8")
