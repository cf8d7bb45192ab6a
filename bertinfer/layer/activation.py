"""
activation maps config.json `hidden_act` names to functions.
"""
from __future__ import annotations

from collections.abc import Callable

import torch
import torch.nn.functional as F
from torch import Tensor

from bertinfer.errors import ConfigError

Activation = Callable[[Tensor], Tensor]

_ACTIVATIONS: dict[str, Activation] = {
    "gelu": F.gelu,
    "gelu_new": lambda x: F.gelu(x, approximate="tanh"),
    "gelu_pytorch_tanh": lambda x: F.gelu(x, approximate="tanh"),
    "relu": F.relu,
    "silu": F.silu,
    "tanh": torch.tanh,
}


def get_activation(name: str) -> Activation:
    """
    get_activation looks up an activation function by name.
    """
    fn = _ACTIVATIONS.get(name)
    if fn is None:
        raise ConfigError(
            f"Unknown activation '{name}'. "
            f"Supported: {', '.join(_ACTIVATIONS)}"
        )
    return fn
