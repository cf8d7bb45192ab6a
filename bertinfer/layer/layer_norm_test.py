"""Test the layer norm layer."""
from __future__ import annotations

import unittest

import torch
import torch.nn.functional as F

from bertinfer.errors import ShapeError
from bertinfer.layer.layer_norm import LayerNorm


class LayerNormTest(unittest.TestCase):
    """Test the layer norm layer."""

    def test_forward_matches_reference(self) -> None:
        weight, bias = torch.randn(8), torch.randn(8)
        layer = LayerNorm(weight, bias, eps=1e-5)
        x = torch.randn(2, 3, 8)
        torch.testing.assert_close(layer(x), F.layer_norm(x, (8,), weight, bias, 1e-5))

    def test_mismatched_parameters(self) -> None:
        with self.assertRaises(ShapeError):
            LayerNorm(torch.ones(8), torch.zeros(4))

    def test_input_width_checked(self) -> None:
        layer = LayerNorm(torch.ones(8), torch.zeros(8))
        with self.assertRaises(ShapeError):
            layer(torch.zeros(2, 4))


if __name__ == "__main__":
    unittest.main()
