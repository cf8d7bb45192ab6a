"""Model loading: from a flat tensor bundle to a classifier module tree.

Checkpoints come as a safetensors file plus a tokenizer and a config, named
after the Hub model they were taken from. This package locates those files,
fetches them on request, and assembles the BERT module tree by key name.
"""
from __future__ import annotations
