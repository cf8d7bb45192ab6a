"""Bertinfer: BERT-family sequence classification from safetensors bundles.

A classifier checkpoint is just a flat bag of named tensors. Bertinfer maps
that bag (without copying when it can), rebuilds the encoder module tree from
the key names, and runs a single forward pass to rank class labels.

Core workflows:
- Loading: memory-map a safetensors bundle and view tensors as float32
- Assembly: rebuild embeddings, encoder layers, pooler and head by key prefix
- Inference: tokenize a prompt, run the forward pass, rank labelled classes
"""
