"""Utility helpers shared across the chatterbrain package."""

from .io import iter_entries, load_yaml_or_json, save_json
from .random import deterministic_hash, ensure_rng
from .text import END_OF_LINE, detokenize, is_url, tokenize

__all__ = [
    "END_OF_LINE",
    "deterministic_hash",
    "detokenize",
    "ensure_rng",
    "is_url",
    "iter_entries",
    "load_yaml_or_json",
    "save_json",
    "tokenize",
]
