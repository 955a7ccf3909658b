"""Deterministic helpers for audit output I/O."""

from .io import compute_file_hash, dumps_deterministic, write_json_deterministic

__all__ = [
    "compute_file_hash",
    "dumps_deterministic",
    "write_json_deterministic",
]
