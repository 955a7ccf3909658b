#!/usr/bin/env python3
"""
Deterministic I/O utilities.

Audit outputs are written with sorted keys and fixed indentation so two
runs over the same trace produce byte-identical files.

Dependencies:
    - hashlib (stdlib)
    - json (stdlib)
"""

import hashlib
import json
from pathlib import Path
from typing import Any


def dumps_deterministic(data: Any) -> str:
    """Serialize to JSON with sorted keys and stable indentation."""
    return json.dumps(
        data,
        sort_keys=True,
        indent=2,  # Indent for readability
        ensure_ascii=False
    )


def write_json_deterministic(data: Any, output_path: Path):
    """
    Write JSON file with deterministic formatting.
    
    Args:
        data: Data to serialize
        output_path: Output file path
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(dumps_deterministic(data))
        f.write("\n")


def compute_file_hash(file_path: Path) -> str:
    """
    Compute SHA-256 hash of file contents.

    Args:
        file_path: Path to file

    Returns:
        Hash string prefixed with "sha256:"
    """
    if not file_path.exists():
        return "sha256:" + "0" * 64

    h = hashlib.sha256()

    with open(file_path, "rb") as f:
        # Read in chunks for large traces
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)

    return f"sha256:{h.hexdigest()}"
