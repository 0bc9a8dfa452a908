"""I/O helpers for reading and writing structured data."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Dict

import yaml


def iter_entries(lines: Iterable[str]) -> Iterator[str]:
    """Yield non-empty lines that are not ``#`` comments, without line endings."""
    for line in lines:
        line = line.rstrip("\r\n")
        if not line or line.startswith("#"):
            continue
        yield line


def save_json(path: Path, data: Any, *, indent: int = 2) -> None:
    """Write ``data`` to ``path`` as JSON with UTF-8 encoding."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        json.dump(data, stream, indent=indent, ensure_ascii=False)
        stream.write("\n")


def load_yaml_or_json(path: Path) -> Dict[str, Any]:
    """Load a mapping from YAML or JSON depending on the file suffix."""
    with path.open("r", encoding="utf-8") as stream:
        if path.suffix.lower() in {".yaml", ".yml"}:
            loaded = yaml.safe_load(stream)
        else:
            loaded = json.load(stream)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = f"Expected mapping at root of {path.name}"
        raise TypeError(msg)
    return loaded
