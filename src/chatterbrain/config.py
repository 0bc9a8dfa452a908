"""Configuration helpers for chatterbrain."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional, cast

import yaml

from .utils.io import load_yaml_or_json

DEFAULT_MARKOV_ORDER = 3
DEFAULT_MAX_BLEND_CHANCE = 0.75


def validate_markov_order(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"markov_order must be an integer, got {value!r}"
        raise ValueError(msg)
    if value < 1:
        msg = f"markov_order must be at least 1, got {value}"
        raise ValueError(msg)
    return value


def validate_blend_chance(value: float) -> float:
    if not 0.0 <= value <= 1.0:
        msg = f"max_blend_chance must lie in [0, 1], got {value}"
        raise ValueError(msg)
    return value


@dataclass
class BrainConfig:
    """Parameters of a single brain."""

    markov_order: int = DEFAULT_MARKOV_ORDER
    max_blend_chance: float = DEFAULT_MAX_BLEND_CHANCE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        validate_markov_order(self.markov_order)
        validate_blend_chance(self.max_blend_chance)


@dataclass
class LexiconConfig:
    """Where the static word lists live."""

    directory: Optional[Path] = None
    bad_keywords_file: str = "bad_keywords.txt"
    greetings_file: str = "greetings.txt"
    corrections_file: str = "corrections.txt"
    swaps_file: str = "swaps.txt"

    def __post_init__(self) -> None:
        if self.directory is not None:
            self.directory = Path(self.directory)


@dataclass
class ResponseConfig:
    """Configuration for replying to messages."""

    candidates: int = 5
    blend_with_parent: bool = True
    correct_spelling: bool = True
    max_reply_length: int = 300
    auto_learn: bool = True

    def __post_init__(self) -> None:
        if self.candidates < 1:
            msg = f"candidates must be positive, got {self.candidates}"
            raise ValueError(msg)


@dataclass
class TrainerConfig:
    """Configuration for learning from corpus files."""

    correct_spelling: bool = True
    report_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.report_path is not None:
            self.report_path = Path(self.report_path)


@dataclass
class ChatterConfig:
    """Top-level configuration."""

    brain: BrainConfig = field(default_factory=BrainConfig)
    lexicon: LexiconConfig = field(default_factory=LexiconConfig)
    response: ResponseConfig = field(default_factory=ResponseConfig)
    trainer: TrainerConfig = field(default_factory=TrainerConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatterConfig:
        return cls(
            brain=BrainConfig(**data.get("brain", {})),
            lexicon=LexiconConfig(**data.get("lexicon", {})),
            response=ResponseConfig(**data.get("response", {})),
            trainer=TrainerConfig(**data.get("trainer", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        for section in payload.values():
            for key, value in section.items():
                if isinstance(value, Path):
                    section[key] = str(value)
        return payload

    def save(self, path: Path) -> None:
        """Write the configuration as YAML."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf8") as handle:
            yaml.safe_dump(self.to_dict(), handle, sort_keys=False)


def _merge_dict(base: dict[str, Any], overrides: Iterable[dict[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for override in overrides:
        for key, value in override.items():
            existing = result.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                nested = _merge_dict(cast(dict[str, Any], existing), [value])
                result[key] = nested
            else:
                result[key] = value
    return result


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Iterable[dict[str, Any]]] = None,
) -> ChatterConfig:
    """Load configuration from disk and merge overrides."""

    overrides = list(overrides or [])
    if path is None:
        base: dict[str, Any] = {}
    else:
        base = load_yaml_or_json(Path(path))

    merged = _merge_dict(base, overrides)
    return ChatterConfig.from_dict(merged)
