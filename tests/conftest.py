from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from chatterbrain.brain import Brain
from chatterbrain.config import ChatterConfig
from chatterbrain.lexicon import Lexicon

SENTENCE = "the quick brown fox jumps"


@pytest.fixture
def config() -> ChatterConfig:
    return ChatterConfig()


@pytest.fixture
def lexicon() -> Lexicon:
    return Lexicon(
        bad_keywords={"the", "a"},
        greetings={"hello", "hi"},
        spellings={"teh": "the", "qiuck": "quick"},
        swaps={"you": "me", "me": "you"},
    )


@pytest.fixture
def fox_brain() -> Brain:
    brain = Brain(rng=0)
    brain.learn_line(SENTENCE)
    return brain


@pytest.fixture
def corpus_file(tmp_path: Path) -> Iterator[Path]:
    path = tmp_path / "corpus.txt"
    path.write_text(f"# sample corpus\n{SENTENCE}\n\nhi\n", encoding="utf-8")
    yield path
