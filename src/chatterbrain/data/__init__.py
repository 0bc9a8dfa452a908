"""Bundled word lists for the chatterbrain package."""

from __future__ import annotations

from importlib import resources
from typing import List

from ..config import LexiconConfig
from ..lexicon import Lexicon, load_dictionary, load_keyword_set


def _read(name: str) -> List[str]:
    resource = resources.files(__package__).joinpath(name)
    if not resource.is_file():
        return []
    with resource.open("r", encoding="utf-8") as stream:
        return stream.readlines()


def load_default_lexicon(config: LexiconConfig | None = None) -> Lexicon:
    """Return the lexicon built from the bundled word lists."""
    config = config or LexiconConfig()
    return Lexicon(
        bad_keywords=load_keyword_set(_read(config.bad_keywords_file)),
        greetings=load_keyword_set(_read(config.greetings_file)),
        spellings=load_dictionary(_read(config.corrections_file)),
        swaps=load_dictionary(_read(config.swaps_file), bidirectional=True),
    )


def load_lexicon(config: LexiconConfig | None = None) -> Lexicon:
    """Load the lexicon from ``config.directory``, or the bundled lists when unset."""
    config = config or LexiconConfig()
    if config.directory is None:
        return load_default_lexicon(config)
    return Lexicon.from_directory(config.directory, config)


__all__ = ["load_default_lexicon", "load_lexicon"]
