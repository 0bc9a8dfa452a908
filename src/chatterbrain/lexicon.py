"""Static word lists shared by every brain: bad keywords, greetings, spellings, swaps."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional

from .config import LexiconConfig
from .logging import get_logger
from .utils.io import iter_entries
from .utils.text import is_url

LOGGER = get_logger(__name__)


def load_keyword_set(lines: Iterable[str]) -> frozenset[str]:
    """Build a lowercase keyword set from one keyword per line."""
    return frozenset(line.strip().lower() for line in iter_entries(lines) if line.strip())


def load_dictionary(lines: Iterable[str], bidirectional: bool = False) -> Dict[str, str]:
    """Build a ``key -> value`` table from whitespace separated pairs.

    With ``bidirectional`` every pair is also registered in reverse, except
    for keys prefixed with ``*`` which only map one way.
    """
    table: Dict[str, str] = {}
    for line in iter_entries(lines):
        bits = line.lower().split(None, 1)
        if len(bits) != 2:
            continue
        key, value = bits[0], bits[1].strip()
        if bidirectional:
            if key.startswith("*"):
                key = key[1:].strip()
            else:
                table[value] = key
        table[key] = value
    return table


def _read_lines(path: Path) -> List[str]:
    if not path.exists():
        LOGGER.debug("Lexicon file %s not found; using an empty table", path)
        return []
    with path.open("r", encoding="utf-8") as stream:
        return stream.readlines()


@dataclass(frozen=True)
class Lexicon:
    """Read-only lookup tables consulted while learning and responding."""

    bad_keywords: frozenset[str] = field(default_factory=frozenset)
    greetings: frozenset[str] = field(default_factory=frozenset)
    spellings: Mapping[str, str] = field(default_factory=dict)
    swaps: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bad_keywords", frozenset(self.bad_keywords))
        object.__setattr__(self, "greetings", frozenset(self.greetings))
        object.__setattr__(self, "spellings", MappingProxyType(dict(self.spellings)))
        object.__setattr__(self, "swaps", MappingProxyType(dict(self.swaps)))

    @classmethod
    def from_directory(cls, directory: Path, config: Optional[LexiconConfig] = None) -> Lexicon:
        """Load the four tables from ``directory``; missing files yield empty tables."""
        config = config or LexiconConfig()
        directory = Path(directory)
        lexicon = cls(
            bad_keywords=load_keyword_set(_read_lines(directory / config.bad_keywords_file)),
            greetings=load_keyword_set(_read_lines(directory / config.greetings_file)),
            spellings=load_dictionary(_read_lines(directory / config.corrections_file)),
            swaps=load_dictionary(_read_lines(directory / config.swaps_file), bidirectional=True),
        )
        LOGGER.info(
            "Loaded lexicon from %s (%d bad keywords, %d greetings, %d spellings, %d swaps)",
            directory,
            len(lexicon.bad_keywords),
            len(lexicon.greetings),
            len(lexicon.spellings),
            len(lexicon.swaps),
        )
        return lexicon

    def is_bad_keyword(self, word: str) -> bool:
        """Return ``True`` if ``word`` should never anchor an utterance."""
        return not word[0].isalnum() or word in self.bad_keywords or is_url(word)

    def is_greeting(self, word: str) -> bool:
        return word in self.greetings

    def correct_spelling(self, words: MutableSequence[Optional[str]]) -> None:
        """Replace misspelled words in place. Tokens not starting with a letter are kept."""
        for index, word in enumerate(words):
            if word is not None and word[0].isalpha():
                correction = self.spellings.get(word)
                if correction is not None:
                    words[index] = correction

    def swap_for(self, word: str) -> Optional[str]:
        return self.swaps.get(word)

    def corrected(self, words: Sequence[str]) -> List[str]:
        """Return a spelling-corrected copy of ``words``."""
        result = list(words)
        self.correct_spelling(result)
        return result


__all__ = ["Lexicon", "load_dictionary", "load_keyword_set"]
