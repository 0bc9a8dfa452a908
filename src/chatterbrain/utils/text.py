"""Text processing helpers: splitting lines into tokens and joining them back."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final, List, Optional

# Marks the natural end of a learned line. It never appears in generated output.
END_OF_LINE: Final = None

_WORD_RE = re.compile(r"\w+(?:://\S+|[\w\-'’]*)|[`~!@#$%^&*()+=\-\[\]{};:\"“”,.<>/\\?|]+")

_SPACED_SYMBOLS = frozenset("$#*&")


def tokenize(text: str, include_end: bool = False) -> List[Optional[str]]:
    """Split ``text`` into lowercase word and punctuation tokens.

    Words may carry an embedded URL (``see http://example.com``) and runs of
    punctuation such as ``?!`` stay together. When ``include_end`` is true the
    :data:`END_OF_LINE` sentinel is appended.
    """
    if text is None:
        raise TypeError("text must be a string, not None")
    tokens: List[Optional[str]] = _WORD_RE.findall(text.lower())
    if include_end:
        tokens.append(END_OF_LINE)
    return tokens


def is_url(token: str) -> bool:
    """Return ``True`` for tokens that look like URLs."""
    return "://" in token


def detokenize(words: Iterable[str]) -> str:
    """Join tokens into display text, spacing words and punctuation naturally."""
    parts: List[str] = []
    in_quote = False
    space_next = False
    parens = 0

    for word in words:
        first = word[0]
        if first == '"':
            # a plain quote opens or closes depending on what came before
            if not in_quote:
                parts.append(" ")
                space_next = True
            in_quote = not in_quote
        elif first == "“":
            parts.append(" ")
            space_next = True
        elif first == "(":
            parts.append(" ")
            space_next = True
            parens += 1
        elif first == ")":
            if parens:
                parens -= 1
        elif first in _SPACED_SYMBOLS:
            parts.append(" ")
            space_next = True
        elif first == "/":
            space_next = True
        elif space_next:
            space_next = False
        elif (first.isalnum() or word == "--") and parts:
            parts.append(" ")
        parts.append(word)

    return "".join(parts).lstrip(" ")


__all__ = ["END_OF_LINE", "detokenize", "is_url", "tokenize"]
