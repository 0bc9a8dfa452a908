# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Variable-depth Markov tries.

A :class:`MarkovModel` maps each root word to a :class:`MarkovNode`. A node
records how often a word followed its parent's context and keeps its children
sorted by word, so lookups are binary searches and weighted sampling is a
single scan driven by the cached ``total_child_count``.

Learning a line adds one chain per word position::

    the cat sat on the mat   (order 3)

    the -> cat -> sat
    cat -> sat -> on
    sat -> on  -> the
    ...
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator, Sequence
from typing import Dict, List, Optional

import numpy as np


def _sort_key(word: Optional[str]) -> str:
    # the end-of-line sentinel sorts before every real token
    return "" if word is None else word


class MarkovNode:
    """A word observed ``count`` times within its parent's context."""

    __slots__ = ("word", "count", "total_child_count", "_table", "_rand_index")

    def __init__(self, word: Optional[str]) -> None:
        self.word = word
        self.count = 0
        self.total_child_count = 0
        # (sorted keys, children) replaced as a whole so readers never see them disagree
        self._table: tuple[List[str], List[MarkovNode]] = ([], [])
        self._rand_index = 0

    @property
    def children(self) -> tuple[MarkovNode, ...]:
        return tuple(self._table[1])

    def __len__(self) -> int:
        return len(self._table[1])

    def __iter__(self) -> Iterator[MarkovNode]:
        return iter(self._table[1])

    def __repr__(self) -> str:
        word = "END" if self.word is None else self.word
        return f"MarkovNode({word!r}, count={self.count}, children={len(self)})"

    def add_child(self, word: Optional[str]) -> MarkovNode:
        """Record one more occurrence of ``word`` after this node and return its node."""
        key = _sort_key(word)
        keys, children = self._table
        index = bisect_left(keys, key)
        if index < len(keys) and keys[index] == key:
            child = children[index]
        else:
            child = MarkovNode(word)
            self._table = (
                keys[:index] + [key] + keys[index:],
                children[:index] + [child] + children[index:],
            )
        child.count += 1
        self.total_child_count += 1
        return child

    def get_child(self, word: Optional[str]) -> Optional[MarkovNode]:
        key = _sort_key(word)
        keys, children = self._table
        index = bisect_left(keys, key)
        if index < len(keys) and keys[index] == key:
            return children[index]
        return None

    def random_child(self, rng: np.random.Generator) -> Optional[MarkovNode]:
        """Pick a child with probability proportional to its count.

        The scan starts after the child picked last time, so ties between equally
        weighted children do not always resolve to the first one.
        """
        children = self._table[1]
        if not children:
            return None
        remaining = int(rng.integers(1, self.total_child_count + 1))
        index = self._rand_index
        while True:
            index += 1
            if index >= len(children):
                index = 0
            remaining -= children[index].count
            if remaining <= 0:
                break
        self._rand_index = index
        return children[index]


class MarkovModel:
    """Root word to trie mapping for one direction of reading."""

    def __init__(self) -> None:
        self._roots: Dict[str, MarkovNode] = {}

    def __len__(self) -> int:
        return len(self._roots)

    def __contains__(self, word: object) -> bool:
        return word in self._roots

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._roots))

    def get(self, word: str) -> Optional[MarkovNode]:
        return self._roots.get(word)

    def roots(self) -> List[MarkovNode]:
        return list(self._roots.values())

    def root_count(self, word: str) -> int:
        node = self._roots.get(word)
        return node.count if node is not None else 0

    def add_root(self, word: str) -> MarkovNode:
        node = self._roots.get(word)
        if node is None:
            node = self._roots[word] = MarkovNode(word)
        node.count += 1
        return node

    def learn(self, words: Sequence[Optional[str]], index: int, order: int) -> MarkovNode:
        """Add the chain starting at ``words[index]``, at most ``order`` words deep."""
        root = node = self.add_root(words[index])
        for position in range(index + 1, min(len(words), index + order)):
            node = node.add_child(words[position])
        return root

    def node_count(self) -> int:
        """Return the number of nodes in every trie, roots included."""
        total = 0
        stack = list(self._roots.values())
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node)
        return total

    def clear(self) -> None:
        self._roots.clear()


__all__ = ["MarkovModel", "MarkovNode"]
