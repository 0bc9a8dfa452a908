# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

"""Learning word statistics from text and babbling them back.

A :class:`Brain` reads every learned line twice: forwards into one
:class:`~chatterbrain.markov.MarkovModel` and backwards into another. To
reply, it picks a keyword from the input, grows a sentence from the keyword in
both directions and joins the halves.

Brains can be stacked. A child brain (for example one per conversation) keeps a
read-only reference to a parent and, when blending, defers to the parent's
statistics with a probability that grows with how much more the parent knows.
The parent must outlive its children and is never modified by them.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from .config import (
    DEFAULT_MARKOV_ORDER,
    DEFAULT_MAX_BLEND_CHANCE,
    BrainConfig,
    validate_blend_chance,
    validate_markov_order,
)
from .lexicon import Lexicon
from .logging import get_logger
from .markov import MarkovModel, MarkovNode
from .utils.io import iter_entries
from .utils.random import ensure_rng
from .utils.text import detokenize, tokenize

LOGGER = get_logger(__name__)

GENERATION_ATTEMPTS = 5
RANDOM_UTTERANCE_ATTEMPTS = 10


@dataclass(frozen=True)
class Utterance:
    """A generated sentence together with the keyword it grew from."""

    keyword: str
    words: Tuple[str, ...]
    average_word_probability: float
    text: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))
        object.__setattr__(self, "text", detokenize(self.words))

    def __str__(self) -> str:
        return f"({self.keyword},{self.average_word_probability}) {self.text}"


ResponseScorer = Callable[[Utterance], float]


@dataclass(frozen=True)
class BrainStats:
    total_root_count: int
    forward_roots: int
    backward_roots: int
    forward_nodes: int
    backward_nodes: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_root_count": self.total_root_count,
            "forward_roots": self.forward_roots,
            "backward_roots": self.backward_roots,
            "forward_nodes": self.forward_nodes,
            "backward_nodes": self.backward_nodes,
        }


class Brain:
    """Bidirectional Markov language model with optional parent blending."""

    def __init__(
        self,
        parent: Optional[Brain] = None,
        *,
        lexicon: Optional[Lexicon] = None,
        markov_order: int = DEFAULT_MARKOV_ORDER,
        max_blend_chance: float = DEFAULT_MAX_BLEND_CHANCE,
        rng: int | np.random.Generator | None = None,
    ) -> None:
        self._parent = parent
        if lexicon is None:
            lexicon = parent.lexicon if parent is not None else Lexicon()
        self.lexicon = lexicon
        self.markov_order = markov_order
        self.max_blend_chance = max_blend_chance
        self.forward = MarkovModel()
        self.backward = MarkovModel()
        self.total_root_count = 0
        self._rng = ensure_rng(rng)
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: BrainConfig,
        parent: Optional[Brain] = None,
        lexicon: Optional[Lexicon] = None,
    ) -> Brain:
        return cls(
            parent,
            lexicon=lexicon,
            markov_order=config.markov_order,
            max_blend_chance=config.max_blend_chance,
            rng=config.seed,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def parent(self) -> Optional[Brain]:
        return self._parent

    @property
    def markov_order(self) -> int:
        """Maximum number of words in a chain rooted at any single word."""
        return self._markov_order

    @markov_order.setter
    def markov_order(self, value: int) -> None:
        self._markov_order = validate_markov_order(value)

    @property
    def max_blend_chance(self) -> float:
        """Ceiling on the probability of using the parent's statistics instead of ours.

        The actual chance is the parent's share of the combined root counts,
        capped at this value.
        """
        return self._max_blend_chance

    @max_blend_chance.setter
    def max_blend_chance(self, value: float) -> None:
        self._max_blend_chance = validate_blend_chance(value)

    @property
    def is_empty(self) -> bool:
        return self.total_root_count == 0

    def stats(self) -> BrainStats:
        return BrainStats(
            total_root_count=self.total_root_count,
            forward_roots=len(self.forward),
            backward_roots=len(self.backward),
            forward_nodes=self.forward.node_count(),
            backward_nodes=self.backward.node_count(),
        )

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------
    def clear(self) -> None:
        with self._lock:
            self.forward.clear()
            self.backward.clear()
            self.total_root_count = 0

    def learn_line(self, line: str, correct_spelling: bool = False) -> bool:
        """Learn the word sequences in ``line``. Returns whether anything was learned."""
        if line is None:
            raise TypeError("line must be a string, not None")
        if not line:
            return False

        words = tokenize(line, include_end=True)
        # lines no longer than the chain depth would only teach trivial chains
        if len(words) <= self._markov_order:
            LOGGER.debug("Skipping short line %r", line)
            return False

        with self._lock:
            if correct_spelling:
                self.lexicon.correct_spelling(words)

            for index in range(len(words) - 1):
                self._learn_chain(self.forward, words, index)

            words[:-1] = words[-2::-1]
            for index in range(len(words) - 1):
                self._learn_chain(self.backward, words, index)
        return True

    def learn_lines(self, lines: Iterable[str], correct_spelling: bool = False) -> int:
        """Learn every non-comment line and return how many were learned."""
        learned = 0
        with self._lock:
            for line in iter_entries(lines):
                if self.learn_line(line, correct_spelling):
                    learned += 1
        return learned

    def _learn_chain(self, model: MarkovModel, words: Sequence[Optional[str]], index: int) -> None:
        model.learn(words, index, self._markov_order)
        self.total_root_count += 1

    def split_words(self, text: str, correct_spelling: bool = False) -> List[str]:
        """Tokenize ``text`` the way learning does, without the end-of-line sentinel."""
        words: List[str] = tokenize(text)  # type: ignore[assignment]
        if correct_spelling:
            words = self.lexicon.corrected(words)
        return words

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    def _model(self, forward: bool) -> MarkovModel:
        return self.forward if forward else self.backward

    def _lineage(self, blend_with_parent: bool) -> Iterable[Brain]:
        brain: Optional[Brain] = self
        while brain is not None:
            yield brain
            if not blend_with_parent:
                break
            brain = brain._parent

    def word_probability(self, word: str, blend_with_parent: bool = False) -> float:
        """Return how often ``word`` occurs as a root relative to all roots learned.

        This is a relative weight for comparing candidates, not a calibrated
        probability.
        """
        count = 0
        total = 0
        for brain in self._lineage(blend_with_parent):
            count += brain.forward.root_count(word) + brain.backward.root_count(word)
            total += brain.total_root_count
        return count / total if total else 0.0

    def usage_count(self, word: str, blend_with_parent: bool = False) -> int:
        """Return how often ``word`` has been used as a root, in either direction."""
        return sum(
            max(brain.forward.root_count(word), brain.backward.root_count(word))
            for brain in self._lineage(blend_with_parent)
        )

    def _blend_chance(self, blend_with_parent: bool) -> float:
        parent = self._parent
        if not blend_with_parent or parent is None:
            return 0.0
        combined = parent.total_root_count + self.total_root_count
        if combined == 0:
            return 0.0
        return min(self._max_blend_chance, parent.total_root_count / combined)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def _coinflip(self) -> bool:
        return bool(self._rng.integers(2))

    def _choose_node(
        self, keyword: str, forward: bool, blend_with_parent: bool, blend_chance: float
    ) -> Tuple[Optional[MarkovNode], Optional[Brain]]:
        """Find the root node for ``keyword``, possibly in an ancestor.

        Returns the node together with the brain that supplied it, since word
        probabilities must be looked up in that same brain.
        """
        node: Optional[MarkovNode] = None
        brain_used: Optional[Brain] = None
        brain: Optional[Brain] = self
        while brain is not None:
            candidate = brain._model(forward).get(keyword)
            if candidate is not None:
                node, brain_used = candidate, brain
            if not blend_with_parent or (candidate is not None and self._rng.random() >= blend_chance):
                break
            brain = brain._parent
        return node, brain_used

    @staticmethod
    def _find_continuation(
        words: Sequence[str], brain: Optional[Brain], search_ancestors: bool, forward: bool
    ) -> Tuple[Optional[Brain], Optional[MarkovNode]]:
        """Find a chain matching the tail of ``words``.

        With words ``a b c d e`` and order 3 the chain ``d -> e -> ?`` is looked up,
        so generation can continue past the end of the chain it started on.
        """
        node: Optional[MarkovNode] = None
        while brain is not None:
            index = min(len(words) - 1, max(0, len(words) - brain.markov_order + 1))
            node = brain._model(forward).get(words[index])
            for word in words[index + 1 :]:
                if node is None:
                    break
                node = node.get_child(word)
            if node is not None or not search_ancestors:
                break
            brain = brain._parent
        return brain, node

    def _add_words(
        self,
        words: List[str],
        node_brain: Brain,
        node: MarkovNode,
        forward: bool,
        blend_with_parent: bool,
        blend_chance: float,
    ) -> float:
        """Extend ``words`` starting from ``node``. Returns the summed word probabilities."""
        probability_sum = 0.0
        current: Optional[MarkovNode] = node
        # a second pass first tries to continue from the words already generated,
        # falling back to the keyword's own node if nothing matches
        try_to_match = len(words) > 1
        while True:
            next_node = None if try_to_match or current is None else current.random_child(self._rng)
            if next_node is None:
                found_brain, found = self._find_continuation(words, self, blend_with_parent, forward)
                while (
                    found is not None
                    and found_brain is not None
                    and found_brain._parent is not None
                    and blend_with_parent
                    and self._rng.random() < blend_chance
                ):
                    blend_brain, blend_node = self._find_continuation(
                        words, found_brain._parent, blend_with_parent, forward
                    )
                    if blend_node is None:
                        break
                    found, found_brain = blend_node, blend_brain

                if found is not None or not try_to_match:
                    current = found
                    if found_brain is not None:
                        node_brain = found_brain

                if current is not None:
                    next_node = current.random_child(self._rng)
                if next_node is None:
                    break

            if next_node.word is None:
                break

            if not self.lexicon.is_bad_keyword(next_node.word):
                # summed rather than multiplied so long replies are not penalised
                probability_sum += node_brain.word_probability(next_node.word, blend_with_parent)

            words.append(next_node.word)
            current = next_node
            try_to_match = False
        return probability_sum

    def generate_utterance(self, keyword: str, blend_with_parent: bool = True) -> Optional[Utterance]:
        """Grow a sentence around ``keyword``. Returns ``None`` if fewer than two words result."""
        with self._lock:
            if self._parent is None:
                blend_with_parent = False
            blend_chance = self._blend_chance(blend_with_parent)
            words: List[str] = []
            probability_sum = 0.0

            # the direction generated first has the stronger influence on the sentence
            forward_first = self._coinflip()

            node, node_brain = self._choose_node(keyword, forward_first, blend_with_parent, blend_chance)
            if node is not None and node_brain is not None:
                words.append(keyword)
                probability_sum += self._add_words(
                    words, node_brain, node, forward_first, blend_with_parent, blend_chance
                )
                words.reverse()

            node, node_brain = self._choose_node(keyword, not forward_first, blend_with_parent, blend_chance)
            if node is not None and node_brain is not None:
                if not words:
                    words.append(keyword)
                probability_sum += self._add_words(
                    words, node_brain, node, not forward_first, blend_with_parent, blend_chance
                )
            if forward_first:
                words.reverse()

        if len(words) <= 1:
            return None
        utterance = Utterance(keyword, tuple(words), probability_sum / (len(words) - 1))
        LOGGER.debug("Generated %s", utterance)
        return utterance

    # ------------------------------------------------------------------
    # Responding
    # ------------------------------------------------------------------
    def _response_word(self, word: str) -> Optional[str]:
        if self.lexicon.is_bad_keyword(word):
            return None
        swap = self.lexicon.swap_for(word)
        if swap is not None and not self._coinflip():
            word = swap
        return word

    def _response_keywords(self, words: Sequence[str]) -> List[str]:
        keywords = []
        for word in words:
            keyword = self._response_word(word)
            if keyword is not None:
                keywords.append(keyword)
        return keywords

    def _pick_rare(self, candidates: Sequence[str], counts: Sequence[int], start: int) -> Tuple[str, int]:
        """Walk from ``start`` choosing a candidate weighted towards rarer words.

        A word used ``c`` times weighs ``max(counts) - c + 1``, so very common words
        are unlikely but every known word has a chance.
        """
        max_count = max(counts)
        remaining = int(self._rng.integers(sum(counts)))
        index = start
        while True:
            chosen = candidates[index]
            remaining -= max_count - counts[index] + 1
            index = (index + 1) % len(candidates)
            if remaining <= 0:
                return chosen, index

    def _pick_response(self, keywords: Sequence[str], counts: Sequence[int], blend_with_parent: bool) -> Optional[Utterance]:
        for word in keywords:
            if self.lexicon.is_greeting(word):
                utterance = self.generate_utterance(word, blend_with_parent)
                if utterance is not None:
                    return utterance

        start = int(self._rng.integers(len(keywords)))
        keyword, _ = self._pick_rare(keywords, counts, start)
        return self.generate_utterance(keyword, blend_with_parent)

    def get_response(
        self,
        text: str,
        count: int = 1,
        blend_with_parent: bool = True,
        correct_spelling: bool = False,
        scorer: Optional[ResponseScorer] = None,
    ) -> Optional[str]:
        """Reply to ``text``.

        Up to ``count`` candidates are generated (each with a few attempts). With
        a ``scorer`` the best candidate scoring above zero wins; without one the
        first candidate is returned. ``None`` means there is nothing to say.
        """
        if text is None:
            raise TypeError("text must be a string, not None")
        words = self.split_words(text, correct_spelling)
        if not words:
            return None

        with self._lock:
            keywords = self._response_keywords(words)
            if not keywords:
                return None

            counts = [self.usage_count(keyword, blend_with_parent) for keyword in keywords]
            if not any(counts):
                LOGGER.debug("No known keywords in %r", text)
                return None

            responses: List[Utterance] = []
            for _ in range(count):
                response = None
                for _attempt in range(GENERATION_ATTEMPTS):
                    response = self._pick_response(keywords, counts, blend_with_parent)
                    if response is not None:
                        break
                if response is None:
                    if not responses:
                        break
                    continue
                if scorer is None:
                    return response.text
                responses.append(response)

        if not responses or scorer is None:
            return None
        scored = [(scorer(response), response) for response in responses]
        positive = [item for item in scored if item[0] > 0]
        if not positive:
            return None
        best = max(positive, key=lambda item: item[0])
        return best[1].text

    def random_utterance(self, blend_with_parent: bool = True) -> Optional[Utterance]:
        """Generate an utterance around a rare-ish word this brain knows."""
        with self._lock:
            if len(self.forward) == 0:
                return self._parent.random_utterance(blend_with_parent) if self._parent is not None else None

            candidates = [node for node in self.forward.roots() if not self.lexicon.is_bad_keyword(node.word)]
            if not candidates:
                if blend_with_parent and self._parent is not None:
                    return self._parent.random_utterance(blend_with_parent)
                return None

            self._rng.shuffle(candidates)
            words = [node.word for node in candidates]
            counts = [node.count for node in candidates]
            index = int(self._rng.integers(len(candidates)))
            for _ in range(RANDOM_UTTERANCE_ATTEMPTS):
                keyword, index = self._pick_rare(words, counts, index)
                utterance = self.generate_utterance(keyword, blend_with_parent)
                if utterance is not None:
                    return utterance
        return None

    def get_random_utterance(self, blend_with_parent: bool = True) -> Optional[str]:
        utterance = self.random_utterance(blend_with_parent)
        return utterance.text if utterance is not None else None


__all__ = ["Brain", "BrainStats", "ResponseScorer", "Utterance"]
