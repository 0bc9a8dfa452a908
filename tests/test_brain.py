# --- TRADEMARK NOTICE ---
# Lightcap (EUIPO. Reg. 019172085) — Contact: alpay@lightcap.ai
# Do not remove this notice from source distributions.

from __future__ import annotations

import threading

import pytest

from chatterbrain.brain import Brain, Utterance
from chatterbrain.lexicon import Lexicon
from chatterbrain.markov import MarkovNode

SENTENCE = "the quick brown fox jumps"


def _walk(node: MarkovNode):
    yield node
    for child in node.children:
        yield from _walk(child)


def _assert_invariants(brain: Brain) -> None:
    for model in (brain.forward, brain.backward):
        for root in model.roots():
            for node in _walk(root):
                children = node.children
                assert node.total_child_count == sum(child.count for child in children)
                keys = ["" if child.word is None else child.word for child in children]
                assert keys == sorted(keys)


def test_learning_counts_two_roots_per_word() -> None:
    brain = Brain()
    assert brain.is_empty
    assert brain.learn_line("the cat sat on the mat")
    assert brain.total_root_count == 12
    brain.learn_line("a b c d e f g")
    assert brain.total_root_count == 12 + 14


def test_short_lines_are_not_learned() -> None:
    brain = Brain(markov_order=3)
    assert not brain.learn_line("hi there")
    assert brain.is_empty
    assert brain.learn_line("one two three")
    assert brain.total_root_count == 6


def test_empty_line_is_a_no_op_and_none_is_rejected() -> None:
    brain = Brain()
    assert not brain.learn_line("")
    assert brain.is_empty
    with pytest.raises(TypeError):
        brain.learn_line(None)  # type: ignore[arg-type]


def test_cat_and_dog_scenario() -> None:
    brain = Brain(markov_order=3)
    brain.learn_line("the cat sat on the mat")
    brain.learn_line("the dog sat on the rug")

    the = brain.forward.get("the")
    assert the is not None
    counts = {child.word: child.count for child in the.children}
    assert counts == {"cat": 1, "dog": 1, "mat": 1, "rug": 1}

    sat = brain.forward.get("sat")
    on = sat.get_child("on")
    assert on is not None and on.count == 2
    assert on.get_child("the").count == 2
    _assert_invariants(brain)


def test_backward_model_reads_lines_in_reverse() -> None:
    brain = Brain()
    brain.learn_line("the cat sat on the mat")
    mat = brain.backward.get("mat")
    assert [child.word for child in mat.children] == ["the"]
    cat = brain.backward.get("cat")
    the = cat.get_child("the")
    assert [child.word for child in the.children] == [None]


def test_learning_twice_doubles_counts() -> None:
    brain = Brain()
    brain.learn_line("the cat sat on the mat")
    once = {child.word: child.count for child in brain.forward.get("the").children}
    brain.learn_line("the cat sat on the mat")
    twice = {child.word: child.count for child in brain.forward.get("the").children}
    assert twice == {word: count * 2 for word, count in once.items()}
    assert len(brain.forward.get("the").children) == len(once)
    _assert_invariants(brain)


def test_spelling_correction_while_learning(lexicon: Lexicon) -> None:
    brain = Brain(lexicon=lexicon)
    brain.learn_line("teh qiuck dog barks", correct_spelling=True)
    assert "the" in brain.forward
    assert "teh" not in brain.forward
    assert "quick" in brain.forward
    plain = Brain(lexicon=lexicon)
    plain.learn_line("teh qiuck dog barks")
    assert "teh" in plain.forward


def test_learn_lines_skips_comments() -> None:
    brain = Brain()
    learned = brain.learn_lines(["# a comment line here", "", "the cat sat down", "too short"])
    assert learned == 1
    assert "comment" not in brain.forward


@pytest.mark.parametrize("order", [0, -1, 2.5, "3", True])
def test_invalid_markov_order_is_rejected(order: object) -> None:
    with pytest.raises(ValueError):
        Brain(markov_order=order)
    brain = Brain()
    with pytest.raises(ValueError):
        brain.markov_order = order
    assert brain.markov_order == 3


@pytest.mark.parametrize("chance", [-0.1, 1.5])
def test_invalid_blend_chance_is_rejected(chance: float) -> None:
    brain = Brain()
    with pytest.raises(ValueError):
        brain.max_blend_chance = chance
    assert brain.max_blend_chance == 0.75


def test_blend_chance_bounds_are_accepted() -> None:
    brain = Brain(max_blend_chance=0.0)
    brain.max_blend_chance = 1.0
    assert brain.max_blend_chance == 1.0


@pytest.mark.parametrize("seed", range(10))
def test_generation_reassembles_a_single_sentence(seed: int) -> None:
    brain = Brain(rng=seed)
    brain.learn_line(SENTENCE)
    utterance = brain.generate_utterance("quick")
    assert utterance is not None
    assert utterance.keyword == "quick"
    assert utterance.text == SENTENCE
    assert utterance.words == tuple(SENTENCE.split())
    assert utterance.average_word_probability == pytest.approx(0.2)


def test_generation_is_reproducible_with_a_seed() -> None:
    lines = [
        "the cat sat on the mat",
        "the dog sat on the rug",
        "a cat and a dog sat together on the porch",
        "my dog likes the rug more than the mat",
    ]
    first, second = Brain(rng=11), Brain(rng=11)
    for brain in (first, second):
        brain.learn_lines(lines)
    outputs = [
        (first.generate_utterance(word), second.generate_utterance(word))
        for word in ["the", "dog", "sat", "rug", "cat"]
    ]
    for left, right in outputs:
        assert left == right


def test_generated_utterances_have_at_least_two_words() -> None:
    brain = Brain(rng=5)
    brain.learn_lines(["the cat sat on the mat", "dogs bark at night", "night falls on the town"])
    for word in ["the", "cat", "night", "bark", "town", "unknown"]:
        for _ in range(10):
            utterance = brain.generate_utterance(word)
            assert utterance is None or len(utterance.words) >= 2


def test_unknown_keyword_generates_nothing(fox_brain: Brain) -> None:
    assert fox_brain.generate_utterance("zebra") is None


def test_order_one_brain_does_not_crash() -> None:
    brain = Brain(markov_order=1, rng=0)
    brain.learn_line("one two three")
    assert brain.generate_utterance("two") is None


def test_word_probability(fox_brain: Brain) -> None:
    assert fox_brain.word_probability("fox") == pytest.approx(0.2)
    assert fox_brain.word_probability("zebra") == 0.0
    assert Brain().word_probability("fox") == 0.0


def test_get_response_uses_known_keywords(fox_brain: Brain) -> None:
    assert fox_brain.get_response("The FOX?") == SENTENCE


def test_get_response_without_usable_keywords(fox_brain: Brain) -> None:
    assert fox_brain.get_response("") is None
    assert fox_brain.get_response("?!") is None
    assert fox_brain.get_response("zebra crossing") is None
    with pytest.raises(TypeError):
        fox_brain.get_response(None)  # type: ignore[arg-type]


def test_get_response_with_scorer(fox_brain: Brain) -> None:
    scored: list[Utterance] = []

    def scorer(utterance: Utterance) -> float:
        scored.append(utterance)
        return float(len(utterance.words))

    assert fox_brain.get_response("fox", count=3, scorer=scorer) == SENTENCE
    assert len(scored) == 3


def test_get_response_rejects_non_positive_scores(fox_brain: Brain) -> None:
    assert fox_brain.get_response("fox", count=2, scorer=lambda utterance: 0.0) is None


def test_get_response_prefers_greetings() -> None:
    brain = Brain(lexicon=Lexicon(greetings={"hello"}), rng=1)
    brain.learn_line("hello there my friend")
    brain.learn_line(SENTENCE)
    for _ in range(5):
        assert brain.get_response("hello fox") == "hello there my friend"


def test_get_response_swaps_keywords() -> None:
    brain = Brain(lexicon=Lexicon(swaps={"cat": "fox"}), rng=2)
    brain.learn_line(SENTENCE)
    replies = {brain.get_response("cat") for _ in range(40)}
    assert replies == {SENTENCE, None}


def test_split_words_corrects_spelling(lexicon: Lexicon) -> None:
    brain = Brain(lexicon=lexicon)
    assert brain.split_words("Teh qiuck fox!", correct_spelling=True) == ["the", "quick", "fox", "!"]
    assert brain.split_words("Teh fox") == ["teh", "fox"]


@pytest.mark.parametrize("seed", range(15))
def test_random_utterance_never_starts_from_a_bad_keyword(seed: int) -> None:
    lexicon = Lexicon(bad_keywords={"the", "on", "sat"})
    brain = Brain(lexicon=lexicon, rng=seed)
    brain.learn_lines(["the cat sat on the mat", "the dog sat on the rug", "sat on it , the cat did"])
    utterance = brain.random_utterance()
    assert utterance is not None
    assert not lexicon.is_bad_keyword(utterance.keyword)
    assert len(utterance.words) >= 2


def test_random_utterance_of_an_empty_brain() -> None:
    assert Brain().get_random_utterance() is None


def test_random_utterance_with_only_bad_keywords() -> None:
    brain = Brain(lexicon=Lexicon(bad_keywords={"the", "cat", "sat", "down"}))
    brain.learn_line("the cat sat down")
    assert brain.get_random_utterance() is None


def test_get_random_utterance_returns_text(fox_brain: Brain) -> None:
    assert fox_brain.get_random_utterance() == SENTENCE


def test_clear_resets_everything(fox_brain: Brain) -> None:
    fox_brain.clear()
    assert fox_brain.is_empty
    assert len(fox_brain.forward) == 0
    assert len(fox_brain.backward) == 0


def test_stats(fox_brain: Brain) -> None:
    stats = fox_brain.stats()
    assert stats.total_root_count == 10
    assert stats.forward_roots == 5
    assert stats.backward_roots == 5
    assert stats.to_dict()["forward_nodes"] >= 5


def test_concurrent_learning_is_atomic() -> None:
    brain = Brain(rng=0)

    def worker(offset: int) -> None:
        for index in range(50):
            brain.learn_line(f"word{offset} follows word{index} and then stops")
            brain.generate_utterance(f"word{offset}")

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert brain.total_root_count == 4 * 50 * 2 * 6
    _assert_invariants(brain)


@pytest.mark.parametrize(
    "call",
    [
        lambda brain: brain.get_response("cat"),
        lambda brain: brain.random_utterance(),
    ],
)
def test_generator_is_only_drawn_under_the_lock(call) -> None:
    brain = Brain(lexicon=Lexicon(swaps={"cat": "fox"}), rng=3)
    brain.learn_line(SENTENCE)
    state = brain._rng.bit_generator.state

    with brain._lock:
        worker = threading.Thread(target=call, args=(brain,))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert brain._rng.bit_generator.state == state
    worker.join()
    assert brain._rng.bit_generator.state != state
