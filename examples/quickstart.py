"""Minimal quickstart script for chatterbrain.

The script teaches a global brain a few lines, opens a conversation brain that
blends with it, and prints a handful of replies and random remarks.
"""

from chatterbrain import Brain, ConversationManager, ResponseConfig, Trainer
from chatterbrain.data import load_default_lexicon
from chatterbrain.logging import configure_logging

CORPUS = [
    "the cat sat on the mat and purred quietly",
    "my dog likes to chase the cat around the garden",
    "hello there , how is the weather today ?",
    "the weather is lovely and the garden is in bloom",
    "why do cats always land on their feet ?",
    "because they twist in the air while falling",
]

CONVERSATION = [
    "my cat chased a mouse into the garden",
    "the mouse hid under the mat",
]


def main() -> None:
    configure_logging()
    brain = Brain(lexicon=load_default_lexicon(), rng=7)
    Trainer(brain).learn_lines(CORPUS, source="quickstart")

    manager = ConversationManager(brain, ResponseConfig(candidates=3))
    for line in CONVERSATION:
        manager.observe("#pets", line)

    for prompt in ["hello!", "What does the cat do?", "why is the garden pretty?"]:
        print(f"> {prompt}\n{manager.reply('#pets', prompt)}")

    print("\nRandom remarks:")
    for _ in range(3):
        print(brain.get_random_utterance())


if __name__ == "__main__":
    main()
