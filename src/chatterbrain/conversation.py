"""Per-conversation brains layered over a shared global brain."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from .brain import Brain
from .config import BrainConfig, ResponseConfig
from .logging import get_logger
from .scoring import ReplyScorer
from .utils.random import deterministic_hash

LOGGER = get_logger(__name__)

STATEMENTS_TO_KEEP = 25


@dataclass
class Conversation:
    """State kept for one forum (a channel or a private chat)."""

    forum: str
    brain: Brain
    statements: Deque[str] = field(default_factory=lambda: deque(maxlen=STATEMENTS_TO_KEEP))
    last_reply: Optional[str] = None


class ConversationManager:
    """Route messages to conversation brains that blend with the global brain.

    A conversation brain learns only what was said in its forum, so replies lean
    towards the current topic while still drawing on everything the global
    brain knows.
    """

    def __init__(
        self,
        brain: Brain,
        config: Optional[ResponseConfig] = None,
        brain_config: Optional[BrainConfig] = None,
    ) -> None:
        self.brain = brain
        self.config = config or ResponseConfig()
        self.brain_config = brain_config or BrainConfig(
            markov_order=brain.markov_order, max_blend_chance=brain.max_blend_chance
        )
        self.conversations: Dict[str, Conversation] = {}

    def __contains__(self, forum: object) -> bool:
        return forum in self.conversations

    def _child_seed(self, forum: str) -> Optional[int]:
        if self.brain_config.seed is None:
            return None
        return (self.brain_config.seed + deterministic_hash(forum)) % (2**32)

    def get(self, forum: str) -> Conversation:
        """Return the conversation for ``forum``, starting one if needed."""
        conversation = self.conversations.get(forum)
        if conversation is None:
            child = Brain(
                self.brain,
                markov_order=self.brain_config.markov_order,
                max_blend_chance=self.brain_config.max_blend_chance,
                rng=self._child_seed(forum),
            )
            conversation = self.conversations[forum] = Conversation(forum=forum, brain=child)
            LOGGER.debug("Started conversation in %s", forum)
        return conversation

    def observe(self, forum: str, message: str) -> None:
        """Learn from a message said in ``forum``."""
        conversation = self.get(forum)
        if self.config.auto_learn:
            self.brain.learn_line(message, self.config.correct_spelling)
        conversation.statements.append(message)
        conversation.brain.learn_line(message, self.config.correct_spelling)

    def reply(self, forum: str, message: str) -> Optional[str]:
        """Generate a reply to ``message``, or a random remark if nothing fits."""
        conversation = self.get(forum)
        scorer = ReplyScorer(
            last_reply=conversation.last_reply,
            message=message,
            max_length=self.config.max_reply_length,
        )
        reply = conversation.brain.get_response(
            message,
            self.config.candidates,
            self.config.blend_with_parent,
            self.config.correct_spelling,
            scorer,
        )
        if reply is None:
            reply = conversation.brain.get_random_utterance(self.config.blend_with_parent)
        if reply is not None:
            conversation.last_reply = reply
        return reply

    def end(self, forum: str) -> bool:
        """Forget the conversation in ``forum``. Returns whether one existed."""
        removed = self.conversations.pop(forum, None)
        if removed is not None:
            LOGGER.debug("Ended conversation in %s", forum)
        return removed is not None


__all__ = ["Conversation", "ConversationManager", "STATEMENTS_TO_KEEP"]
