"""Scoring candidate replies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .brain import Utterance

BASE_SCORE = 0.5


@dataclass
class ReplyScorer:
    """Prefer replies that neither repeat ourselves nor parrot the speaker.

    Long replies are penalised: by half beyond two thirds of ``max_length``
    characters and by three quarters beyond ``max_length``.
    """

    last_reply: Optional[str] = None
    message: Optional[str] = None
    max_length: int = 300

    def __call__(self, utterance: Utterance) -> float:
        text = utterance.text
        value = BASE_SCORE
        if text == self.last_reply:
            value = 0.0
        elif text == self.message:
            value *= 0.1

        if len(text) > self.max_length:
            value *= 0.25
        elif len(text) > self.max_length * 2 // 3:
            value *= 0.5
        return value


__all__ = ["BASE_SCORE", "ReplyScorer"]
