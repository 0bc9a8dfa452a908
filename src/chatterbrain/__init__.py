"""chatterbrain package."""

from .brain import Brain, BrainStats, Utterance
from .config import BrainConfig, ChatterConfig, LexiconConfig, ResponseConfig, TrainerConfig, load_config
from .conversation import Conversation, ConversationManager
from .lexicon import Lexicon
from .markov import MarkovModel, MarkovNode
from .scoring import ReplyScorer
from .training import Trainer, TrainingReport

__all__ = [
    "Brain",
    "BrainConfig",
    "BrainStats",
    "ChatterConfig",
    "Conversation",
    "ConversationManager",
    "Lexicon",
    "LexiconConfig",
    "MarkovModel",
    "MarkovNode",
    "ReplyScorer",
    "ResponseConfig",
    "Trainer",
    "TrainerConfig",
    "TrainingReport",
    "Utterance",
    "load_config",
]

__version__ = "0.1.0"
