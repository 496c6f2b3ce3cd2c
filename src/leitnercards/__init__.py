"""LeitnerCards: Modified-Leitner spaced repetition for flashcards."""

__version__ = "0.1.0"

from .algorithm import (
    compute_progress,
    get_bucket_range,
    get_hint,
    practice,
    to_bucket_sets,
    update,
)
from .core import (
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    BucketSets,
    Flashcard,
    HistoryEntry,
    ProgressStats,
)
from .database import FlashcardDatabase
from .scheduler import LeitnerScheduler

__all__ = [
    "AnswerDifficulty",
    "BucketMap",
    "BucketRange",
    "BucketSets",
    "Flashcard",
    "FlashcardDatabase",
    "HistoryEntry",
    "LeitnerScheduler",
    "ProgressStats",
    "compute_progress",
    "get_bucket_range",
    "get_hint",
    "practice",
    "to_bucket_sets",
    "update",
]
