"""Core data model for the LeitnerCards scheduler."""

from enum import IntEnum
from typing import Dict, FrozenSet, List, Set

from pydantic import BaseModel, ConfigDict, Field


class AnswerDifficulty(IntEnum):
    """How well the learner recalled a card, in increasing recall quality.

    Attributes:
        WRONG: The learner failed to recall the card.
        HARD: The learner recalled the card with difficulty.
        EASY: The learner recalled the card easily.
    """

    WRONG = 0
    HARD = 1
    EASY = 2


class Flashcard(BaseModel):
    """An immutable flashcard.

    Cards are frozen, so they hash and compare by value and can be used as
    set members and dictionary keys.

    Attributes:
        front: The prompt shown to the learner.
        back: The expected answer.
        hint: Optional hint text written by the card author.
        tags: Free-form labels attached to the card.
    """

    front: str = Field(..., description="Prompt shown to the learner")
    back: str = Field(..., description="Expected answer")
    hint: str = Field(default="", description="Optional author-written hint")
    tags: FrozenSet[str] = Field(
        default_factory=frozenset, description="Labels attached to the card"
    )

    model_config = ConfigDict(frozen=True)


class HistoryEntry(BaseModel):
    """One review in the learner's chronological answer history.

    Attributes:
        card: The card that was reviewed.
        difficulty: The outcome the learner reported.
    """

    card: Flashcard = Field(..., description="The reviewed card")
    difficulty: AnswerDifficulty = Field(..., description="Reported outcome")

    model_config = ConfigDict(frozen=True)


class BucketRange(BaseModel):
    """Lowest and highest bucket indices that hold at least one card."""

    min_bucket: int = Field(..., ge=0)
    max_bucket: int = Field(..., ge=0)


class ProgressStats(BaseModel):
    """Summary statistics about a learner's progress.

    Attributes:
        total_cards: Number of cards across all buckets.
        average_bucket: Card-weighted mean bucket index.
        recent_performance: Share of EASY answers among the last reviews.
    """

    total_cards: int = Field(default=0, ge=0)
    average_bucket: float = Field(default=0.0, ge=0)
    recent_performance: float = Field(default=0.0, ge=0, le=1)


# Sparse form: bucket index -> cards. Absent keys are empty buckets.
BucketMap = Dict[int, Set[Flashcard]]

# Dense form: element i holds the cards of bucket i.
BucketSets = List[Set[Flashcard]]
