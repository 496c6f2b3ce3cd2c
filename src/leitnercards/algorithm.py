"""Modified-Leitner scheduling functions.

Every function here is pure: inputs are never mutated and no state is kept
between calls. Callers that share one bucket map between several writers
must serialise their updates, since two updates computed from the same stale
map would drop one of the moves.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from .core import (
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    BucketSets,
    Flashcard,
    HistoryEntry,
    ProgressStats,
)

logger = logging.getLogger(__name__)

# Number of most recent history entries used for recent performance.
RECENT_WINDOW = 10

# Upper bound on characters a generated hint reveals.
HINT_MAX_REVEAL = 3


def to_bucket_sets(buckets: BucketMap) -> BucketSets:
    """Converts a sparse bucket map into a dense list of sets.

    Args:
        buckets: Mapping of bucket index to the cards in that bucket.

    Returns:
        A list whose element i is a copy of bucket i's cards, or an empty set
        when the map has no bucket i. An empty map gives an empty list.
    """
    if not buckets:
        return []

    bucket_sets: BucketSets = [set() for _ in range(max(buckets) + 1)]
    for index, cards in buckets.items():
        bucket_sets[index] = set(cards)
    return bucket_sets


def get_bucket_range(bucket_sets: Sequence[Set[Flashcard]]) -> Optional[BucketRange]:
    """Finds the span of buckets that hold cards, as a rough progress signal.

    Args:
        bucket_sets: Dense bucket sequence.

    Returns:
        The lowest and highest non-empty bucket indices, or None when no
        bucket holds a card.
    """
    min_bucket = next((i for i, cards in enumerate(bucket_sets) if cards), None)
    if min_bucket is None:
        return None

    max_bucket = next(
        i for i in range(len(bucket_sets) - 1, -1, -1) if bucket_sets[i]
    )
    return BucketRange(min_bucket=min_bucket, max_bucket=max_bucket)


def practice(bucket_sets: Sequence[Set[Flashcard]], day: int) -> Set[Flashcard]:
    """Selects the cards to practice on a given day.

    Bucket i is due on every day divisible by 2**i, so bucket 0 is due daily
    and each higher bucket half as often as the one below it.

    Args:
        bucket_sets: Dense bucket sequence.
        day: Day number, starting at 0.

    Returns:
        The set of cards due on ``day``.

    Raises:
        ValueError: If ``day`` is not a non-negative integer.
    """
    if isinstance(day, bool) or not isinstance(day, int):
        raise ValueError(f"day must be an integer, got {day!r}")
    if day < 0:
        raise ValueError(f"day must be non-negative, got {day}")

    due: Set[Flashcard] = set()
    for index, cards in enumerate(bucket_sets):
        if day % (2**index) == 0:
            due.update(cards)
    return due


def find_bucket(buckets: BucketMap, card: Flashcard) -> Optional[int]:
    """Returns the index of the bucket holding ``card``, or None."""
    for index, cards in buckets.items():
        if card in cards:
            return index
    return None


def update(
    buckets: BucketMap, card: Flashcard, difficulty: AnswerDifficulty
) -> BucketMap:
    """Moves a card to a new bucket after a practice trial.

    EASY promotes the card one bucket, but never past the highest bucket
    index present in ``buckets`` at call time. HARD demotes it one bucket,
    stopping at 0. WRONG sends it back to bucket 0.

    A card that is not in any bucket is not tracked by this map; the
    result is then an unchanged copy of ``buckets``.

    Args:
        buckets: Sparse bucket map. It is not modified.
        card: The card that was practiced.
        difficulty: How well the learner did on the card.

    Returns:
        A new sparse bucket map.
    """
    new_buckets: BucketMap = {index: set(cards) for index, cards in buckets.items()}

    current = find_bucket(new_buckets, card)
    if current is None:
        logger.debug("Card %r is not in any bucket, leaving buckets unchanged", card.front)
        return new_buckets

    ceiling = max(new_buckets)
    new_buckets[current].discard(card)

    if difficulty == AnswerDifficulty.EASY:
        target = min(current + 1, ceiling)
    elif difficulty == AnswerDifficulty.HARD:
        target = max(current - 1, 0)
    else:
        target = 0

    new_buckets.setdefault(target, set()).add(card)
    logger.debug(
        "Moved card %r from bucket %d to bucket %d (%s)",
        card.front,
        current,
        target,
        difficulty.name,
    )
    return new_buckets


def compute_progress(
    buckets: BucketMap, history: Iterable[HistoryEntry]
) -> ProgressStats:
    """Computes statistics about the learner's progress.

    Args:
        buckets: Sparse bucket map.
        history: Chronological review history.

    Returns:
        Total card count, card-weighted average bucket, and the share of EASY
        answers among the most recent reviews.
    """
    total_cards = 0
    bucket_sum = 0
    for index, cards in buckets.items():
        total_cards += len(cards)
        bucket_sum += index * len(cards)

    average_bucket = bucket_sum / total_cards if total_cards else 0.0

    recent: List[HistoryEntry] = list(history)[-RECENT_WINDOW:]
    if recent:
        easy = sum(1 for entry in recent if entry.difficulty == AnswerDifficulty.EASY)
        recent_performance = easy / len(recent)
    else:
        recent_performance = 0.0

    return ProgressStats(
        total_cards=total_cards,
        average_bucket=average_bucket,
        recent_performance=recent_performance,
    )


def get_hint(card: Flashcard) -> str:
    """Returns a hint for a card.

    The card's own hint wins. Otherwise the start of the front is revealed
    (a third of it, between one and three characters) and the rest is
    masked with ``*``.

    Raises:
        ValueError: If the card has an empty front.
    """
    if card.hint:
        return card.hint
    if not card.front:
        raise ValueError("Cannot build a hint for a card with an empty front")

    reveal = max(1, min(HINT_MAX_REVEAL, len(card.front) // 3))
    return card.front[:reveal] + "*" * (len(card.front) - reveal)
