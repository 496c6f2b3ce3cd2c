"""Stateful owner of a learner's bucket map and review history."""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .algorithm import (
    compute_progress,
    find_bucket,
    get_bucket_range,
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

logger = logging.getLogger(__name__)


class LeitnerScheduler:
    """Holds the canonical bucket state and applies reviews to it.

    The sparse map is the state of record; the dense view is always derived
    from it, so the two representations never drift apart. Each review
    replaces the map with the one returned by ``update``.

    The scheduler is a single writer: it is not thread-safe, and callers
    sharing one instance across threads must serialise access to it.
    """

    def __init__(
        self,
        buckets: Optional[BucketMap] = None,
        history: Optional[Iterable[HistoryEntry]] = None,
    ):
        """Initializes the scheduler.

        Args:
            buckets: Optional starting bucket map. It is copied.
            history: Optional review history, oldest entry first.
        """
        self._buckets: BucketMap = {
            index: set(cards) for index, cards in (buckets or {}).items()
        }
        self._history: List[HistoryEntry] = list(history or [])

    @property
    def bucket_map(self) -> BucketMap:
        """A copy of the sparse bucket map."""
        return {index: set(cards) for index, cards in self._buckets.items()}

    @property
    def bucket_sets(self) -> BucketSets:
        """The dense view of the bucket map."""
        return to_bucket_sets(self._buckets)

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._history)

    def add_card(self, card: Flashcard) -> bool:
        """Introduces a card into bucket 0.

        Returns:
            True if the card was added, False if it was already tracked.
        """
        if find_bucket(self._buckets, card) is not None:
            return False
        self._buckets.setdefault(0, set()).add(card)
        logger.info("Added card %r to bucket 0", card.front)
        return True

    def bucket_of(self, card: Flashcard) -> Optional[int]:
        return find_bucket(self._buckets, card)

    def cards_for_day(self, day: int) -> Set[Flashcard]:
        """Returns the cards due for practice on ``day``."""
        return practice(self.bucket_sets, day)

    def review(self, card: Flashcard, difficulty: AnswerDifficulty) -> Optional[int]:
        """Records a review and moves the card to its new bucket.

        Reviews of untracked cards are ignored and left out of the history.

        Args:
            card: The card that was practiced.
            difficulty: How well the learner did.

        Returns:
            The card's new bucket index, or None if the card is not tracked.
        """
        if find_bucket(self._buckets, card) is None:
            logger.debug("Ignoring review of untracked card %r", card.front)
            return None

        self._buckets = update(self._buckets, card, difficulty)
        self._history.append(HistoryEntry(card=card, difficulty=difficulty))
        return find_bucket(self._buckets, card)

    def range(self) -> Optional[BucketRange]:
        return get_bucket_range(self.bucket_sets)

    def progress(self) -> ProgressStats:
        return compute_progress(self._buckets, self._history)
