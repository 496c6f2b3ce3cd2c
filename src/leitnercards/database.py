"""Database module for storing flashcards, buckets and review history."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import duckdb

from .core import AnswerDifficulty, BucketMap, Flashcard, HistoryEntry

logger = logging.getLogger(__name__)


class FlashcardDatabase:
    """Stores flashcards, their buckets and the review history in DuckDB.

    A card is identified by all of its fields (front, back, hint and sorted
    tags), the same way ``Flashcard`` compares in memory. Two cards that
    only differ in hint or tags are stored as two cards.

    Bucket indices are stored separately from the cards so that empty
    buckets survive a save/load round trip. The highest known index is the
    promotion ceiling, so dropping empty buckets would change how cards move.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initializes the FlashcardDatabase connection.

        Args:
            db_path: Optional path to a DuckDB file. If None, an in-memory database is used.
        """
        self.db_path = db_path or ":memory:"
        self.connection = duckdb.connect(self.db_path)
        self._create_tables()

    def _create_tables(self) -> None:
        """Creates the cards, buckets and review_logs tables if missing."""
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS cards (
                front VARCHAR NOT NULL,
                back VARCHAR NOT NULL,
                hint VARCHAR NOT NULL,
                tags VARCHAR NOT NULL,
                bucket INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL,
                PRIMARY KEY (front, back, hint, tags)
            )
        """
        )

        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS buckets (
                idx INTEGER PRIMARY KEY
            )
        """
        )

        # Append-only; position keeps the chronological order.
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS review_logs (
                position INTEGER PRIMARY KEY,
                front VARCHAR NOT NULL,
                back VARCHAR NOT NULL,
                hint VARCHAR NOT NULL,
                tags VARCHAR NOT NULL,
                difficulty INTEGER NOT NULL,
                review_time TIMESTAMP NOT NULL
            )
        """
        )

    def _card_exists(self, card: Flashcard) -> bool:
        row = self.connection.execute(
            "SELECT 1 FROM cards WHERE front = ? AND back = ? AND hint = ? AND tags = ?",
            _card_key(card),
        ).fetchone()
        return row is not None

    def add_card(self, card: Flashcard, bucket: int = 0) -> bool:
        """Adds a new card to a bucket (bucket 0 unless given).

        Args:
            card: The Flashcard to add.
            bucket: The bucket the card starts in.

        Returns:
            True if the card was inserted, False if an equal card is already
            stored. Existing cards are left untouched.
        """
        if self._card_exists(card):
            return False

        self.connection.execute(
            """
            INSERT INTO cards (front, back, hint, tags, bucket, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """,
            (*_card_key(card), bucket, datetime.now(timezone.utc)),
        )
        self.connection.execute(
            "INSERT OR IGNORE INTO buckets (idx) VALUES (?)", (bucket,)
        )
        logger.info("Stored card %r in bucket %d", card.front, bucket)
        return True

    def get_card(self, front: str, back: str) -> Optional[Flashcard]:
        """Retrieves a card by its front and back.

        When several stored cards share front and back, the oldest one is
        returned.

        Returns:
            The Flashcard if found, otherwise None.
        """
        result = self.connection.execute(
            """
            SELECT front, back, hint, tags FROM cards
            WHERE front = ? AND back = ?
            ORDER BY created_at
            LIMIT 1
        """,
            (front, back),
        ).fetchone()

        if result:
            return _row_to_card(result)
        return None

    def get_bucket_map(self) -> BucketMap:
        """Loads the sparse bucket map, including empty buckets."""
        buckets: BucketMap = {
            row[0]: set()
            for row in self.connection.execute("SELECT idx FROM buckets").fetchall()
        }

        rows = self.connection.execute(
            "SELECT front, back, hint, tags, bucket FROM cards"
        ).fetchall()
        for row in rows:
            buckets.setdefault(row[4], set()).add(_row_to_card(row[:4]))

        return buckets

    def save_bucket_map(self, buckets: BucketMap) -> None:
        """Stores the bucket of every card in ``buckets``.

        Cards not yet stored are added. Stored cards missing from ``buckets``
        keep their current bucket. The whole save is one transaction.
        """
        self.connection.begin()
        try:
            for index, cards in buckets.items():
                for card in cards:
                    if self._card_exists(card):
                        self.connection.execute(
                            """
                            UPDATE cards SET bucket = ?
                            WHERE front = ? AND back = ? AND hint = ? AND tags = ?
                        """,
                            (index, *_card_key(card)),
                        )
                    else:
                        self.add_card(card, bucket=index)

            self.connection.execute("DELETE FROM buckets")
            for index in buckets:
                self.connection.execute("INSERT INTO buckets (idx) VALUES (?)", (index,))
        except duckdb.Error:
            self.connection.rollback()
            raise
        self.connection.commit()

    def add_review(
        self, entry: HistoryEntry, review_time: Optional[datetime] = None
    ) -> None:
        """Appends a review to the history.

        Args:
            entry: The card and the reported difficulty.
            review_time: When the review happened. Defaults to now.
        """
        position = self.connection.execute(
            "SELECT COUNT(*) FROM review_logs"
        ).fetchone()[0]

        self.connection.execute(
            """
            INSERT INTO review_logs
            (position, front, back, hint, tags, difficulty, review_time)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
            (
                position,
                *_card_key(entry.card),
                entry.difficulty.value,
                review_time or datetime.now(timezone.utc),
            ),
        )

    def get_review_history(self) -> List[HistoryEntry]:
        """Retrieves the review history, oldest review first."""
        results = self.connection.execute(
            """
            SELECT front, back, hint, tags, difficulty
            FROM review_logs
            ORDER BY position
        """
        ).fetchall()

        return [
            HistoryEntry(
                card=_row_to_card(result[:4]),
                difficulty=AnswerDifficulty(result[4]),
            )
            for result in results
        ]

    def get_stats(self) -> Dict[str, Any]:
        """Retrieves counts of stored cards, reviews and buckets.

        Returns:
            A dictionary containing:
            - "total_cards": Number of stored cards.
            - "total_reviews": Number of review log entries.
            - "total_buckets": Number of known buckets, empty ones included.
        """
        total_cards = self.connection.execute("SELECT COUNT(*) FROM cards").fetchone()[0]
        total_reviews = self.connection.execute(
            "SELECT COUNT(*) FROM review_logs"
        ).fetchone()[0]
        total_buckets = self.connection.execute(
            "SELECT COUNT(*) FROM buckets"
        ).fetchone()[0]

        return {
            "total_cards": total_cards,
            "total_reviews": total_reviews,
            "total_buckets": total_buckets,
        }

    def close(self) -> None:
        """Closes the database connection."""
        self.connection.close()

    def __enter__(self) -> "FlashcardDatabase":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def _card_key(card: Flashcard) -> Tuple[str, str, str, str]:
    """Column values identifying a card: front, back, hint and sorted tags as JSON."""
    return card.front, card.back, card.hint, json.dumps(sorted(card.tags))


def _row_to_card(row: Any) -> Flashcard:
    front, back, hint, tags = row
    return Flashcard(front=front, back=back, hint=hint, tags=json.loads(tags))
