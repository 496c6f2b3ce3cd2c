"""Command-line interface for LeitnerCards."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .ai import HintServiceFactory
from .algorithm import get_hint
from .core import AnswerDifficulty, Flashcard, HistoryEntry
from .database import FlashcardDatabase
from .scheduler import LeitnerScheduler

ANSWER_KEYS = {
    "w": AnswerDifficulty.WRONG,
    "h": AnswerDifficulty.HARD,
    "e": AnswerDifficulty.EASY,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="LeitnerCards: Modified-Leitner spaced repetition for flashcards"
    )
    parser.add_argument(
        "--db", help="DuckDB file to use (default: $LEITNERCARDS_DB_PATH or in-memory)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    add_parser = subparsers.add_parser("add", help="Add a new card to bucket 0")
    add_parser.add_argument("front", help="Prompt shown to the learner")
    add_parser.add_argument("back", help="Expected answer")
    add_parser.add_argument("--hint", default="", help="Hint text for the card")
    add_parser.add_argument(
        "--tag", action="append", default=[], dest="tags", help="Tag for the card"
    )

    practice_parser = subparsers.add_parser("practice", help="List cards due on a day")
    practice_parser.add_argument("--day", type=int, required=True, help="Day number")

    review_parser = subparsers.add_parser("review", help="Review cards due on a day")
    review_parser.add_argument("--day", type=int, required=True, help="Day number")
    review_parser.add_argument(
        "--ai-service",
        choices=HintServiceFactory.get_available_services(),
        default="openai",
        help="AI service used for hints",
    )
    review_parser.add_argument("--api-key", help="API key for the AI service")

    subparsers.add_parser("stats", help="Show progress statistics")

    hint_parser = subparsers.add_parser("hint", help="Show the hint for a card")
    hint_parser.add_argument("front", help="Card front")
    hint_parser.add_argument("back", help="Card back")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    load_dotenv()
    level_name = os.getenv("LEITNERCARDS_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        print(f"Error: unknown log level in LEITNERCARDS_LOG_LEVEL: {level_name}")
        sys.exit(1)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    db = FlashcardDatabase(args.db or os.getenv("LEITNERCARDS_DB_PATH"))

    try:
        if args.command == "add":
            add_card(db, args.front, args.back, args.hint, args.tags)
        elif args.command == "practice":
            show_practice(db, args.day)
        elif args.command == "review":
            review_cards(db, args.day, args.ai_service, args.api_key)
        elif args.command == "stats":
            show_stats(db)
        elif args.command == "hint":
            show_hint(db, args.front, args.back)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()


def _load_scheduler(db: FlashcardDatabase) -> LeitnerScheduler:
    return LeitnerScheduler(db.get_bucket_map(), db.get_review_history())


def add_card(
    db: FlashcardDatabase, front: str, back: str, hint: str, tags: List[str]
) -> None:
    """Add a new card to bucket 0."""
    card = Flashcard(front=front, back=back, hint=hint, tags=tags)
    if db.add_card(card):
        print(f"Added card: {front}")
    else:
        print(f"Card already exists: {front}")


def show_practice(db: FlashcardDatabase, day: int) -> None:
    """List the cards due on a day."""
    scheduler = _load_scheduler(db)
    due_cards = sorted(scheduler.cards_for_day(day), key=lambda c: (c.front, c.back))

    if not due_cards:
        print(f"No cards due on day {day}!")
        return

    print(f"{len(due_cards)} cards due on day {day}:")
    for card in due_cards:
        print(f"  [{scheduler.bucket_of(card)}] {card.front}")


def review_cards(
    db: FlashcardDatabase, day: int, ai_service_type: str, api_key: Optional[str]
) -> None:
    """Review the cards due on a day."""
    scheduler = _load_scheduler(db)
    due_cards = sorted(scheduler.cards_for_day(day), key=lambda c: (c.front, c.back))

    if not due_cards:
        print(f"No cards due on day {day}!")
        return

    if not api_key:
        api_key = os.getenv(f"{ai_service_type.upper()}_API_KEY")
    hint_service = HintServiceFactory.create_service(ai_service_type)

    print(f"Found {len(due_cards)} cards due on day {day}")

    for card in due_cards:
        print(f"\n--- {card.front} ---")

        while True:
            answer = input("Rate your recall (w=Wrong, h=Hard, e=Easy, ?=Hint): ")
            answer = answer.strip().lower()
            if answer == "?":
                print(f"Hint: {hint_service.generate_hint(card, api_key)}")
            elif answer in ANSWER_KEYS:
                break
            else:
                print("Please enter w, h, e or ?")

        difficulty = ANSWER_KEYS[answer]
        new_bucket = scheduler.review(card, difficulty)

        db.save_bucket_map(scheduler.bucket_map)
        db.add_review(HistoryEntry(card=card, difficulty=difficulty))

        print(f"Answer: {card.back}")
        print(f"Moved to bucket {new_bucket}")


def show_stats(db: FlashcardDatabase) -> None:
    """Show progress statistics."""
    scheduler = _load_scheduler(db)
    progress = scheduler.progress()
    bucket_range = scheduler.range()

    print("=== Progress ===")
    print(f"Total cards: {progress.total_cards}")
    print(f"Average bucket: {progress.average_bucket:.2f}")
    print(f"Recent performance: {progress.recent_performance:.0%}")
    if bucket_range is None:
        print("Bucket range: no cards")
    else:
        print(f"Bucket range: {bucket_range.min_bucket}-{bucket_range.max_bucket}")
    print(f"Total reviews: {db.get_stats()['total_reviews']}")


def show_hint(db: FlashcardDatabase, front: str, back: str) -> None:
    """Show the hint for a stored card."""
    card = db.get_card(front, back)
    if card is None:
        print(f"No card found: {front}")
        return
    print(get_hint(card))


if __name__ == "__main__":
    main()
