#!/usr/bin/env python3
"""Basic usage example for LeitnerCards."""

from leitnercards import (
    AnswerDifficulty,
    Flashcard,
    FlashcardDatabase,
    LeitnerScheduler,
    get_hint,
)


def main() -> None:
    """Simulate a week of practice with a few cards."""
    print("LeitnerCards Basic Usage Example")
    print("=" * 50)

    db = FlashcardDatabase()

    try:
        cards = [
            Flashcard(front="bonjour", back="hello", tags=["french"]),
            Flashcard(front="merci", back="thank you", tags=["french"]),
            Flashcard(front="gracias", back="thank you", tags=["spanish"]),
        ]
        for card in cards:
            db.add_card(card)

        # Three empty buckets above bucket 0 give room to promote cards.
        buckets = db.get_bucket_map()
        for index in (1, 2, 3):
            buckets.setdefault(index, set())
        db.save_bucket_map(buckets)

        scheduler = LeitnerScheduler(db.get_bucket_map(), db.get_review_history())

        # Pretend the learner finds French easy and Spanish hard.
        for day in range(8):
            due = sorted(scheduler.cards_for_day(day), key=lambda c: c.front)
            print(f"\nDay {day}: {len(due)} cards due")
            for card in due:
                difficulty = (
                    AnswerDifficulty.EASY
                    if "french" in card.tags
                    else AnswerDifficulty.HARD
                )
                new_bucket = scheduler.review(card, difficulty)
                print(f"   {get_hint(card):<10} {difficulty.name:<5} -> bucket {new_bucket}")

        db.save_bucket_map(scheduler.bucket_map)
        for entry in scheduler.history:
            db.add_review(entry)

        progress = scheduler.progress()
        print("\nFinal statistics:")
        print(f"   Total cards: {progress.total_cards}")
        print(f"   Average bucket: {progress.average_bucket:.2f}")
        print(f"   Recent performance: {progress.recent_performance:.0%}")
        print(f"   Stored reviews: {db.get_stats()['total_reviews']}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
