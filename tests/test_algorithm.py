"""Unit tests for the scheduling functions."""

import pytest

from leitnercards.algorithm import (
    compute_progress,
    get_bucket_range,
    get_hint,
    practice,
    to_bucket_sets,
    update,
)
from leitnercards.core import (
    AnswerDifficulty,
    BucketRange,
    Flashcard,
    HistoryEntry,
    ProgressStats,
)


def make_card(front: str, back: str = "answer", hint: str = "") -> Flashcard:
    return Flashcard(front=front, back=back, hint=hint)


@pytest.fixture
def cards():
    return [make_card(f"Q{i}", f"A{i}") for i in range(1, 5)]


class TestToBucketSets:
    def test_empty_map_gives_empty_list(self) -> None:
        assert to_bucket_sets({}) == []

    def test_fills_gaps_with_empty_sets(self, cards) -> None:
        a, b = cards[:2]
        result = to_bucket_sets({0: {a}, 2: {b}})

        assert len(result) == 3
        assert result[0] == {a}
        assert result[1] == set()
        assert result[2] == {b}

    def test_sets_are_copies(self, cards) -> None:
        bucket = {cards[0]}
        result = to_bucket_sets({1: bucket})

        assert result[1] == bucket
        assert result[1] is not bucket
        result[1].add(cards[1])
        assert bucket == {cards[0]}

    def test_length_follows_highest_key(self, cards) -> None:
        result = to_bucket_sets({5: set()})
        assert len(result) == 6
        assert all(s == set() for s in result)


class TestGetBucketRange:
    def test_empty_sequence(self) -> None:
        assert get_bucket_range([]) is None

    def test_all_buckets_empty(self) -> None:
        assert get_bucket_range([set(), set(), set()]) is None

    def test_finds_lowest_and_highest(self, cards) -> None:
        a, b = cards[:2]
        result = get_bucket_range([set(), {a}, set(), {b}, set()])
        assert result == BucketRange(min_bucket=1, max_bucket=3)

    def test_single_non_empty_bucket(self, cards) -> None:
        result = get_bucket_range([set(), set(), {cards[0]}])
        assert result == BucketRange(min_bucket=2, max_bucket=2)


class TestPractice:
    def test_bucket_zero_every_day(self, cards) -> None:
        a, b = cards[:2]
        buckets = [{a, b}, set(), set()]
        for day in range(8):
            assert {a, b} <= practice(buckets, day)

    def test_higher_buckets_on_matching_days(self, cards) -> None:
        a, b = cards[:2]
        buckets = [set(), {a}, {b}]

        assert practice(buckets, 1) == set()
        assert practice(buckets, 2) == {a}
        assert practice(buckets, 4) == {a, b}
        assert practice(buckets, 6) == {a}

    def test_day_zero_selects_every_bucket(self, cards) -> None:
        buckets = [{cards[0]}, {cards[1]}, set(), {cards[2]}]
        assert practice(buckets, 0) == {cards[0], cards[1], cards[2]}

    def test_membership_rule(self, cards) -> None:
        buckets = [{cards[0]}, {cards[1]}, {cards[2]}, {cards[3]}]
        for day in range(17):
            due = practice(buckets, day)
            for index, bucket in enumerate(buckets):
                assert (bucket <= due) == (day % 2**index == 0)

    def test_returns_a_set(self, cards) -> None:
        assert isinstance(practice([{cards[0]}], 3), set)

    def test_empty_buckets(self) -> None:
        assert practice([], 4) == set()

    def test_sparse_map_scenario(self, cards) -> None:
        a, b, c = cards[:3]
        buckets = to_bucket_sets({0: {a, b}, 2: {c}})

        assert practice(buckets, 4) == {a, b, c}
        assert practice(buckets, 2) == {a, b}

    @pytest.mark.parametrize("day", [-1, -8])
    def test_negative_day_rejected(self, cards, day) -> None:
        with pytest.raises(ValueError):
            practice([{cards[0]}], day)

    @pytest.mark.parametrize("day", [1.0, "2", True])
    def test_non_integer_day_rejected(self, cards, day) -> None:
        with pytest.raises(ValueError):
            practice([{cards[0]}], day)


class TestUpdate:
    def test_easy_promotes_one_bucket(self, cards) -> None:
        a = cards[0]
        result = update({0: {a}, 1: set(), 2: set()}, a, AnswerDifficulty.EASY)
        assert result == {0: set(), 1: {a}, 2: set()}

    def test_easy_capped_at_highest_key(self, cards) -> None:
        a, b = cards[:2]
        result = update({0: {b}, 2: {a}}, a, AnswerDifficulty.EASY)
        assert result == {0: {b}, 2: {a}}

    def test_easy_with_single_bucket_stays_in_zero(self, cards) -> None:
        a = cards[0]
        result = update({0: {a}}, a, AnswerDifficulty.EASY)
        assert result == {0: {a}}

    def test_ceiling_counts_empty_buckets(self, cards) -> None:
        a = cards[0]
        result = update({1: {a}, 3: set()}, a, AnswerDifficulty.EASY)
        assert result == {1: set(), 2: {a}, 3: set()}

    def test_hard_demotes_one_bucket(self, cards) -> None:
        a = cards[0]
        result = update({0: set(), 2: {a}}, a, AnswerDifficulty.HARD)
        assert result == {0: set(), 1: {a}, 2: set()}

    def test_hard_floored_at_zero(self, cards) -> None:
        a = cards[0]
        result = update({0: {a}, 1: set()}, a, AnswerDifficulty.HARD)
        assert result == {0: {a}, 1: set()}

    @pytest.mark.parametrize("start", [0, 1, 2])
    def test_wrong_resets_to_zero(self, cards, start) -> None:
        a = cards[0]
        result = update({start: {a}, 3: set()}, a, AnswerDifficulty.WRONG)
        assert a in result[0]
        assert sum(a in bucket for bucket in result.values()) == 1

    def test_untracked_card_is_a_no_op(self, cards) -> None:
        a, b = cards[:2]
        buckets = {0: {a}, 1: set()}
        result = update(buckets, b, AnswerDifficulty.EASY)
        assert result == buckets

    def test_input_not_mutated(self, cards) -> None:
        a, b = cards[:2]
        bucket_zero = {a, b}
        buckets = {0: bucket_zero, 1: set()}

        result = update(buckets, a, AnswerDifficulty.EASY)

        assert buckets == {0: {a, b}, 1: set()}
        assert bucket_zero == {a, b}
        assert result[0] is not bucket_zero

    def test_total_card_count_preserved(self, cards) -> None:
        buckets = {0: {cards[0], cards[1]}, 1: {cards[2]}, 2: {cards[3]}}
        for card in cards:
            for difficulty in AnswerDifficulty:
                result = update(buckets, card, difficulty)
                assert sum(len(s) for s in result.values()) == 4
                assert sum(card in s for s in result.values()) == 1

    def test_equal_cards_are_the_same_card(self) -> None:
        buckets = {0: {make_card("Q")}, 1: set()}
        result = update(buckets, make_card("Q"), AnswerDifficulty.EASY)
        assert result == {0: set(), 1: {make_card("Q")}}


class TestComputeProgress:
    def test_empty_inputs(self) -> None:
        assert compute_progress({}, []) == ProgressStats(
            total_cards=0, average_bucket=0, recent_performance=0
        )

    def test_counts_and_average(self, cards) -> None:
        a, b, c = cards[:3]
        history = [
            HistoryEntry(card=a, difficulty=AnswerDifficulty.EASY),
            HistoryEntry(card=b, difficulty=AnswerDifficulty.HARD),
            HistoryEntry(card=c, difficulty=AnswerDifficulty.EASY),
            HistoryEntry(card=a, difficulty=AnswerDifficulty.EASY),
            HistoryEntry(card=b, difficulty=AnswerDifficulty.HARD),
            HistoryEntry(card=c, difficulty=AnswerDifficulty.EASY),
        ]

        progress = compute_progress({0: {a}, 2: {b}, 6: {c}}, history)

        assert progress.total_cards == 3
        assert progress.average_bucket == pytest.approx(8 / 3)
        assert progress.recent_performance == pytest.approx(4 / 6)

    def test_only_last_ten_reviews_count(self, cards) -> None:
        a = cards[0]
        history = [HistoryEntry(card=a, difficulty=AnswerDifficulty.WRONG)] * 5
        history += [HistoryEntry(card=a, difficulty=AnswerDifficulty.EASY)] * 10

        progress = compute_progress({0: {a}}, history)
        assert progress.recent_performance == 1.0

    def test_mixed_window(self, cards) -> None:
        a = cards[0]
        history = [HistoryEntry(card=a, difficulty=AnswerDifficulty.EASY)] * 5
        history += [HistoryEntry(card=a, difficulty=AnswerDifficulty.HARD)] * 8

        progress = compute_progress({0: {a}}, history)
        assert progress.recent_performance == pytest.approx(2 / 10)

    def test_empty_buckets_with_history(self, cards) -> None:
        history = [HistoryEntry(card=cards[0], difficulty=AnswerDifficulty.EASY)]
        progress = compute_progress({0: set(), 3: set()}, history)

        assert progress.total_cards == 0
        assert progress.average_bucket == 0
        assert progress.recent_performance == 1.0

    def test_inputs_not_mutated(self, cards) -> None:
        buckets = {1: {cards[0]}}
        history = [HistoryEntry(card=cards[0], difficulty=AnswerDifficulty.HARD)]
        compute_progress(buckets, history)
        assert buckets == {1: {cards[0]}}
        assert len(history) == 1


class TestGetHint:
    def test_existing_hint_returned(self) -> None:
        assert get_hint(make_card("Question", hint="Existing Hint")) == "Existing Hint"

    def test_short_front(self) -> None:
        assert get_hint(make_card("Hi")) == "H*"

    def test_long_front(self) -> None:
        assert get_hint(make_card("Python Programming")) == "Pyt***************"

    def test_single_character(self) -> None:
        assert get_hint(make_card("X")) == "X"

    def test_empty_front_rejected(self) -> None:
        with pytest.raises(ValueError):
            get_hint(make_card(""))
