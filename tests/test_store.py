"""Tests for the in-memory rating store."""

from __future__ import annotations

import pytest

from tierkit.core.store import RatedItem, RatingStore


class TestRatedItem:
    """Tests for RatedItem dataclass."""

    def test_win_rate(self) -> None:
        item = RatedItem(item_id="a", rating=1500.0, comparisons=4, wins=3, losses=1)
        assert item.win_rate == pytest.approx(0.75)
        assert item.decisive == 4

    def test_win_rate_no_comparisons(self) -> None:
        assert RatedItem(item_id="a", rating=1500.0).win_rate == 0.0

    def test_dict_round_trip(self) -> None:
        item = RatedItem(
            item_id="a",
            rating=1612.5,
            comparisons=5,
            wins=3,
            losses=1,
            draws=1,
            confidence=71.0,
        )
        assert RatedItem.from_dict(item.to_dict()) == item

    def test_from_dict_rejects_bad_counters(self) -> None:
        with pytest.raises(ValueError, match="must equal"):
            RatedItem.from_dict(
                {"item_id": "a", "rating": 1500.0, "comparisons": 5, "wins": 1}
            )

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Item a"):
            RatedItem.from_dict({"item_id": "a", "rating": 1500.0, "score": 3})

    def test_from_dict_rejects_missing_rating(self) -> None:
        with pytest.raises(ValueError):
            RatedItem.from_dict({"item_id": "a"})

    def test_inconsistent_counters_rejected(self) -> None:
        with pytest.raises(ValueError, match="must equal"):
            RatedItem(item_id="a", rating=1500.0, comparisons=3, wins=1)

    def test_negative_counters_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            RatedItem(item_id="a", rating=1500.0, comparisons=0, wins=1, losses=-1)


class TestRatingStore:
    """Tests for RatingStore class."""

    def test_get_unknown(self, store: RatingStore) -> None:
        assert store.get("missing") is None

    def test_get_or_create_defaults(self, store: RatingStore) -> None:
        item = store.get_or_create("a")
        assert item.rating == 1500.0
        assert item.comparisons == 0
        assert item.confidence == 0.0

    def test_get_or_create_is_idempotent(self, store: RatingStore) -> None:
        first = store.get_or_create("a")
        first.rating = 1700.0
        second = store.get_or_create("a")

        assert second is first
        assert second.rating == 1700.0
        assert len(store) == 1

    def test_custom_initial_rating(self) -> None:
        store = RatingStore(initial_rating=1000.0)
        assert store.get_or_create("a").rating == 1000.0

    def test_contains_and_iter(self, store: RatingStore) -> None:
        store.get_or_create("a")
        store.get_or_create("b")

        assert "a" in store
        assert "c" not in store
        assert [item.item_id for item in store] == ["a", "b"]

    def test_seed_copies_record(self, store: RatingStore) -> None:
        record = RatedItem(item_id="a", rating=1650.0)
        seeded = store.seed(record)
        record.rating = 1000.0

        assert seeded is not record
        assert store.get("a").rating == 1650.0

    def test_sorted_descending(self, descending_store: RatingStore) -> None:
        descending_store.get_or_create("F").rating = 1750.0
        ids = [item.item_id for item in descending_store.all_sorted_by_rating_descending()]
        assert ids == ["A", "F", "B", "C", "D", "E"]

    def test_sort_keeps_insertion_order_for_ties(self, store: RatingStore) -> None:
        for item_id in ["x", "y", "z"]:
            store.get_or_create(item_id)
        ids = [item.item_id for item in store.all_sorted_by_rating_descending()]
        assert ids == ["x", "y", "z"]

    def test_snapshot_is_independent(self, store: RatingStore) -> None:
        store.get_or_create("a")
        snapshot = store.snapshot()
        store.get("a").rating = 1800.0

        assert snapshot[0].rating == 1500.0

    def test_restore(self, store: RatingStore) -> None:
        store.get_or_create("a")
        snapshot = store.snapshot()
        store.get("a").rating = 1800.0
        store.get_or_create("b")

        store.restore(snapshot)

        assert len(store) == 1
        assert store.get("a").rating == 1500.0

    def test_reset(self, store: RatingStore) -> None:
        store.get_or_create("a")
        store.reset()
        assert len(store) == 0
