"""In-memory rating store.

Holds one rating record per item. The store is the only mutable state in an
engine: the comparison processor writes to it, and the boundary calculator,
tier assigner and confidence reporter read from it without keeping copies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import asdict, dataclass, replace
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class RatedItem:
    """Rating record for a single item."""

    item_id: str
    rating: float
    comparisons: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    confidence: float = 0.0

    def __post_init__(self) -> None:
        """Check the outcome counters.

        Raises:
            ValueError: If a counter is negative or the counters are inconsistent.
        """
        counters = {
            "comparisons": self.comparisons,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
        }
        negative = [name for name, value in counters.items() if value < 0]
        if negative:
            raise ValueError(
                f"Item {self.item_id}: counters must be non-negative ({', '.join(negative)})"
            )
        if self.comparisons != self.wins + self.losses + self.draws:
            raise ValueError(
                f"Item {self.item_id}: comparisons ({self.comparisons}) must equal "
                f"wins + losses + draws ({self.wins + self.losses + self.draws})"
            )

    @property
    def decisive(self) -> int:
        """Comparisons that ended in a win or a loss."""
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        """Win rate as proportion (0-1)."""
        if self.comparisons == 0:
            return 0.0
        return self.wins / self.comparisons

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RatedItem:
        """Create from dictionary.

        Raises:
            ValueError: If fields are missing or unknown, or the counters are
                inconsistent.
        """
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Item {data.get('item_id', '<unknown>')}: {e}") from e


class RatingStore:
    """Mapping from item id to its rating record.

    Attributes:
        initial_rating: Rating given to items created by the store.
    """

    def __init__(self, initial_rating: float = 1500.0) -> None:
        self.initial_rating = initial_rating
        self._items: dict[str, RatedItem] = {}

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RatedItem]:
        return iter(self._items.values())

    def get(self, item_id: str) -> RatedItem | None:
        """Get the record for an item, or None if it has never been seen."""
        return self._items.get(item_id)

    def get_or_create(self, item_id: str) -> RatedItem:
        """Get the record for an item, creating it with default values.

        Repeated calls for the same id return the same record.
        """
        item = self._items.get(item_id)
        if item is None:
            item = RatedItem(item_id=item_id, rating=self.initial_rating)
            self._items[item_id] = item
            logger.debug("Created item %s at rating %.1f", item_id, self.initial_rating)
        return item

    def seed(self, record: RatedItem) -> RatedItem:
        """Insert or replace a record restored from an external store."""
        item = replace(record)
        self._items[item.item_id] = item
        return item

    def all_sorted_by_rating_descending(self) -> list[RatedItem]:
        """Get all records, highest rating first.

        Equal ratings keep their insertion order.
        """
        return sorted(self._items.values(), key=lambda item: item.rating, reverse=True)

    def snapshot(self) -> list[RatedItem]:
        """Copy every record, in insertion order."""
        return [replace(item) for item in self._items.values()]

    def restore(self, snapshot: list[RatedItem]) -> None:
        """Replace the store contents with a previous snapshot."""
        self._items = {item.item_id: replace(item) for item in snapshot}

    def reset(self) -> None:
        """Remove all records."""
        self._items.clear()
