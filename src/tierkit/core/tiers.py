"""Tier boundaries and tier assignment.

Splits the rating-sorted item list into ordered tiers. Boundaries follow a
pyramid distribution over the rating range: tier weights grow geometrically
from the top, so the top tier covers the narrowest band of ratings and lower
tiers progressively wider ones.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from tierkit.core.config import PYRAMID_RATIO
from tierkit.core.errors import InvalidTierCountError, InvalidTierDefinitionError
from tierkit.core.schemas import TierColor, TierDefinition
from tierkit.core.store import RatingStore

logger = logging.getLogger(__name__)

DEFAULT_TIER_LABELS: tuple[str, ...] = ("S", "A", "B", "C", "D", "F")

TIER_COLORS: dict[str, TierColor] = {
    "S": TierColor(primary="#FF4500", secondary="#DC143C", text="#ffffff"),
    "A": TierColor(primary="#FF8C00", secondary="#FF7F50", text="#ffffff"),
    "B": TierColor(primary="#FFEB3B", secondary="#FDD835", text="#1a1a1a"),
    "C": TierColor(primary="#2196F3", secondary="#1E88E5", text="#ffffff"),
    "D": TierColor(primary="#7986CB", secondary="#5C6BC0", text="#ffffff"),
    "F": TierColor(primary="#607D8B", secondary="#546E7A", text="#ffffff"),
}

TIER_DESCRIPTIONS: dict[str, str] = {
    "S": "Legendary tier - best of the best",
    "A": "Excellent tier - top quality",
    "B": "Solid tier - good quality",
    "C": "Average tier - middle ground",
    "D": "Poor tier - significant issues",
    "F": "Lowest tier - needs improvement",
}


def _check_tier_count(tier_count: int) -> None:
    if tier_count < 1:
        raise InvalidTierCountError(tier_count)


def equal_boundaries(item_count: int, tier_count: int) -> list[int]:
    """Split positions into tiers of ceil(n / tier_count) items.

    Args:
        item_count: Number of ranked items.
        tier_count: Number of tiers.

    Returns:
        tier_count + 1 boundary indices from 0 to item_count.

    Raises:
        InvalidTierCountError: If tier_count < 1.
    """
    _check_tier_count(tier_count)
    tier_size = math.ceil(item_count / tier_count)
    boundaries = [0]
    for i in range(1, tier_count):
        boundaries.append(min(i * tier_size, item_count))
    boundaries.append(item_count)
    return boundaries


def pyramid_percentile(boundary_index: int, tier_count: int) -> float:
    """Rating-range percentile at which a pyramid boundary sits.

    Tier j (0 = top) has weight PYRAMID_RATIO ** j. Boundary i separates
    tiers i-1 and i; it sits at the share of total weight held by tiers
    i and below.

    Args:
        boundary_index: Boundary number, 1 <= boundary_index < tier_count.
        tier_count: Number of tiers.

    Returns:
        Percentile in (0, 1).
    """
    weights = [math.pow(PYRAMID_RATIO, j) for j in range(tier_count)]
    return sum(weights[boundary_index:]) / sum(weights)


def collapse_boundaries(boundaries: Sequence[int]) -> list[int]:
    """Drop empty tiers by de-duplicating boundaries."""
    return sorted(set(boundaries))


class TierBoundaryCalculator:
    """Computes tier boundaries from the current ratings.

    Attributes:
        store: Rating store (read only).
    """

    def __init__(self, store: RatingStore) -> None:
        self.store = store

    def compute_boundaries(self, tier_count: int) -> list[int]:
        """Calculate tier boundaries from ratings.

        Falls back to an equal split when there are no items or every item
        has the same rating. Coincident boundaries describe empty tiers and
        are kept, so the result always has tier_count + 1 entries.

        Args:
            tier_count: Number of tiers.

        Returns:
            Non-decreasing boundary indices, first 0 and last item count.

        Raises:
            InvalidTierCountError: If tier_count < 1.
        """
        _check_tier_count(tier_count)
        ratings = [item.rating for item in self.store.all_sorted_by_rating_descending()]
        if not ratings:
            return equal_boundaries(0, tier_count)

        max_rating = ratings[0]
        min_rating = ratings[-1]
        rating_range = max_rating - min_rating
        if rating_range == 0:
            return equal_boundaries(len(ratings), tier_count)

        boundaries = [0]
        for i in range(1, tier_count):
            threshold = min_rating + rating_range * pyramid_percentile(i, tier_count)
            boundaries.append(self._first_below(ratings, threshold))
        boundaries.append(len(ratings))

        return sorted(boundaries)

    @staticmethod
    def _first_below(ratings: list[float], threshold: float) -> int:
        """Index of the first rating below threshold, or len(ratings)."""
        for position, rating in enumerate(ratings):
            if rating < threshold:
                return position
        return len(ratings)


def build_tier_definitions(
    boundaries: Sequence[int],
    labels: Sequence[str] | None = None,
) -> list[TierDefinition]:
    """Create tier definitions for a boundary list.

    Labels come from ``labels`` when given, then from the standard
    S/A/B/C/D/F ladder, then "Tier N".

    Args:
        boundaries: Boundary indices as returned by compute_boundaries.
        labels: Optional labels, top tier first.

    Returns:
        One definition per tier, top first.

    Raises:
        InvalidTierDefinitionError: If a given label is blank.
    """
    definitions: list[TierDefinition] = []
    for i in range(len(boundaries) - 1):
        if labels and i < len(labels):
            label = labels[i].strip()
            if not label:
                raise InvalidTierDefinitionError(f"Label for tier {i + 1} is blank")
        elif i < len(DEFAULT_TIER_LABELS):
            label = DEFAULT_TIER_LABELS[i]
        else:
            label = f"Tier {i + 1}"

        definitions.append(
            TierDefinition(
                label=label,
                description=TIER_DESCRIPTIONS.get(label),
                color=TIER_COLORS.get(label, TierColor()),
                start_position=boundaries[i],
                end_position=boundaries[i + 1],
            )
        )
    return definitions


def validate_tier_definitions(
    definitions: Sequence[TierDefinition], item_count: int
) -> None:
    """Check that tiers are contiguous and cover every item.

    Raises:
        InvalidTierDefinitionError: On gaps, overlaps, or missing coverage.
    """
    if not definitions:
        if item_count > 0:
            raise InvalidTierDefinitionError(f"No tiers defined for {item_count} items")
        return

    if definitions[0].start_position != 0:
        raise InvalidTierDefinitionError(
            f"First tier {definitions[0].label} starts at "
            f"{definitions[0].start_position}, expected 0"
        )

    for previous, current in zip(definitions, definitions[1:]):
        if current.start_position != previous.end_position:
            raise InvalidTierDefinitionError(
                f"Tier {current.label} starts at {current.start_position} but "
                f"tier {previous.label} ends at {previous.end_position}"
            )

    if definitions[-1].end_position < item_count:
        raise InvalidTierDefinitionError(
            f"Tiers cover {definitions[-1].end_position} positions, "
            f"but there are {item_count} items"
        )


class TierAssigner:
    """Maps items to tiers by their position in the rating order.

    Attributes:
        store: Rating store (read only).
    """

    def __init__(self, store: RatingStore) -> None:
        self.store = store

    def assign(self, tier_definitions: Sequence[TierDefinition]) -> dict[str, TierDefinition]:
        """Assign tiers to items.

        Args:
            tier_definitions: Tiers, top first.

        Returns:
            Mapping of item id to its tier, in rating order. Items outside
            every tier are left out.
        """
        sorted_items = self.store.all_sorted_by_rating_descending()
        lookup = self._position_lookup(tier_definitions, len(sorted_items))

        assignments: dict[str, TierDefinition] = {}
        for position, item in enumerate(sorted_items):
            tier = lookup[position]
            if tier is not None:
                assignments[item.item_id] = tier
        return assignments

    def group_by_tier(
        self, tier_definitions: Sequence[TierDefinition]
    ) -> dict[str, list[str]]:
        """Get item ids per tier, top tier first. Empty tiers are included."""
        groups: dict[str, list[str]] = {tier.tier_id: [] for tier in tier_definitions}
        for item_id, tier in self.assign(tier_definitions).items():
            groups[tier.tier_id].append(item_id)
        return groups

    @staticmethod
    def _position_lookup(
        tier_definitions: Sequence[TierDefinition], item_count: int
    ) -> list[TierDefinition | None]:
        lookup: list[TierDefinition | None] = [None] * item_count
        for tier in tier_definitions:
            for position in range(tier.start_position, min(tier.end_position, item_count)):
                # First matching tier wins
                if lookup[position] is None:
                    lookup[position] = tier
        return lookup
