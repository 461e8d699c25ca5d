"""Rating and tier engine.

Single entry point for the surrounding application:
- Seed items (fresh ids or records restored from an external store)
- Record comparison outcomes
- Compute tier boundaries, tier assignments and confidence reports

The engine owns one RatingStore and shares it with its components. It is
synchronous and performs no locking; callers serialize access.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tierkit.core.confidence import ConfidenceReporter, ConfidenceSummary
from tierkit.core.config import EngineConfig
from tierkit.core.elo import BatchResult, Clock, ComparisonProcessor, RatingUpdate
from tierkit.core.schemas import Comparison, TierConfidence, TierDefinition
from tierkit.core.store import RatedItem, RatingStore
from tierkit.core.tiers import (
    TierAssigner,
    TierBoundaryCalculator,
    build_tier_definitions,
    collapse_boundaries,
    validate_tier_definitions,
)

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """Engine lifecycle states."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass
class EngineSummary:
    """Overview of the current ratings and tier split."""

    boundaries: list[int]
    confidence: int
    item_count: int
    total_comparisons: int
    average_rating: float
    rating_range: float
    has_enough_data: bool
    metadata: dict[str, Any] = field(default_factory=dict)


class TierEngine:
    """Engine turning pairwise comparisons into ratings and tiers.

    Attributes:
        config: Engine configuration.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize tier engine.

        Args:
            config: Engine configuration. Defaults to EngineConfig().
            clock: Returns "now" for comparison decay. Defaults to the
                system clock; inject a fixed clock for reproducible results.
        """
        self.config = config or EngineConfig()
        self._store = RatingStore(initial_rating=self.config.initial_rating)
        self._processor = ComparisonProcessor(self._store, self.config, clock)
        self._boundaries = TierBoundaryCalculator(self._store)
        self._assigner = TierAssigner(self._store)
        self._reporter = ConfidenceReporter(self._store, self._assigner, self.config)
        self._state = EngineState.UNINITIALIZED

    @property
    def state(self) -> EngineState:
        """Current lifecycle state."""
        return self._state

    @property
    def store(self) -> RatingStore:
        """The rating store owned by this engine."""
        return self._store

    @property
    def item_count(self) -> int:
        return len(self._store)

    def _ensure_ready(self) -> None:
        if self._state == EngineState.UNINITIALIZED:
            logger.debug("Engine used before initialize(); initializing lazily")
            self._state = EngineState.READY

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def initialize(self, items: Iterable[str | RatedItem | dict[str, Any]]) -> None:
        """Seed the store and move to READY.

        Args:
            items: Item ids to create at the initial rating, or rating
                records (RatedItem or its dict form) restored from an
                external store. Existing ids are left untouched; records
                replace them.
        """
        seeded = 0
        for entry in items:
            if isinstance(entry, RatedItem):
                self._store.seed(entry)
            elif isinstance(entry, dict):
                self._store.seed(RatedItem.from_dict(entry))
            else:
                self._store.get_or_create(entry)
            seeded += 1
        self._state = EngineState.READY
        logger.debug("Initialized engine with %d items (%d total)", seeded, len(self._store))

    def record_comparison(self, comparison: Comparison | dict[str, Any]) -> RatingUpdate:
        """Record a single comparison.

        Raises:
            InvalidComparisonError: If the comparison is malformed.
        """
        self._ensure_ready()
        return self._processor.process(comparison)

    def record_comparisons(
        self, comparisons: Iterable[Comparison | dict[str, Any]]
    ) -> BatchResult:
        """Record a batch of comparisons in timestamp order.

        Malformed records are skipped and listed in the result.
        """
        self._ensure_ready()
        return self._processor.process_batch(comparisons)

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def compute_boundaries(self, tier_count: int | None = None) -> list[int]:
        """Compute pyramid tier boundaries for the current ratings.

        Raises:
            InvalidTierCountError: If tier_count < 1.
        """
        self._ensure_ready()
        count = self.config.default_tier_count if tier_count is None else tier_count
        return self._boundaries.compute_boundaries(count)

    def generate_tiers(
        self,
        tier_count: int | None = None,
        labels: Sequence[str] | None = None,
        collapse: bool = False,
    ) -> list[TierDefinition]:
        """Compute boundaries and wrap them in labelled tier definitions.

        Args:
            tier_count: Number of tiers (config default if None).
            labels: Optional labels, top tier first.
            collapse: Drop empty tiers.

        Returns:
            Tier definitions, top first.
        """
        boundaries = self.compute_boundaries(tier_count)
        if collapse:
            boundaries = collapse_boundaries(boundaries)
        return build_tier_definitions(boundaries, labels)

    def compute_tiers(
        self, tier_definitions: Sequence[TierDefinition]
    ) -> dict[str, TierDefinition]:
        """Assign every item to a tier.

        Raises:
            InvalidTierDefinitionError: If the tiers are not contiguous or do
                not cover every item.
        """
        self._ensure_ready()
        validate_tier_definitions(tier_definitions, len(self._store))
        return self._assigner.assign(tier_definitions)

    def get_confidence_report(
        self, tier_definitions: Sequence[TierDefinition]
    ) -> list[TierConfidence]:
        """Per-item placement confidence, highest rating first."""
        self._ensure_ready()
        validate_tier_definitions(tier_definitions, len(self._store))
        return self._reporter.report(tier_definitions)

    def summarize_confidence(
        self, tier_definitions: Sequence[TierDefinition]
    ) -> ConfidenceSummary:
        """Aggregate confidence report with recommendations."""
        self._ensure_ready()
        validate_tier_definitions(tier_definitions, len(self._store))
        return self._reporter.summarize(tier_definitions)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def get_ratings(self) -> dict[str, float]:
        """Current rating of every item."""
        self._ensure_ready()
        return {item.item_id: item.rating for item in self._store}

    def get_rating(self, item_id: str) -> float | None:
        """Current rating of one item, or None if it has never been seen."""
        item = self._store.get(item_id)
        return item.rating if item is not None else None

    def get_rankings(self) -> list[tuple[str, float]]:
        """Get items ranked by rating (highest first)."""
        return [
            (item.item_id, item.rating)
            for item in self._store.all_sorted_by_rating_descending()
        ]

    def get_leaderboard(self) -> list[dict[str, Any]]:
        """Get formatted leaderboard with ranks."""
        return [
            {
                "rank": i + 1,
                "item_id": item.item_id,
                "rating": round(item.rating, 1),
                "comparisons": item.comparisons,
                "wins": item.wins,
                "losses": item.losses,
                "draws": item.draws,
                "confidence": round(item.confidence),
            }
            for i, item in enumerate(self._store.all_sorted_by_rating_descending())
        ]

    def summarize(self, tier_count: int | None = None) -> EngineSummary:
        """Summarize ratings, boundaries and overall data sufficiency.

        Overall confidence is halved while any item has fewer than
        ``min_comparisons`` comparisons.
        """
        boundaries = self.compute_boundaries(tier_count)
        items = list(self._store)

        has_enough_data = all(
            item.comparisons >= self.config.min_comparisons for item in items
        )
        average_confidence = 0.0
        average_rating = 0.0
        rating_range = 0.0
        if items:
            average_confidence = sum(item.confidence for item in items) / len(items)
            ratings = [item.rating for item in items]
            average_rating = sum(ratings) / len(ratings)
            rating_range = max(ratings) - min(ratings)

        confidence = average_confidence if has_enough_data else average_confidence * 0.5

        return EngineSummary(
            boundaries=boundaries,
            confidence=round(confidence),
            item_count=len(items),
            total_comparisons=sum(item.comparisons for item in items) // 2,
            average_rating=average_rating,
            rating_range=rating_range,
            has_enough_data=has_enough_data,
            metadata={
                "tier_count": len(boundaries) - 1,
                "k_factor": self.config.k_factor,
                "decay_active": self.config.decay_active,
            },
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def snapshot(self) -> list[RatedItem]:
        """Copy all rating records (for atomic before/after views of a batch)."""
        return self._store.snapshot()

    def restore(self, snapshot: list[RatedItem]) -> None:
        """Replace all rating records with a snapshot."""
        self._store.restore(snapshot)
        self._state = EngineState.READY

    def reset(self) -> None:
        """Remove all items and return to UNINITIALIZED."""
        self._store.reset()
        self._state = EngineState.UNINITIALIZED


def create_engine(clock: Clock | None = None, **settings: Any) -> TierEngine:
    """Factory function to create a tier engine.

    Args:
        clock: Optional clock for decay calculations.
        **settings: EngineConfig overrides (k_factor, decay_factor, ...).

    Returns:
        Configured TierEngine.
    """
    return TierEngine(config=EngineConfig(**settings), clock=clock)
