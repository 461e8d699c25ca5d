"""Confidence scoring for tier placements.

Each placement is scored 0-100 from three signals:
- the item's own rating confidence (sample size, consistency, stability)
- proximity: how far the item sits from the edges of its tier
- separation: the rating gap to the next-ranked item

Items closer to one edge of their tier than the other are offered the
neighbouring tier on that side as an alternative.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from tierkit.core.config import SEPARATION_SCALE, EngineConfig
from tierkit.core.schemas import ConfidenceFactors, TierConfidence, TierDefinition
from tierkit.core.store import RatedItem, RatingStore
from tierkit.core.tiers import TierAssigner

logger = logging.getLogger(__name__)

ITEM_WEIGHT = 0.4
PROXIMITY_WEIGHT = 0.3
SEPARATION_WEIGHT = 0.3


def proximity_score(position: int, start: int, end: int) -> float:
    """Score 0-100 for how central a position is within [start, end).

    The centre of the tier scores 100 and either edge scores 0. A tier
    holding a single item has no distance to normalise by; it scores 100
    rather than 0, since that item is both centre and edge.
    """
    half = (end - start - 1) / 2
    if half <= 0:
        return 100.0
    nearest_edge = min(position - start, end - position - 1)
    return min(100.0, max(0.0, nearest_edge / half * 100))


def separation_score(item: RatedItem, next_item: RatedItem | None) -> float:
    """Score 0-100 for the rating gap to the next-ranked item."""
    if next_item is None:
        return 100.0
    gap = item.rating - next_item.rating
    return min(100.0, max(0.0, gap / SEPARATION_SCALE * 100))


@dataclass
class ConfidenceSummary:
    """Aggregate view of a confidence report."""

    overall_confidence: int
    tier_confidences: dict[str, int]
    low_confidence: list[TierConfidence]
    boundary_items: list[TierConfidence]
    recommendations: list[str] = field(default_factory=list)
    confidences: list[TierConfidence] = field(default_factory=list)

    @property
    def low_confidence_count(self) -> int:
        return len(self.low_confidence)

    @property
    def boundary_item_count(self) -> int:
        return len(self.boundary_items)


class ConfidenceReporter:
    """Scores how confidently each item sits in its tier.

    Attributes:
        store: Rating store (read only).
        assigner: Tier assigner over the same store.
        config: Engine configuration (thresholds).
    """

    def __init__(
        self,
        store: RatingStore,
        assigner: TierAssigner | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.assigner = assigner or TierAssigner(store)
        self.config = config or EngineConfig()

    def report(self, tier_definitions: Sequence[TierDefinition]) -> list[TierConfidence]:
        """Get tier confidence for each assigned item.

        Args:
            tier_definitions: Tiers, top first.

        Returns:
            One entry per assigned item, highest rating first.
        """
        sorted_items = self.store.all_sorted_by_rating_descending()
        item_count = len(sorted_items)
        assignments = self.assigner.assign(tier_definitions)
        tier_index = {id(tier): i for i, tier in enumerate(tier_definitions)}

        confidences: list[TierConfidence] = []
        for position, item in enumerate(sorted_items):
            tier = assignments.get(item.item_id)
            if tier is None:
                continue

            start = tier.start_position
            end = min(tier.end_position, item_count)
            proximity = proximity_score(position, start, end)

            next_item = sorted_items[position + 1] if position + 1 < item_count else None
            separation = separation_score(item, next_item)

            alternative: TierDefinition | None = None
            dist_to_start = position - start
            dist_to_end = end - position - 1
            current = tier_index[id(tier)]
            if dist_to_start < dist_to_end:
                alternative = self._neighbour(tier_definitions, current, -1, item_count)
            elif dist_to_end < dist_to_start:
                alternative = self._neighbour(tier_definitions, current, 1, item_count)

            score = round(
                ITEM_WEIGHT * item.confidence
                + PROXIMITY_WEIGHT * proximity
                + SEPARATION_WEIGHT * separation
            )

            confidences.append(
                TierConfidence(
                    item_id=item.item_id,
                    tier=tier,
                    confidence=min(100, max(0, score)),
                    factors=ConfidenceFactors(
                        data_points=item.comparisons,
                        consistency=round(item.confidence),
                        proximity=round(proximity),
                        separation=round(separation),
                    ),
                    alternative_tier=alternative,
                    alternative_confidence=(
                        round(100 - proximity) if alternative is not None else None
                    ),
                )
            )

        return confidences

    @staticmethod
    def _neighbour(
        tier_definitions: Sequence[TierDefinition],
        current: int,
        step: int,
        item_count: int,
    ) -> TierDefinition | None:
        """Nearest tier in the given direction that holds at least one item."""
        index = current + step
        while 0 <= index < len(tier_definitions):
            tier = tier_definitions[index]
            if min(tier.end_position, item_count) > tier.start_position:
                return tier
            index += step
        return None

    def summarize(self, tier_definitions: Sequence[TierDefinition]) -> ConfidenceSummary:
        """Generate an aggregate confidence report with recommendations.

        Args:
            tier_definitions: Tiers, top first.

        Returns:
            Overall and per-tier confidence, flagged items and advice.
        """
        confidences = self.report(tier_definitions)

        overall = 0
        if confidences:
            overall = round(sum(c.confidence for c in confidences) / len(confidences))

        tier_confidences: dict[str, int] = {}
        for tier in tier_definitions:
            scores = [c.confidence for c in confidences if c.tier.tier_id == tier.tier_id]
            if scores:
                tier_confidences[tier.tier_id] = round(sum(scores) / len(scores))

        low = [
            c for c in confidences if c.confidence < self.config.low_confidence_threshold
        ]
        boundary = [
            c
            for c in confidences
            if c.alternative_confidence is not None
            and c.alternative_confidence >= self.config.boundary_confidence_threshold
        ]

        recommendations: list[str] = []
        if low:
            recommendations.append(
                f"{len(low)} item(s) have low confidence scores. Consider more comparisons."
            )
        if boundary:
            recommendations.append(
                f"{len(boundary)} item(s) are near tier boundaries and could shift with more data."
            )

        total_comparisons = sum(item.comparisons for item in self.store) // 2
        recommended = len(self.store) * self.config.min_comparisons
        if total_comparisons < recommended:
            recommendations.append(
                f"More comparisons would improve confidence. "
                f"Current: {total_comparisons}, Recommended: {recommended}+"
            )
        if confidences and overall < 70:
            recommendations.append(
                "Overall confidence is below 70%. Results may change with additional data."
            )

        logger.debug(
            "Confidence summary: overall=%d low=%d boundary=%d",
            overall,
            len(low),
            len(boundary),
        )

        return ConfidenceSummary(
            overall_confidence=overall,
            tier_confidences=tier_confidences,
            low_confidence=low,
            boundary_items=boundary,
            recommendations=recommendations,
            confidences=confidences,
        )
