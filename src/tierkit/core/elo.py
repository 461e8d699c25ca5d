"""ELO rating updates from pairwise comparisons.

Implements the standard ELO rating system used in chess, adapted for
ranking items from head-to-head choices:
- Adaptive K-factor (new items move faster, established items resist noise)
- Weekly time decay of stale comparisons
- Per-item rating confidence

References:
- https://en.wikipedia.org/wiki/Elo_rating_system
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from tierkit.core.config import (
    DECAY_PERIOD_DAYS,
    ELO_SCALE,
    ESTABLISHED_COMPARISONS,
    PROVISIONAL_COMPARISONS,
    EngineConfig,
)
from tierkit.core.errors import InvalidComparisonError
from tierkit.core.schemas import Comparison
from tierkit.core.store import RatedItem, RatingStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

SECONDS_PER_DAY = 86_400.0


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


def expected_score(rating_a: float, rating_b: float) -> float:
    """Calculate expected score for item A against item B.

    The expected score is the probability of A winning plus
    half the probability of a draw.

    Args:
        rating_a: Rating of item A.
        rating_b: Rating of item B.

    Returns:
        Expected score for item A (between 0 and 1).
    """
    exponent = (rating_b - rating_a) / ELO_SCALE
    return 1.0 / (1.0 + math.pow(10, exponent))


def adjusted_k(base_k: float, prior_comparisons: int) -> float:
    """Scale K by how established an item already is.

    - <10 comparisons: 1.5x (bootstrap)
    - 10-29 comparisons: 1x
    - 30+ comparisons: 0.75x (stable)
    """
    if prior_comparisons < PROVISIONAL_COMPARISONS:
        return base_k * 1.5
    if prior_comparisons < ESTABLISHED_COMPARISONS:
        return base_k
    return base_k * 0.75


def decay_multiplier(decay_factor: float, age_days: float) -> float:
    """Weight multiplier for a comparison of the given age.

    The factor is applied once per week of age. Comparisons from the future
    are treated as brand new.
    """
    return math.pow(decay_factor, max(0.0, age_days) / DECAY_PERIOD_DAYS)


def item_confidence(item: RatedItem, min_comparisons: int) -> float:
    """Calculate 0-100 confidence in an item's rating.

    Combines sample size, how decisive the item's record is, and a
    stability bonus that saturates at ten comparisons.
    """
    data_points = min(100.0, item.comparisons / min_comparisons * 50)

    consistency = 0.0
    if item.decisive > 0:
        consistency = abs(item.wins - item.losses) / item.decisive * 30

    stability = min(20.0, item.comparisons / 10 * 20)

    return min(100.0, data_points + consistency + stability)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass
class RatingUpdate:
    """Record of a single rating update."""

    item_a: str
    item_b: str
    winner: Literal["A", "B", "tie"]
    old_rating_a: float
    old_rating_b: float
    new_rating_a: float
    new_rating_b: float
    expected_a: float
    k_a: float
    k_b: float
    weight: float

    @property
    def delta_a(self) -> float:
        """Rating change for item A."""
        return self.new_rating_a - self.old_rating_a

    @property
    def delta_b(self) -> float:
        """Rating change for item B."""
        return self.new_rating_b - self.old_rating_b


@dataclass
class RejectedComparison:
    """A batch record that was skipped."""

    index: int
    reason: str


@dataclass
class BatchResult:
    """Outcome of processing a batch of comparisons.

    Attributes:
        updates: Applied updates, in chronological order.
        rejected: Malformed records that were skipped, by input position.
    """

    updates: list[RatingUpdate] = field(default_factory=list)
    rejected: list[RejectedComparison] = field(default_factory=list)

    @property
    def applied(self) -> int:
        """Number of comparisons applied."""
        return len(self.updates)

    @property
    def ok(self) -> bool:
        """Whether every record in the batch was applied."""
        return not self.rejected


class ComparisonProcessor:
    """Applies comparison outcomes to a rating store.

    Attributes:
        store: Rating store that receives the updates.
        config: Engine configuration (K-factor, decay, confidence).
    """

    def __init__(
        self,
        store: RatingStore,
        config: EngineConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize comparison processor.

        Args:
            store: Rating store to update.
            config: Engine configuration. Defaults to EngineConfig().
            clock: Returns "now" for decay. Defaults to the system clock.
        """
        self.store = store
        self.config = config or EngineConfig()
        self._clock = clock or utc_now

    def now(self) -> datetime:
        """Current reference time for decay."""
        return _as_utc(self._clock())

    def k_for(self, prior_comparisons: int) -> float:
        """K-factor for an item with the given comparison count."""
        if not self.config.adaptive_k:
            return self.config.k_factor
        return adjusted_k(self.config.k_factor, prior_comparisons)

    def weight_for(self, comparison: Comparison, now: datetime) -> float:
        """Effective weight of a comparison at the given time.

        Depends only on the comparison and ``now``, never on what was
        processed before it.
        """
        weight = comparison.confidence
        if self.config.decay_active:
            age_days = (now - comparison.timestamp).total_seconds() / SECONDS_PER_DAY
            weight *= decay_multiplier(self.config.decay_factor, age_days)
        return weight

    def process(self, comparison: Comparison | dict[str, Any]) -> RatingUpdate:
        """Record a pairwise comparison result and update ratings.

        Args:
            comparison: Comparison, or a mapping of its fields.

        Returns:
            Rating update details.

        Raises:
            InvalidComparisonError: If the comparison is malformed. Nothing
                is mutated in that case.
        """
        parsed = Comparison.parse(comparison)
        return self._apply(parsed, self.now())

    def process_batch(
        self, comparisons: Iterable[Comparison | dict[str, Any]]
    ) -> BatchResult:
        """Apply a batch of comparisons in timestamp order.

        Malformed records are skipped and reported; the rest of the batch is
        still applied. All records share one reference time for decay.

        Args:
            comparisons: Comparisons in any order.

        Returns:
            Applied updates and rejected records.
        """
        result = BatchResult()
        valid: list[Comparison] = []

        for index, raw in enumerate(comparisons):
            try:
                valid.append(Comparison.parse(raw))
            except InvalidComparisonError as e:
                logger.warning("Skipping comparison %d in batch: %s", index, e.reason)
                result.rejected.append(RejectedComparison(index=index, reason=e.reason))

        now = self.now()
        for comparison in sorted(valid, key=lambda c: c.timestamp):
            result.updates.append(self._apply(comparison, now))

        logger.debug(
            "Processed batch: %d applied, %d rejected",
            result.applied,
            len(result.rejected),
        )
        return result

    def _apply(self, comparison: Comparison, now: datetime) -> RatingUpdate:
        item_a = self.store.get_or_create(comparison.item_a)
        item_b = self.store.get_or_create(comparison.item_b)

        rating_a = item_a.rating
        rating_b = item_b.rating

        expected_a = expected_score(rating_a, rating_b)
        expected_b = 1.0 - expected_a

        outcome = comparison.outcome
        if outcome == "A":
            actual_a, actual_b = 1.0, 0.0
            item_a.wins += 1
            item_b.losses += 1
        elif outcome == "B":
            actual_a, actual_b = 0.0, 1.0
            item_a.losses += 1
            item_b.wins += 1
        else:  # tie
            actual_a, actual_b = 0.5, 0.5
            item_a.draws += 1
            item_b.draws += 1

        weight = self.weight_for(comparison, now)

        # K depends on the count before this comparison
        k_a = self.k_for(item_a.comparisons)
        k_b = self.k_for(item_b.comparisons)

        item_a.rating = rating_a + k_a * weight * (actual_a - expected_a)
        item_b.rating = rating_b + k_b * weight * (actual_b - expected_b)

        item_a.comparisons += 1
        item_b.comparisons += 1

        item_a.confidence = item_confidence(item_a, self.config.min_comparisons)
        item_b.confidence = item_confidence(item_b, self.config.min_comparisons)

        return RatingUpdate(
            item_a=item_a.item_id,
            item_b=item_b.item_id,
            winner=outcome,
            old_rating_a=rating_a,
            old_rating_b=rating_b,
            new_rating_a=item_a.rating,
            new_rating_b=item_b.rating,
            expected_a=expected_a,
            k_a=k_a,
            k_b=k_b,
            weight=weight,
        )
