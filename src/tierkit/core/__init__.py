"""Core rating and tier engine components."""

from tierkit.core.confidence import ConfidenceReporter, ConfidenceSummary
from tierkit.core.config import EngineConfig
from tierkit.core.elo import (
    BatchResult,
    ComparisonProcessor,
    RatingUpdate,
    RejectedComparison,
    expected_score,
)
from tierkit.core.engine import EngineState, EngineSummary, TierEngine, create_engine
from tierkit.core.errors import (
    InvalidComparisonError,
    InvalidTierCountError,
    InvalidTierDefinitionError,
    TierkitError,
)
from tierkit.core.schemas import (
    Comparison,
    ConfidenceFactors,
    TierColor,
    TierConfidence,
    TierDefinition,
)
from tierkit.core.store import RatedItem, RatingStore
from tierkit.core.tiers import (
    TierAssigner,
    TierBoundaryCalculator,
    build_tier_definitions,
    collapse_boundaries,
)

__all__ = [
    "BatchResult",
    "Comparison",
    "ComparisonProcessor",
    "ConfidenceFactors",
    "ConfidenceReporter",
    "ConfidenceSummary",
    "EngineConfig",
    "EngineState",
    "EngineSummary",
    "InvalidComparisonError",
    "InvalidTierCountError",
    "InvalidTierDefinitionError",
    "RatedItem",
    "RatingStore",
    "RatingUpdate",
    "RejectedComparison",
    "TierAssigner",
    "TierBoundaryCalculator",
    "TierColor",
    "TierConfidence",
    "TierDefinition",
    "TierEngine",
    "TierkitError",
    "build_tier_definitions",
    "collapse_boundaries",
    "create_engine",
    "expected_score",
]
