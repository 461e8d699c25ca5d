"""tierkit: Pairwise-comparison ratings and tier lists.

tierkit turns a stream of head-to-head choices between items into ratings
and S/A/B/C-style tiers. Key principles:
- Pairwise over Absolute: items are only ever compared against each other
- Recent over Stale: older comparisons weigh less
- Pyramid over Equal: top tiers are narrower than lower ones
- Honest Placement: every tier placement comes with a confidence score
"""

from tierkit.core.config import EngineConfig
from tierkit.core.engine import TierEngine, create_engine

__version__ = "1.0.0"
__all__ = [
    "EngineConfig",
    "TierEngine",
    "__version__",
    "create_engine",
]
