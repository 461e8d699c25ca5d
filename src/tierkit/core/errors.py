"""Exception types raised by the rating and tier engine.

All errors are raised synchronously by the call that triggered them.
Referencing an unknown item id is never an error: the store creates it.
"""

from __future__ import annotations


class TierkitError(Exception):
    """Base class for all tierkit errors."""


class InvalidComparisonError(TierkitError, ValueError):
    """Raised when a comparison record cannot be scored."""

    def __init__(
        self,
        reason: str,
        item_a: str | None = None,
        item_b: str | None = None,
    ) -> None:
        """Initialize invalid comparison error.

        Args:
            reason: Human-readable description of the problem.
            item_a: First item id, if it could be read.
            item_b: Second item id, if it could be read.
        """
        self.reason = reason
        self.item_a = item_a
        self.item_b = item_b
        super().__init__(f"Invalid comparison: {reason}")


class InvalidTierCountError(TierkitError, ValueError):
    """Raised when a boundary computation is asked for fewer than one tier."""

    def __init__(self, tier_count: int) -> None:
        self.tier_count = tier_count
        super().__init__(f"Tier count must be at least 1, got {tier_count}")


class InvalidTierDefinitionError(TierkitError, ValueError):
    """Raised when tier definitions overlap, leave gaps, or miss items."""
