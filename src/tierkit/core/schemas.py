"""Pydantic schemas for tierkit data structures.

These schemas provide validated, type-safe data structures for:
- Comparison events fed into the engine
- Tier definitions (label, colour, index range)
- Per-item tier confidence reports

All schemas accept both snake_case field names and the camelCase keys used
by the surrounding application (``itemA``, ``startPosition``, ...).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from tierkit.core.errors import InvalidComparisonError

DRAW_SENTINELS = frozenset({"draw", "tie"})


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Comparisons
# ============================================================================


class Comparison(_Schema):
    """A single head-to-head outcome between two items."""

    model_config = ConfigDict(frozen=True)

    item_a: str = Field(..., min_length=1, description="First item id")
    item_b: str = Field(..., min_length=1, description="Second item id")
    winner: str | None = Field(None, description="Winning item id, or None for a draw")
    timestamp: datetime = Field(..., description="When the comparison was made")
    confidence: float = Field(
        1.0,
        gt=0.0,
        le=1.0,
        description="Caller-supplied weight, reduced by decay before use",
    )

    @field_validator("winner", mode="before")
    @classmethod
    def normalize_draw(cls, v: Any, info: ValidationInfo) -> Any:
        """Map the "draw"/"tie" sentinels to None unless they name an item."""
        if isinstance(v, str) and v.lower() in DRAW_SENTINELS:
            if v not in (info.data.get("item_a"), info.data.get("item_b")):
                return None
        return v

    @field_validator("timestamp")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_items(self) -> Comparison:
        """Ensure the two sides differ and the winner is one of them."""
        if self.item_a == self.item_b:
            raise ValueError(f"item_a and item_b must differ (both are {self.item_a!r})")
        if self.winner is not None and self.winner not in (self.item_a, self.item_b):
            raise ValueError(f"winner {self.winner!r} is neither {self.item_a!r} nor {self.item_b!r}")
        return self

    @property
    def outcome(self) -> Literal["A", "B", "tie"]:
        """Winner expressed as a side."""
        if self.winner is None:
            return "tie"
        return "A" if self.winner == self.item_a else "B"

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @classmethod
    def parse(cls, data: Comparison | dict[str, Any]) -> Comparison:
        """Validate raw comparison data.

        Args:
            data: An existing Comparison or a mapping of its fields.

        Returns:
            Validated Comparison.

        Raises:
            InvalidComparisonError: If the data does not describe a scorable
                comparison.
        """
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            reason = "; ".join(str(err["msg"]) for err in e.errors())
            item_a = item_b = None
            if isinstance(data, dict):
                item_a = data.get("item_a", data.get("itemA"))
                item_b = data.get("item_b", data.get("itemB"))
            raise InvalidComparisonError(reason, item_a=item_a, item_b=item_b) from e


# ============================================================================
# Tiers
# ============================================================================


def tier_id_for(label: str) -> str:
    """Derive a stable tier id from a label ("A+" -> "tier-a-plus")."""
    slug = label.lower().replace("-", "-minus").replace("+", "-plus")
    slug = re.sub(r"[^a-z0-9]+", "-", slug).strip("-")
    return f"tier-{slug}"


class TierColor(_Schema):
    """Colour descriptor for rendering a tier."""

    primary: str = "#888888"
    secondary: str = "#666666"
    text: str = "#ffffff"


class TierDefinition(_Schema):
    """A labelled, contiguous band of the rating-sorted item list.

    The band covers the half-open index range [start_position, end_position).
    """

    tier_id: str = Field("", description="Stable id, derived from label if empty")
    label: str = Field(..., min_length=1, description="Short label (S, A, B, ...)")
    display_name: str = Field("", description="Human-readable name")
    description: str | None = None
    color: TierColor = Field(default_factory=TierColor)
    start_position: int = Field(..., ge=0, description="First index, inclusive")
    end_position: int = Field(..., ge=0, description="Last index, exclusive")

    @model_validator(mode="after")
    def fill_defaults(self) -> TierDefinition:
        """Check the range and derive id and display name from the label."""
        if self.end_position < self.start_position:
            raise ValueError(
                f"end_position ({self.end_position}) is before "
                f"start_position ({self.start_position})"
            )
        if not self.tier_id:
            self.tier_id = tier_id_for(self.label)
        if not self.display_name:
            self.display_name = f"{self.label} Tier"
        return self

    @property
    def size(self) -> int:
        """Number of positions in the tier."""
        return self.end_position - self.start_position

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def contains(self, index: int) -> bool:
        """Whether a sorted index falls inside this tier."""
        return self.start_position <= index < self.end_position


# ============================================================================
# Confidence
# ============================================================================


class ConfidenceFactors(_Schema):
    """Breakdown of the signals behind a placement confidence."""

    data_points: int = Field(..., ge=0, description="Comparisons the item took part in")
    consistency: int = Field(..., ge=0, le=100, description="Item rating confidence")
    proximity: int = Field(..., ge=0, le=100, description="Distance from the tier edges")
    separation: int = Field(..., ge=0, le=100, description="Gap to the next-ranked item")


class TierConfidence(_Schema):
    """How confidently an item sits in its assigned tier."""

    item_id: str
    tier: TierDefinition
    confidence: int = Field(..., ge=0, le=100)
    factors: ConfidenceFactors
    alternative_tier: TierDefinition | None = None
    alternative_confidence: int | None = Field(None, ge=0, le=100)

    @property
    def has_alternative(self) -> bool:
        """Whether the item could plausibly belong to a neighbouring tier."""
        return self.alternative_tier is not None
