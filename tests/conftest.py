"""Pytest configuration and fixtures for tierkit tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from tierkit.core.config import EngineConfig
from tierkit.core.elo import ComparisonProcessor
from tierkit.core.engine import TierEngine
from tierkit.core.store import RatedItem, RatingStore

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TIERKIT_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("TIERKIT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def now() -> datetime:
    """Provide the fixed reference time."""
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Provide a clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def config() -> EngineConfig:
    """Provide default configuration."""
    return EngineConfig()


@pytest.fixture
def store() -> RatingStore:
    """Provide empty rating store."""
    return RatingStore()


@pytest.fixture
def processor(
    store: RatingStore, config: EngineConfig, clock: Callable[[], datetime]
) -> ComparisonProcessor:
    """Provide comparison processor over a fresh store."""
    return ComparisonProcessor(store, config, clock)


@pytest.fixture
def engine(clock: Callable[[], datetime]) -> TierEngine:
    """Provide fresh engine with a fixed clock."""
    return TierEngine(clock=clock)


@pytest.fixture
def make_comparison() -> Callable[..., dict[str, Any]]:
    """Build comparison dicts made ``days_ago`` days before FIXED_NOW."""

    def _make(
        item_a: str,
        item_b: str,
        winner: str | None,
        days_ago: float = 0.0,
        confidence: float = 1.0,
    ) -> dict[str, Any]:
        return {
            "item_a": item_a,
            "item_b": item_b,
            "winner": winner,
            "timestamp": FIXED_NOW - timedelta(days=days_ago),
            "confidence": confidence,
        }

    return _make


@pytest.fixture
def descending_store() -> RatingStore:
    """Store with five items rated 1800 down to 1400."""
    store = RatingStore()
    for item_id, rating in zip("ABCDE", [1800.0, 1700.0, 1600.0, 1500.0, 1400.0]):
        store.seed(RatedItem(item_id=item_id, rating=rating))
    return store
