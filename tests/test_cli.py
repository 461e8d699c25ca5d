"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from tierkit import __version__
from tierkit.cli import app, load_comparison_file

runner = CliRunner()

NOW = "2026-01-15T12:00:00"


def make_comparison_file(tmp_path: Path, data: Any) -> Path:
    path = tmp_path / "comparisons.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def comparison_file(tmp_path: Path) -> Path:
    return make_comparison_file(
        tmp_path,
        {
            "items": ["alpha", "beta", "gamma", "delta"],
            "comparisons": [
                {"itemA": "alpha", "itemB": "beta", "winner": "alpha", "timestamp": "2026-01-10T09:00:00"},
                {"itemA": "alpha", "itemB": "gamma", "winner": "alpha", "timestamp": "2026-01-11T09:00:00"},
                {"itemA": "beta", "itemB": "gamma", "winner": "beta", "timestamp": "2026-01-12T09:00:00"},
                {"itemA": "x", "itemB": "x", "winner": "x", "timestamp": "2026-01-12T09:00:00"},
                {"itemA": "gamma", "itemB": "delta", "winner": None, "timestamp": "2026-01-13T09:00:00"},
            ],
        },
    )


class TestVersionAndHelp:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "tierkit" in result.stdout
        assert f"v{__version__}" in result.stdout

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "rank" in result.stdout
        assert "boundaries" in result.stdout
        assert "info" in result.stdout

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "Usage:" in result.stdout


class TestLoadComparisonFile:
    def test_list_form(self, tmp_path: Path):
        path = make_comparison_file(tmp_path, [{"item_a": "a", "item_b": "b"}])
        items, comparisons = load_comparison_file(path)
        assert items == []
        assert len(comparisons) == 1

    def test_object_form(self, comparison_file: Path):
        items, comparisons = load_comparison_file(comparison_file)
        assert items == ["alpha", "beta", "gamma", "delta"]
        assert len(comparisons) == 5

    def test_scalar_rejected(self, tmp_path: Path):
        path = make_comparison_file(tmp_path, 42)
        with pytest.raises(ValueError, match="top level"):
            load_comparison_file(path)


class TestRankCommand:
    def test_rank(self, comparison_file: Path):
        result = runner.invoke(app, ["rank", str(comparison_file), "--now", NOW])

        assert result.exit_code == 0
        assert "Applied 4 comparisons" in result.stdout
        assert "Skipped record 3" in result.stdout
        assert "Tier List" in result.stdout
        assert "alpha" in result.stdout
        assert "delta" in result.stdout
        assert "Overall confidence" in result.stdout

    def test_rank_custom_labels(self, comparison_file: Path):
        result = runner.invoke(
            app,
            ["rank", str(comparison_file), "--tiers", "2", "--labels", "Gold,Silver", "--no-decay"],
        )

        assert result.exit_code == 0
        assert "Gold" in result.stdout

    def test_rank_ignores_empty_labels(self, comparison_file: Path):
        result = runner.invoke(
            app,
            ["rank", str(comparison_file), "--tiers", "2", "--labels", "Gold,", "--now", NOW],
        )

        assert result.exit_code == 0
        assert result.exception is None
        assert "Gold" in result.stdout

    def test_rank_invalid_tier_count(self, comparison_file: Path):
        result = runner.invoke(app, ["rank", str(comparison_file), "--tiers", "0"])

        assert result.exit_code == 1
        assert "at least 1" in result.stdout

    def test_rank_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["rank", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Could not read" in result.stdout

    def test_rank_malformed_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["rank", str(path)])

        assert result.exit_code == 1
        assert "Could not read" in result.stdout

    def test_rank_bad_item_record(self, tmp_path: Path):
        path = make_comparison_file(
            tmp_path,
            {"items": [{"item_id": "a", "rating": 1500.0, "comparisons": 2}], "comparisons": []},
        )

        result = runner.invoke(app, ["rank", str(path)])

        assert result.exit_code == 1
        assert "Invalid item record" in result.stdout


class TestBoundariesCommand:
    def test_boundaries(self, comparison_file: Path):
        result = runner.invoke(
            app, ["boundaries", str(comparison_file), "--tiers", "2", "--now", NOW]
        )

        assert result.exit_code == 0
        assert "Boundaries: [0," in result.stdout
        assert "Tier Ranges" in result.stdout

    def test_boundaries_invalid_tier_count(self, comparison_file: Path):
        result = runner.invoke(app, ["boundaries", str(comparison_file), "--tiers", "0"])
        assert result.exit_code == 1


class TestInfoCommand:
    def test_info(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Configuration" in result.stdout
        assert "K-Factor" in result.stdout
        assert "Model Constants" in result.stdout

    def test_info_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TIERKIT_K_FACTOR", "12")

        result = runner.invoke(app, ["info"])

        assert "12.0" in result.stdout
