"""Tests for luminal.core.achievements – the YAML achievement catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from luminal.core.achievements import (
    Requirement,
    RequirementKind,
    load_achievements,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "achievements.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaultCatalog:
    def test_seven_achievements(self):
        achievements = load_achievements()
        assert [a.id for a in achievements] == [
            "first_steps",
            "explorer",
            "master_navigator",
            "speed_demon",
            "score_hunter",
            "perfect_streak",
            "dedication",
        ]

    def test_requirements(self):
        rules = {a.id: a.requirement for a in load_achievements()}
        assert rules["explorer"] == Requirement(RequirementKind.COMPLETE_LEVELS, 5)
        assert rules["speed_demon"] == Requirement(RequirementKind.COMPLETE_IN_TIME, 30)
        assert rules["score_hunter"] == Requirement(RequirementKind.REACH_SCORE, 10000)
        assert rules["dedication"] == Requirement(RequirementKind.PLAY_DAYS, 7)


class TestLoader:
    def test_description_defaults_to_requirement(self, tmp_path: Path):
        path = _write(tmp_path, "- id: x\n  title: X\n  requirement: {kind: reach_score, amount: 50}\n")
        [achievement] = load_achievements(path)
        assert achievement.description == "Reach a total score of 50"
        assert achievement.icon == "star"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_achievements(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "text, message",
        [
            ("id: x\n", "expected a YAML list"),
            ("- just a string\n", "not a mapping"),
            ("- title: X\n", "invalid 'id'"),
            ("- id: x\n  requirement: {kind: reach_score, amount: 1}\n", "invalid 'title'"),
            ("- id: x\n  title: X\n", "missing 'requirement'"),
            ("- id: x\n  title: X\n  requirement: {kind: fly, amount: 1}\n", "unknown requirement kind"),
            ("- id: x\n  title: X\n  requirement: {kind: reach_score, amount: 0}\n", "positive 'amount'"),
            ("- id: x\n  title: X\n  requirement: {kind: reach_score, amount: true}\n", "positive 'amount'"),
            (
                "- id: x\n  title: X\n  requirement: {kind: reach_score, amount: 1}\n"
                "- id: x\n  title: Y\n  requirement: {kind: reach_score, amount: 2}\n",
                "duplicate id",
            ),
        ],
    )
    def test_invalid_catalogs(self, tmp_path: Path, text: str, message: str):
        with pytest.raises(ValueError, match=message):
            load_achievements(_write(tmp_path, text))


class TestDescribe:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            (RequirementKind.COMPLETE_LEVELS, "Complete 3 levels"),
            (RequirementKind.COMPLETE_IN_TIME, "Complete a level in under 3 seconds"),
            (RequirementKind.PERFECT_STREAK, "Get 3 perfect scores in a row"),
            (RequirementKind.PLAY_DAYS, "Play for 3 consecutive days"),
        ],
    )
    def test_text(self, kind: RequirementKind, expected: str):
        assert Requirement(kind, 3).describe() == expected
