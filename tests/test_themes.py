"""Tests for luminal.core.themes – the purchasable color themes."""

from __future__ import annotations

from pathlib import Path

import pytest

from luminal.core.themes import load_themes


def test_default_themes():
    themes = load_themes()
    assert [(t.name, t.price) for t in themes] == [
        ("Midnight", 0),
        ("Ocean", 100),
        ("Forest", 150),
        ("Sunset", 150),
        ("Neon", 200),
        ("Golden", 250),
    ]
    assert themes[0].is_free
    assert not themes[1].is_free
    assert themes[0].background == "#1D1F30"
    assert themes[0].accent == "#FE284A"


def test_colors_are_normalised(tmp_path: Path):
    path = tmp_path / "themes.yaml"
    path.write_text("- name: Mint\n  background: '#0a0b0c'\n  accent: '#aabbcc'\n  price: 5\n", encoding="utf-8")
    [theme] = load_themes(path)
    assert (theme.background, theme.accent, theme.icon) == ("#0A0B0C", "#AABBCC", "palette")


def test_invalid_color(tmp_path: Path):
    path = tmp_path / "themes.yaml"
    path.write_text("- name: Bad\n  background: red\n  accent: '#FFFFFF'\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'Bad' has invalid 'background' color"):
        load_themes(path)


def test_not_a_list(tmp_path: Path):
    path = tmp_path / "themes.yaml"
    path.write_text("name: Solo\n", encoding="utf-8")
    with pytest.raises(ValueError, match="expected a YAML list"):
        load_themes(path)


def test_missing_name(tmp_path: Path):
    path = tmp_path / "themes.yaml"
    path.write_text("- background: '#000000'\n  accent: '#FFFFFF'\n", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid 'name'"):
        load_themes(path)
