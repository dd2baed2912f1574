"""Tests for luminal.ui.colors – palettes and color blending."""

from __future__ import annotations

from luminal.core.models import NodeType
from luminal.core.themes import Theme
from luminal.ui.colors import NODE_COLORS, BoardColors, palette_for, blend_hex


# ===========================================================================
# BoardColors / NODE_COLORS
# ===========================================================================

class TestBoardColors:
    def test_background_is_hex(self):
        assert BoardColors.BACKGROUND.startswith("#")
        assert len(BoardColors.BACKGROUND) == 7

    def test_every_node_type_has_a_color(self):
        assert set(NODE_COLORS) == set(NodeType)

    def test_node_colors_are_distinct(self):
        assert len(set(NODE_COLORS.values())) == len(NODE_COLORS)


# ===========================================================================
# palette_for
# ===========================================================================

class TestPaletteFor:
    def test_keeps_theme_base_colors(self):
        theme = Theme(name="Ocean", background="#0A1929", accent="#00B4D8", price=100)
        palette = palette_for(theme)
        assert palette.background == "#0A1929"
        assert palette.accent == "#00B4D8"
        assert palette.edge_active == "#00B4D8"

    def test_surface_is_lighter_than_background(self):
        theme = Theme(name="Dark", background="#000000", accent="#FF0000", price=0)
        palette = palette_for(theme)
        assert int(palette.surface[1:3], 16) > 0
        assert int(palette.edge[1:3], 16) > int(palette.surface[1:3], 16)


# ===========================================================================
# blend_hex – happy paths
# ===========================================================================

class TestBlendHexHappy:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_midpoint(self):
        result = blend_hex("#000000", "#FFFFFF", 0.5)
        r = int(result[1:3], 16)
        g = int(result[3:5], 16)
        b = int(result[5:7], 16)
        assert 126 <= r <= 128
        assert 126 <= g <= 128
        assert 126 <= b <= 128

    def test_same_color(self):
        assert blend_hex("#ABCDEF", "#ABCDEF", 0.5) == "#ABCDEF"

    def test_lowercase_input_gives_uppercase_output(self):
        assert blend_hex("#ff0000", "#ff0000", 0.3) == "#FF0000"


# ===========================================================================
# blend_hex – clamping and invalid inputs
# ===========================================================================

class TestBlendHexEdgeCases:
    def test_t_negative_clamped_to_zero(self):
        assert blend_hex("#FF0000", "#0000FF", -1.0) == "#FF0000"

    def test_t_greater_than_one_clamped(self):
        assert blend_hex("#FF0000", "#0000FF", 2.0) == "#0000FF"

    def test_a_missing_hash(self):
        assert blend_hex("FF0000", "#0000FF", 0.5) == "FF0000"

    def test_b_wrong_length(self):
        assert blend_hex("#FF0000", "#FFF", 0.5) == "#FF0000"

    def test_invalid_hex_chars(self):
        assert blend_hex("#GGHHII", "#000000", 0.5) == "#GGHHII"

    def test_whitespace_padding(self):
        assert blend_hex("  #FF0000  ", "  #0000FF  ", 0.0) == "#FF0000"
