"""
Tests for the palette catalogue and nearest-color lookup.
"""

import pytest

from imglab.models.palette import (
    PALETTE_CATEGORIES,
    PALETTES,
    Palette,
    find_closest_palette_color,
    get_palette,
    hex_to_rgb,
)


class TestHexToRgb:

    @pytest.mark.parametrize(
        "value, expected",
        [("#FFE4B5", (255, 228, 181)), ("ffe4b5", (255, 228, 181)), ("#000000", (0, 0, 0)), (" #0a0B0c ", (10, 11, 12))],
    )
    def test_parses(self, value, expected):
        assert hex_to_rgb(value) == expected

    @pytest.mark.parametrize("value", ["", "#FFF", "#GGGGGG", "#1234567", "red"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError, match="Invalid hex color"):
            hex_to_rgb(value)


class TestCatalogue:

    def test_thirteen_palettes_in_three_categories(self):
        assert len(PALETTES) == 13
        assert {p.category for p in PALETTES.values()} == set(PALETTE_CATEGORIES)

    def test_every_palette_has_eight_colors(self):
        for palette in PALETTES.values():
            assert len(palette.colors) == 8

    def test_lookup(self):
        zorn = get_palette("zorn")

        assert zorn.name == "Anders Zorn"
        assert zorn.colors[0] == "#FFE4B5"
        assert zorn.to_dict()["colors"] == list(zorn.colors)

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown palette: sepia"):
            get_palette("sepia")

    def test_rejects_bad_category(self):
        with pytest.raises(ValueError, match="category"):
            Palette(name="x", category="seasonal", colors=("#000000",))


class TestFindClosestPaletteColor:

    def test_nearest_by_rgb_distance(self):
        colors = ["#000000", "#FFFFFF", "#FF0000"]

        assert find_closest_palette_color(200, 30, 30, colors) == "#FF0000"
        assert find_closest_palette_color(100, 100, 100, colors) == "#000000"
        assert find_closest_palette_color(140, 140, 140, colors) == "#FFFFFF"

    def test_returns_entry_as_written(self):
        assert find_closest_palette_color(0, 0, 0, ["#aBcDeF", "#000000"]) == "#000000"
        assert find_closest_palette_color(171, 205, 239, ["#aBcDeF", "#000000"]) == "#aBcDeF"

    def test_first_wins_on_tie(self):
        assert find_closest_palette_color(128, 0, 0, ["#FF0000", "#010000"]) == "#FF0000"

    def test_empty_palette(self):
        with pytest.raises(ValueError):
            find_closest_palette_color(0, 0, 0, [])
