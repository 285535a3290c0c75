"""Tests for home improvement estimators."""

import pytest


class TestPaintCoverage:
    """Tests for paint_coverage."""

    def test_room_with_ceiling(self, ok) -> None:
        out = ok("paint_coverage", length=12, width=10, height=8, coverage_per_unit=350)
        assert out["paintable_area"] == pytest.approx(472.0)
        assert out["total_coverage_area"] == pytest.approx(944.0)
        assert out["result"] == 3
        assert out["tier"] == "Small Project"
        assert out["coverage_efficiency"] == "Standard"
        assert out["area_unit"] == "sq ft"

    def test_walls_only(self, ok) -> None:
        out = ok("paint_coverage", length=12, width=10, height=8, coverage_per_unit=350,
                 include_ceiling=False, coats=1)
        assert out["paintable_area"] == pytest.approx(352.0)
        assert out["result"] == 2


class TestTileFlooring:
    """Tests for tile_flooring."""

    def test_square_foot_tiles(self, ok) -> None:
        out = ok("tile_flooring", area_length=10, area_width=10.5, tile_length=12, tile_width=12)
        assert out["tiles_without_wastage"] == 105
        assert out["result"] == 116

    def test_metric_tiles(self, ok) -> None:
        out = ok("tile_flooring", area_length=3, area_width=4, tile_length=30, tile_width=30,
                 wastage=0, unit="meters")
        assert out["tile_area"] == pytest.approx(0.09)
        assert out["result"] == 134


class TestStaircase:
    """Tests for staircase."""

    def test_standard_stair(self, ok) -> None:
        out = ok("staircase", total_rise=105)
        assert out["result"] == 14
        assert out["riser_height"] == pytest.approx(7.5)
        assert out["tread_depth"] == pytest.approx(9.5)
        assert out["total_run"] == pytest.approx(123.5)
        assert out["tier"] == "Safe Design"
        assert out["complexity"] == "Medium Complexity"

    def test_tall_risers_need_review(self, ok) -> None:
        out = ok("staircase", total_rise=36, ideal_riser=9)
        assert out["tier"] == "Review Required"

    def test_rise_too_small(self, calc) -> None:
        result = calc("staircase", total_rise=2)
        assert not result.success
        assert result.errors[0]["field"] == "total_rise"


class TestWallpaperAndDecking:
    """Tests for wallpaper_rolls and decking_boards."""

    def test_wallpaper(self, ok) -> None:
        out = ok("wallpaper_rolls", wall_height=2.4, wall_width=4, roll_length=10, roll_width=0.53)
        assert out["drops"] == 8
        assert out["drops_per_roll"] == 4
        assert out["result"] == 3

    def test_drop_longer_than_roll(self, ok) -> None:
        out = ok("wallpaper_rolls", wall_height=12, wall_width=1, roll_length=10, roll_width=0.5)
        assert out["drops_per_roll"] == 0
        assert out["result"] == 3

    def test_decking(self, ok) -> None:
        out = ok("decking_boards", deck_length=16, deck_width=12, board_width=5.5, joist_spacing=16)
        assert out["rows"] == 26
        assert out["result"] == 28
        assert out["deck_area_sq_ft"] == pytest.approx(192.0)
        assert out["complexity"] == "Standard"
        assert out["tier"] == "Small Project"


class TestHvacAndInsulation:
    """Tests for hvac_sizing and insulation_thickness."""

    def test_hvac(self, ok) -> None:
        out = ok("hvac_sizing", area=1000)
        assert out["result"] == pytest.approx(25000.0)
        assert out["tons"] == pytest.approx(2.0833, abs=1e-3)
        assert out["tier"] == "Medium Home"

    def test_hvac_in_square_meters(self, ok) -> None:
        out = ok("hvac_sizing", area=100, unit="meters", climate="hot")
        assert out["area_sq_ft"] == pytest.approx(1076.39)
        assert out["result"] == pytest.approx(32291.7)

    def test_insulation(self, ok) -> None:
        out = ok("insulation_thickness", target_r_value=19)
        assert out["result"] == pytest.approx(5.9375)
        assert out["comparison"]["spray_foam_closed"] == pytest.approx(2.9231, abs=1e-3)


class TestSoilMulch:
    """Tests for soil_mulch."""

    def test_feet_and_inches(self, ok) -> None:
        out = ok("soil_mulch", length=10, width=4, depth=3)
        assert out["result"] == pytest.approx(10.0)
        assert out["bags"] == 5
        assert out["tier"] == "Standard"
        assert out["project_size"] == "Medium"

    def test_metric(self, ok) -> None:
        out = ok("soil_mulch", length=2, width=1, depth=7, unit="meters")
        assert out["result"] == pytest.approx(0.14)
        assert out["bags"] == 3
        assert out["tier"] == "Light"
