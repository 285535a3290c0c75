"""Tests for size and height conversions."""

import pytest


class TestBodyToClothingSize:
    """Tests for body_to_clothing_size."""

    def test_mens_sizes(self, ok) -> None:
        out = ok("body_to_clothing_size", gender="men", chest=39, waist=32)
        assert out["result"] == 40
        assert out["shirt_sizes"]["EU"] == 50
        assert out["pants_sizes"] == {"US": 32, "UK": 32, "EU": 91, "India": 79, "Japan": 85}

    def test_womens_sizes(self, ok) -> None:
        out = ok("body_to_clothing_size", gender="women", bust=36, waist=28)
        assert out["top_sizes"] == {"US": 6, "UK": 4, "EU": 36, "India": 32, "Japan": 12}
        assert out["bottom_sizes"]["US"] == 4

    def test_measurements_in_cm(self, ok) -> None:
        out = ok("body_to_clothing_size", gender="men", chest={"value": 99.06, "unit": "cm"}, waist=32)
        assert out["result"] == 40

    def test_men_need_chest(self, calc) -> None:
        result = calc("body_to_clothing_size", gender="men", waist=32)
        assert not result.success
        assert result.errors[0]["field"] == "chest"

    def test_women_need_bust(self, calc) -> None:
        result = calc("body_to_clothing_size", gender="women", waist=28)
        assert not result.success
        assert result.errors[0]["field"] == "bust"


class TestClothingSizeChart:
    """Tests for clothing_size_chart."""

    def test_womens_us_lookup(self, ok) -> None:
        out = ok("clothing_size_chart", gender="women", size="6")
        assert out["UK"] == "10"
        assert out["EU"] == "38"
        assert out["Intl"] == "M"

    def test_lookup_ignores_case(self, ok) -> None:
        out = ok("clothing_size_chart", gender="men", from_system="Intl", size="xl")
        assert out["US"] == "40"

    def test_unknown_size_lists_available(self, calc) -> None:
        result = calc("clothing_size_chart", gender="kids", size="99")
        assert not result.success
        assert result.errors[0]["field"] == "size"
        assert "2T" in result.errors[0]["message"]


class TestShoeSize:
    """Tests for shoe_size and foot_length_size."""

    def test_mens_us(self, ok) -> None:
        out = ok("shoe_size", gender="men", size=10)
        assert out["UK"] == pytest.approx(9.5)
        assert out["EU"] == pytest.approx(43.0)
        assert out["CM"] == pytest.approx(27.13)

    def test_from_eu(self, ok) -> None:
        out = ok("shoe_size", gender="men", from_system="eu", size=43)
        assert out["result"] == pytest.approx(10.0)
        assert out["CM"] == pytest.approx(28.6667, abs=1e-3)

    def test_womens_uk(self, ok) -> None:
        out = ok("shoe_size", gender="women", from_system="uk", size=5)
        assert out["US"] == pytest.approx(7.0)

    def test_foot_length(self, ok) -> None:
        out = ok("foot_length_size", foot_length=27)
        assert out["result"] == 10
        assert out["uk"] == 9
        assert out["eu"] == 58
        assert out["jp"] == 27


class TestRingSize:
    """Tests for ring_size."""

    def test_from_circumference(self, ok) -> None:
        out = ok("ring_size", value="54.4")
        assert out["result"] == pytest.approx(7.5)
        assert out["UK"] == "O"
        assert out["closest_standard"] == "7.5 (UK O)"

    def test_from_us_size(self, ok) -> None:
        out = ok("ring_size", measure="us", value="7")
        assert out["diameter_mm"] == pytest.approx(16.9)
        assert out["UK"] == "N"

    def test_from_uk_letter(self, ok) -> None:
        out = ok("ring_size", measure="uk", value="n")
        assert out["result"] == pytest.approx(7.0)

    def test_bad_value(self, calc) -> None:
        result = calc("ring_size", measure="diameter", value="abc")
        assert not result.success
        assert result.errors[0]["field"] == "value"

    def test_unknown_letter(self, calc) -> None:
        assert not calc("ring_size", measure="uk", value="A").success


class TestGloveAndHat:
    """Tests for glove_size and hat_size."""

    def test_glove(self, ok) -> None:
        out = ok("glove_size", hand_circumference=19)
        assert out["result"] == pytest.approx(7.5)
        assert out["tier"] == "S"
        assert out["eu"] == 19

    def test_hat_eighths(self, ok) -> None:
        out = ok("hat_size", head_circumference=57)
        assert out["result"] == "7 1/8"
        assert out["tier"] == "M"

    def test_hat_from_inches(self, ok) -> None:
        out = ok("hat_size", head_circumference={"value": 22.5, "unit": "in"})
        assert out["inches"] == pytest.approx(22.5)


class TestHeightConverter:
    """Tests for height_converter."""

    def test_from_cm(self, ok) -> None:
        out = ok("height_converter", cm=180)
        assert out["feet"] == 5
        assert out["inches"] == pytest.approx(10.8661, abs=1e-3)
        assert out["formatted"] == "5' 10.9\""

    def test_from_feet_and_inches(self, ok) -> None:
        out = ok("height_converter", feet=6, inches=0)
        assert out["result"] == pytest.approx(182.88)
        assert out["meters"] == pytest.approx(1.8288)

    def test_needs_a_height(self, calc) -> None:
        result = calc("height_converter")
        assert not result.success
        assert result.errors[0]["field"] == "cm"
