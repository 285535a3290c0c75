"""Tests for shared parsing, conversion and tiering helpers."""

from datetime import date, datetime

import pytest

from calcdeck.helpers import (
    UnitError,
    _convert,
    _err,
    _ok,
    _parse_bool,
    _parse_date,
    _parse_num,
    _parse_records,
    _parse_series,
    _round_half_up,
    _tier,
)

BANDS = [(30, "high"), (20, "medium"), (10, "low")]


class TestTier:
    """Tests for _tier."""

    def test_descending_inclusive(self) -> None:
        assert _tier(30, BANDS, "none") == "high"
        assert _tier(29.9, BANDS, "none") == "medium"
        assert _tier(5, BANDS, "none") == "none"

    def test_descending_strict(self) -> None:
        assert _tier(30, BANDS, "none", strict=True) == "medium"

    def test_ascending(self) -> None:
        bands = [(10, "low"), (20, "medium"), (30, "high")]
        assert _tier(10, bands, "off-scale", ascending=True) == "low"
        assert _tier(10, bands, "off-scale", ascending=True, strict=True) == "medium"
        assert _tier(31, bands, "off-scale", ascending=True) == "off-scale"


class TestConvert:
    """Tests for _convert."""

    def test_plain_values_pass_through(self) -> None:
        assert _convert(70, "kg", "weight") == 70
        assert _convert("70", "kg", "weight") == "70"

    def test_pounds_to_kilograms(self) -> None:
        assert _convert({"value": 100, "unit": "lb"}, "kg", "weight") == pytest.approx(45.359237)

    def test_inches_to_centimetres(self) -> None:
        assert _convert({"value": "12", "unit": "in"}, "cm", "length") == pytest.approx(30.48)

    def test_glucose_mmol(self) -> None:
        assert _convert({"value": 5.5, "unit": "mmol/L"}, "mg/dL", "glucose") == pytest.approx(99.099)

    def test_percent_units_need_no_family(self) -> None:
        assert _convert({"value": 12, "unit": "pct"}, "%") == pytest.approx(12.0)

    def test_canonical_unit_short_circuits(self) -> None:
        assert _convert({"value": 5, "unit": "USD"}, "usd") == 5.0

    def test_missing_unit(self) -> None:
        assert _convert({"value": 5}, "kg", "weight") == 5

    def test_unknown_unit(self) -> None:
        with pytest.raises(UnitError, match="Unsupported unit 'parsec' for height"):
            _convert({"value": 5, "unit": "parsec"}, "cm", "length", "height")

    def test_unit_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            _convert({"value": 5, "unit": "lb"}, "years")


class TestParsers:
    """Tests for the raw value parsers."""

    def test_parse_num(self) -> None:
        assert _parse_num({"value": "3.5"}) == 3.5
        assert _parse_num("abc", default=-1) == -1
        assert _parse_num(None) == 0.0

    @pytest.mark.parametrize("raw,expected", [("yes", True), ("TRUE", True), ("0", False), (1, True),
                                              ({"value": "y"}, True), (None, False)])
    def test_parse_bool(self, raw, expected) -> None:
        assert _parse_bool(raw) is expected

    def test_parse_date(self) -> None:
        assert _parse_date("2024-03-01") == date(2024, 3, 1)
        assert _parse_date("2024-03-01T10:30:00") == date(2024, 3, 1)
        assert _parse_date(datetime(2024, 3, 1, 10, 30)) == date(2024, 3, 1)
        assert _parse_date("") is None
        with pytest.raises(ValueError):
            _parse_date("03/01/2024")

    def test_parse_series(self) -> None:
        assert _parse_series("100, -20 30;40") == [100.0, -20.0, 30.0, 40.0]
        assert _parse_series([1, 2]) == [1, 2]
        assert _parse_series(5) == [5.0]
        assert _parse_series("1, two") == ["1", "two"]

    def test_parse_records(self) -> None:
        assert _parse_records("3x10x60; 4x8x80\n5x5x100") == ["3x10x60", "4x8x80", "5x5x100"]
        assert _parse_records({"sets": 3}) == [{"sets": 3}]


class TestEnvelopes:
    """Tests for rounding and result envelopes."""

    @pytest.mark.parametrize("val,expected", [(2.5, 3), (-2.5, -2), (2.4, 2)])
    def test_round_half_up(self, val, expected) -> None:
        assert _round_half_up(val) == expected

    def test_round_half_up_digits(self) -> None:
        assert _round_half_up(1.25, 1) == pytest.approx(1.3)

    def test_ok(self) -> None:
        data = _ok(12.0, ["step"], tier="Good", extra=1)
        assert data["success"] is True
        assert data["outputs"] == {"result": 12.0, "tier": "Good", "extra": 1}
        assert data["audit_trace"] == {"log": ["step"]}

    def test_ok_without_tier(self) -> None:
        assert "tier" not in _ok(1, [])["outputs"]

    def test_err(self) -> None:
        assert _err("bad", "rate")["errors"] == [{"field": "rate", "message": "bad"}]
        assert _err("bad")["errors"] == ["bad"]
