"""Tests for the shared evaluation path."""

import pytest

from calcdeck import executor, registry
from calcdeck.config import Settings


class TestResolution:
    """Calculator lookup through executor.run."""

    def test_unknown_calculator(self) -> None:
        result = executor.run("does_not_exist", {})
        assert not result.success
        assert result.errors == ["Calculator 'does_not_exist' not found"]

    @pytest.mark.parametrize("calc_id", ["BMI", "Bmi", "bmi"])
    def test_id_case_is_forgiven(self, calc_id) -> None:
        result = executor.run(calc_id, {"weight": 70, "height": 175})
        assert result.success

    def test_hyphens_match_underscores(self) -> None:
        result = executor.run("body-surface-area", {"weight": 70, "height": 175})
        assert result.success


class TestVariables:
    """Normalization of incoming variables."""

    def test_unit_objects_are_converted(self, calc) -> None:
        result = calc("bmi", weight={"value": 154, "unit": "lb"}, height={"value": 175, "unit": "cm"})
        assert result.success
        assert result.audit_trace["inputs_used"] == {"weight": "154 lb", "height": "175 cm"}

    def test_plain_values_use_canonical_unit(self, calc) -> None:
        result = calc("bmi", weight=70, height=175)
        assert result.audit_trace["inputs_used"]["weight"] == "70 kg"

    def test_unit_names_ignore_case(self, ok) -> None:
        out = ok("bmi", weight={"value": 70, "unit": "KG"}, height={"value": 1.75, "unit": "M"})
        assert out["result"] == pytest.approx(22.8571, abs=1e-3)

    def test_unsupported_unit(self, calc) -> None:
        result = calc("bmi", weight={"value": 70, "unit": "furlong"}, height=175)
        assert not result.success
        assert result.errors[0]["field"] == "weight"
        assert result.errors[0]["message"].startswith("Unsupported unit 'furlong' for weight")
        assert "lb" in result.errors[0]["message"]

    def test_null_required_value(self, calc) -> None:
        result = calc("bmi", weight=None, height=175)
        assert not result.success
        assert result.errors == [{"field": "weight", "message": "Null value for required field"}]

    def test_null_optional_value_takes_default(self, ok) -> None:
        out = ok("travel_carbon_footprint", mode="flight", distance_km=1000, passengers=None)
        assert out["per_passenger_kg"] == pytest.approx(out["result"])

    def test_unknown_field_is_a_warning(self, calc) -> None:
        result = calc("bmi", weight=70, height=175, shoe_size=10)
        assert result.success
        assert result.warnings == ["Unrecognised field ignored: shoe_size"]

    def test_synonyms_and_field_case(self, ok) -> None:
        out = ok("bmi", **{"Body Weight": 70, "STATURE": 175})
        assert out["tier"] == "Normal weight"

    def test_categorical_case_is_forgiven(self, ok) -> None:
        male = ok("bmr", weight=70, height=175, age=30, sex="Male")
        assert male["result"] == pytest.approx(1648.75)

    def test_bad_categorical(self, calc) -> None:
        result = calc("bmr", weight=70, height=175, age=30, sex="other")
        assert not result.success
        assert result.errors[0]["field"] == "sex"

    def test_non_numeric_value(self, calc) -> None:
        result = calc("bmi", weight="heavy", height=175)
        assert not result.success
        assert result.errors[0]["field"] == "weight"

    def test_missing_required_field(self, calc) -> None:
        result = calc("bmi", weight=70)
        assert not result.success
        assert result.errors[0]["field"] == "height"

    def test_bad_date(self, calc) -> None:
        result = calc("date_difference", start_date="not a date", end_date="2024-01-01")
        assert not result.success
        assert result.errors[0]["field"] == "start_date"
        assert result.errors[0]["message"].startswith("Invalid date value")


class TestOutputs:
    """Shaping of the result envelope."""

    def test_floats_rounded_to_precision(self) -> None:
        result = executor.run("bmi", {"weight": 70, "height": 175}, settings=Settings(precision=2))
        assert result.outputs["result"] == 22.86
        assert result.outputs["healthy_weight_min"] == 56.66

    def test_nested_values_are_rounded(self, ok) -> None:
        out = ok("bmr", weight=70.123, height=175, age=30, sex="male")
        for value in out["tdee"].values():
            assert value == round(value, 4)

    def test_booleans_survive_rounding(self, ok) -> None:
        assert ok("batting_average", runs=80, dismissals=0)["not_outs_only"] is True

    def test_audit_log_is_kept(self, calc) -> None:
        result = calc("bmi", weight=70, height=175)
        assert result.audit_trace["log"] == ["BMI = kg / m^2"]

    def test_calculation_exception_is_reported(self, calc, monkeypatch) -> None:
        def boom(values):
            raise ZeroDivisionError("boom")

        monkeypatch.setitem(registry.CALCULATORS["bmi"], "run", boom)
        result = calc("bmi", weight=70, height=175)
        assert not result.success
        assert result.errors == ["Calculation error: boom"]

    def test_error_messages_format(self, calc) -> None:
        result = calc("bmi", weight=None, height=175)
        assert result.error_messages() == ["weight: Null value for required field"]
