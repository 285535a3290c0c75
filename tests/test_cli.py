"""Tests for the calcdeck command line."""

import argparse
import json

import pytest

from calcdeck.cli import check_result, load_cases, main, parse_var

CASES_HEADER = "Row Number,Calculator Id,Variables,Ground Truth Answer,Lower Limit,Upper Limit\n"


def _write_cases(path, rows):
    path.write_text(CASES_HEADER + "".join(rows), encoding="utf-8")
    return path


class TestParseVar:
    """Tests for parse_var."""

    def test_value_with_unit(self) -> None:
        assert parse_var("weight=180:lb") == ("weight", {"value": "180", "unit": "lb"})

    def test_plain_value(self) -> None:
        assert parse_var("sex=male") == ("sex", "male")

    def test_digits_after_colon_are_not_a_unit(self) -> None:
        assert parse_var("start=12:30") == ("start", "12:30")

    def test_missing_equals(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_var("weight")


class TestCheckResult:
    """Tests for check_result."""

    def test_text_exact_match(self) -> None:
        assert check_result("7 1/8", "7 1/8", "", "")["comparison"] == "exact_match"
        assert check_result("7", "7 1/8", "", "")["comparison"] == "mismatch"

    def test_explicit_limits(self) -> None:
        chk = check_result(112.5, "112.5", "112", "113")
        assert chk["correct"] is True
        assert chk["comparison"] == "in_range"

    def test_default_tolerance(self) -> None:
        assert check_result(104.9, "100", "", "")["correct"] is True
        assert check_result(105.1, "100", "", "")["comparison"] == "out_of_range"

    def test_negative_truth_keeps_limits_ordered(self) -> None:
        chk = check_result(-10.2, "-10", "", "")
        assert chk["lower"] < chk["upper"]
        assert chk["correct"] is True

    def test_unparseable_result(self) -> None:
        assert check_result(None, "10", "", "")["comparison"] == "parse_error"
        assert check_result(True, "1", "", "")["comparison"] == "parse_error"


class TestListAndInfo:
    """Tests for the list, info and schema subcommands."""

    def test_list_category(self, capsys) -> None:
        assert main(["list", "--category", "fun-games"]) == 0
        out = capsys.readouterr().out
        assert "love_percentage" in out
        assert "bmi" not in out

    def test_list_all_prints_category_counts(self, capsys) -> None:
        assert main(["list"]) == 0
        assert "cricket (9)" in capsys.readouterr().out

    def test_list_no_match(self, capsys) -> None:
        assert main(["list", "--search", "zzzz-nothing"]) == 0
        assert capsys.readouterr().out.strip() == "No calculators found."

    def test_info(self, capsys) -> None:
        assert main(["info", "bmi"]) == 0
        assert capsys.readouterr().out.startswith("Calculator: BMI Calculator (bmi)")

    def test_info_unknown(self, capsys) -> None:
        assert main(["info", "warp_drive"]) == 1
        assert "Calculator 'warp_drive' not found" in capsys.readouterr().err

    def test_schema(self, capsys) -> None:
        assert main(["schema", "bmi", "--base-url", "https://calc.test/"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["url"] == "https://calc.test/category/health/bmi"


class TestRun:
    """Tests for the run subcommand."""

    def test_units_on_the_command_line(self, capsys) -> None:
        assert main(["run", "bmi", "--var", "weight=180:lb", "--var", "height=70:in"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("result: 25.82")
        assert "tier: Overweight" in lines

    def test_json_output(self, capsys) -> None:
        assert main(["run", "bmi", "--var", "weight=70", "--var", "height=175", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["audit_trace"]["inputs_used"] == {"weight": "70 kg", "height": "175 cm"}

    def test_failure_exit_code(self, capsys) -> None:
        assert main(["run", "bmi", "--var", "weight=70"]) == 1
        assert "error: height" in capsys.readouterr().err

    def test_warnings_go_to_stderr(self, capsys) -> None:
        assert main(["run", "bmi", "--var", "weight=70", "--var", "height=175", "--var", "eyes=blue"]) == 0
        assert "warning: Unrecognised field ignored: eyes" in capsys.readouterr().err


class TestCheck:
    """Tests for the check subcommand."""

    def test_load_cases_filter(self, tmp_path) -> None:
        path = _write_cases(tmp_path / "cases.csv", [
            '1,bmi,"{""weight"": 70, ""height"": 175}",22.86,22.8,22.9\n',
            '2,hat_size,"{""head_circumference"": 57}",7 1/8,,\n',
        ])
        cases = load_cases(path, "hat_size")
        assert len(cases) == 1
        assert cases[0]["variables"] == {"head_circumference": 57}
        assert cases[0]["lower_limit"] == ""

    def test_all_pass(self, tmp_path, capsys) -> None:
        cases = _write_cases(tmp_path / "cases.csv", [
            '1,bmi,"{""weight"": 70, ""height"": 175}",22.86,22.8,22.9\n',
            '2,hat_size,"{""head_circumference"": 57}",7 1/8,,\n',
        ])
        report = tmp_path / "out" / "report.json"
        assert main(["check", "--cases", str(cases), "--output", str(report)]) == 0
        out = capsys.readouterr().out
        assert "RESULTS SUMMARY" in out
        assert "PASS" in out
        data = json.loads(report.read_text())
        assert data["summary"]["total_correct"] == 2
        assert data["summary"]["overall_accuracy"] == 100.0
        assert data["metadata"]["total_cases"] == 2

    def test_failures_and_errors(self, tmp_path, capsys) -> None:
        cases = _write_cases(tmp_path / "cases.csv", [
            '1,bmi,"{""weight"": 70, ""height"": 175}",30,,\n',
            '2,bmi,"{""weight"": 70}",22.86,,\n',
        ])
        assert main(["check", "--cases", str(cases)]) == 1
        out = capsys.readouterr().out
        assert "FAIL" in out
        assert "ERR" in out

    def test_reference_cases_from_settings(self, tmp_path, monkeypatch, capsys) -> None:
        cases = _write_cases(tmp_path / "ref.csv", ['1,bmi,"{""weight"": 70, ""height"": 175}",22.86,22.8,22.9\n'])
        monkeypatch.setenv("CALCDECK_REFERENCE_CASES", str(cases))
        assert main(["check"]) == 0
        assert str(cases) in capsys.readouterr().out

    def test_shipped_reference_cases_pass(self, capsys) -> None:
        assert main(["check"]) == 0
