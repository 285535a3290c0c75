"""Tests for portfolio, risk and trading calculators."""

import math

import pytest


class TestCostOfCapital:
    """Tests for capm and wacc."""

    def test_capm(self, ok) -> None:
        out = ok("capm", risk_free_rate=3, beta=1.2, market_return=8)
        assert out["result"] == pytest.approx(9.0)
        assert out["market_risk_premium"] == pytest.approx(5.0)
        assert out["tier"] == "Conservative"

    def test_wacc_applies_tax_shield(self, ok) -> None:
        out = ok("wacc", equity_value=600, debt_value=400, cost_of_equity=10, cost_of_debt=5, tax_rate=20)
        assert out["after_tax_cost_of_debt"] == pytest.approx(4.0)
        assert out["result"] == pytest.approx(7.6)
        assert out["equity_weight"] == pytest.approx(60.0)
        assert out["tier"] == "Low"

    def test_wacc_needs_capital(self, calc) -> None:
        result = calc("wacc", equity_value=0, debt_value=0, cost_of_equity=10, cost_of_debt=5, tax_rate=20)
        assert not result.success
        assert result.errors[0]["field"] == "equity_value"


class TestRiskAdjustedReturns:
    """Tests for sharpe_ratio, sortino_ratio, jensens_alpha and information_ratio."""

    def test_sharpe(self, ok) -> None:
        out = ok("sharpe_ratio", portfolio_return=12, risk_free_rate=2, std_deviation=10)
        assert out["result"] == pytest.approx(1.0)
        assert out["tier"] == "Good"

    def test_sortino(self, ok) -> None:
        out = ok("sortino_ratio", portfolio_return=12, risk_free_rate=2, downside_deviation=4)
        assert out["result"] == pytest.approx(2.5)
        assert out["tier"] == "Excellent"

    def test_jensens_alpha(self, ok) -> None:
        out = ok("jensens_alpha", portfolio_return=12, risk_free_rate=2, beta=1, market_return=10)
        assert out["expected_return"] == pytest.approx(10.0)
        assert out["result"] == pytest.approx(2.0)
        assert out["tier"] == "Strong Outperformance"

    def test_information_ratio(self, ok) -> None:
        out = ok("information_ratio", portfolio_return=9, benchmark_return=8, tracking_error=2)
        assert out["result"] == pytest.approx(0.5)
        assert out["tier"] == "Good"

    def test_zero_deviation_rejected(self, calc) -> None:
        """Volatility inputs must be strictly positive."""
        result = calc("sharpe_ratio", portfolio_return=12, risk_free_rate=2, std_deviation=0)
        assert not result.success
        assert result.errors[0]["field"] == "std_deviation"


class TestTrading:
    """Tests for kelly_criterion, position_size and risk_reward_ratio."""

    def test_kelly(self, ok) -> None:
        """60% win rate at even odds bets 20%."""
        out = ok("kelly_criterion", win_probability=60, average_win=1, average_loss=1)
        assert out["result"] == pytest.approx(20.0)
        assert out["half_kelly"] == pytest.approx(10.0)
        assert out["position_value"] == pytest.approx(20000.0)
        assert out["tier"] == "Moderate"

    def test_kelly_without_edge(self, ok) -> None:
        out = ok("kelly_criterion", win_probability=40, average_win=1, average_loss=1)
        assert out["result"] == pytest.approx(0.0)
        assert out["tier"] == "No Edge"

    def test_position_size(self, ok) -> None:
        out = ok("position_size", portfolio_value=10000, risk_percent=1, entry_price=50, stop_loss=48)
        assert out["result"] == 50
        assert out["risk_amount"] == pytest.approx(100.0)
        assert out["position_value"] == pytest.approx(2500.0)

    def test_position_size_needs_distinct_stop(self, calc) -> None:
        result = calc("position_size", portfolio_value=10000, risk_percent=1, entry_price=50, stop_loss=50)
        assert not result.success
        assert result.errors[0]["field"] == "stop_loss"

    def test_risk_reward(self, ok) -> None:
        out = ok("risk_reward_ratio", entry_price=100, stop_loss=95, target_price=115)
        assert out["result"] == pytest.approx(3.0)
        assert out["tier"] == "Excellent"
        assert out["breakeven_win_rate"] == pytest.approx(25.0)


class TestRisk:
    """Tests for value_at_risk and maximum_drawdown."""

    def test_one_day_var(self, ok) -> None:
        out = ok("value_at_risk", portfolio_value=1000000, volatility=2)
        assert out["z_score"] == pytest.approx(1.645)
        assert out["result"] == pytest.approx(32900.0)
        assert out["tier"] == "Low"

    def test_var_scales_with_root_time(self, ok) -> None:
        one = ok("value_at_risk", portfolio_value=1000000, volatility=2, confidence_level=99)
        ten = ok("value_at_risk", portfolio_value=1000000, volatility=2, confidence_level=99, time_horizon_days=10)
        assert ten["result"] == pytest.approx(one["result"] * math.sqrt(10), rel=1e-4)

    def test_maximum_drawdown(self, ok) -> None:
        out = ok("maximum_drawdown", values=[100, 120, 90, 130, 65])
        assert out["result"] == pytest.approx(50.0)
        assert out["peak_index"] == 3
        assert out["trough_index"] == 4
        assert out["tier"] == "Severe"

    def test_drawdown_from_text(self, ok) -> None:
        out = ok("maximum_drawdown", values="100, 120, 90")
        assert out["result"] == pytest.approx(25.0)
        assert out["peak_value"] == pytest.approx(120.0)

    def test_drawdown_rejects_non_positive(self, calc) -> None:
        result = calc("maximum_drawdown", values=[100, 0, 50])
        assert not result.success


class TestMinimumVariancePortfolio:
    """Tests for minimum_variance_portfolio."""

    def test_equal_uncorrelated_assets_split_evenly(self, ok) -> None:
        out = ok("minimum_variance_portfolio", volatility_1=20, volatility_2=20, correlation=0)
        assert out["weight_asset_1"] == pytest.approx(50.0)
        assert out["weight_asset_2"] == pytest.approx(50.0)
        assert out["portfolio_volatility"] == pytest.approx(14.1421, abs=1e-3)

    def test_perfect_correlation_is_singular(self, calc) -> None:
        result = calc("minimum_variance_portfolio", volatility_1=20, volatility_2=20, correlation=1)
        assert not result.success
        assert result.errors[0]["field"] == "correlation"
