"""Portfolio, risk and trading calculators."""

import math
from statistics import NormalDist
from typing import Any, Dict

from ..helpers import _err, _make_calc_entry, _num, _ok, _series, _tier

_Z_SCORES = {90.0: 1.282, 95.0: 1.645, 97.5: 1.96, 99.0: 2.326}


# 1. CAPM ─────────────────────────────────────────────────────────────────────
def run_capm(v: Dict[str, Any]) -> Dict[str, Any]:
    rf = v["risk_free_rate"]
    premium = v["market_return"] - rf
    expected = rf + v["beta"] * premium
    tier = _tier(expected, [(15, "High"), (10, "Moderate"), (5, "Conservative"), (0, "Low")], "Negative")
    return _ok(expected, ["E(R) = rf + beta(rm - rf)"], tier=tier, market_risk_premium=premium)


# 2. WACC ─────────────────────────────────────────────────────────────────────
def run_wacc(v: Dict[str, Any]) -> Dict[str, Any]:
    e = v["equity_value"]
    d = v["debt_value"]
    total = e + d
    if total <= 0:
        return _err("Equity plus debt must be greater than zero", "equity_value")
    after_tax_debt = v["cost_of_debt"] * (1 - v["tax_rate"] / 100)
    wacc = e / total * v["cost_of_equity"] + d / total * after_tax_debt
    tier = _tier(wacc, [(15, "High"), (10, "Moderate"), (5, "Low")], "Very Low")
    return _ok(
        wacc,
        ["WACC = E/V*Re + D/V*Rd*(1 - t)"],
        tier=tier,
        equity_weight=e / total * 100,
        debt_weight=d / total * 100,
        after_tax_cost_of_debt=after_tax_debt,
    )


# 3. Sharpe Ratio ─────────────────────────────────────────────────────────────
def run_sharpe_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    excess = v["portfolio_return"] - v["risk_free_rate"]
    ratio = excess / v["std_deviation"]
    tier = _tier(ratio, [(2, "Excellent"), (1, "Good"), (0.5, "Adequate"), (0, "Poor")], "Negative")
    return _ok(ratio, ["Sharpe = (Rp - rf) / sigma"], tier=tier, excess_return=excess)


# 4. Sortino Ratio ────────────────────────────────────────────────────────────
def run_sortino_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    excess = v["portfolio_return"] - v["risk_free_rate"]
    ratio = excess / v["downside_deviation"]
    tier = _tier(ratio, [(2, "Excellent"), (1.5, "Very Good"), (1, "Good"), (0.5, "Adequate")], "Poor")
    return _ok(ratio, ["Sortino = (Rp - rf) / downside deviation"], tier=tier, excess_return=excess)


# 5. Jensen's Alpha ───────────────────────────────────────────────────────────
def run_jensens_alpha(v: Dict[str, Any]) -> Dict[str, Any]:
    rf = v["risk_free_rate"]
    expected = rf + v["beta"] * (v["market_return"] - rf)
    alpha = v["portfolio_return"] - expected
    tier = _tier(alpha, [(2, "Strong Outperformance"), (0, "Outperformance"), (-2, "Underperformance")],
                 "Strong Underperformance")
    return _ok(alpha, ["alpha = Rp - (rf + beta(Rm - rf))"], tier=tier, expected_return=expected)


# 6. Information Ratio ────────────────────────────────────────────────────────
def run_information_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    active = v["portfolio_return"] - v["benchmark_return"]
    ratio = active / v["tracking_error"]
    tier = _tier(ratio, [(1, "Exceptional"), (0.75, "Very Good"), (0.5, "Good"), (0, "Below Average")], "Poor")
    return _ok(ratio, ["IR = (Rp - Rb) / tracking error"], tier=tier, active_return=active)


# 7. Kelly Criterion ──────────────────────────────────────────────────────────
def run_kelly_criterion(v: Dict[str, Any]) -> Dict[str, Any]:
    p = v["win_probability"] / 100
    q = 1 - p
    b = v["average_win"] / v["average_loss"]
    kelly = (p * b - q) / b
    kelly_pct = max(0.0, min(kelly, 1.0)) * 100
    portfolio = v["portfolio_value"]
    tier = _tier(kelly_pct, [(25, "Aggressive"), (10, "Moderate"), (0, "Conservative")], "No Edge", strict=True)
    return _ok(
        kelly_pct,
        ["b = avg win / avg loss", "f* = (p*b - q) / b, clamped to 0..100%"],
        tier=tier,
        half_kelly=kelly_pct / 2,
        win_loss_ratio=b,
        position_value=portfolio * kelly_pct / 100,
        half_kelly_position=portfolio * kelly_pct / 200,
    )


# 8. Position Size ────────────────────────────────────────────────────────────
def run_position_size(v: Dict[str, Any]) -> Dict[str, Any]:
    entry = v["entry_price"]
    price_risk = abs(entry - v["stop_loss"])
    if price_risk == 0:
        return _err("Entry price and stop loss must differ", "stop_loss")
    risk_amount = v["portfolio_value"] * v["risk_percent"] / 100
    shares = math.floor(risk_amount / price_risk)
    position_value = shares * entry
    return _ok(
        shares,
        ["risk amount = portfolio * risk%", "shares = floor(risk amount / |entry - stop|)"],
        risk_amount=risk_amount,
        risk_per_share=price_risk,
        position_value=position_value,
        portfolio_share=position_value / v["portfolio_value"] * 100,
    )


# 9. Risk Reward Ratio ────────────────────────────────────────────────────────
def run_risk_reward_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    entry = v["entry_price"]
    risk = abs(entry - v["stop_loss"])
    if risk == 0:
        return _err("Entry price and stop loss must differ", "stop_loss")
    reward = abs(v["target_price"] - entry)
    ratio = reward / risk
    tier = _tier(ratio, [(3, "Excellent"), (2, "Good"), (1, "Acceptable")], "Poor")
    return _ok(ratio, ["R:R = |target - entry| / |entry - stop|"], tier=tier,
               risk_per_share=risk, reward_per_share=reward,
               breakeven_win_rate=risk / (risk + reward) * 100)


# 10. Value at Risk ───────────────────────────────────────────────────────────
def run_value_at_risk(v: Dict[str, Any]) -> Dict[str, Any]:
    confidence = v["confidence_level"]
    z = _Z_SCORES.get(confidence)
    if z is None:
        z = NormalDist().inv_cdf(confidence / 100)
    value = v["portfolio_value"]
    var = value * v["volatility"] / 100 * z * math.sqrt(v["time_horizon_days"])
    var_pct = var / value * 100
    tier = _tier(var_pct, [(5, "Low"), (10, "Moderate"), (20, "High"), (30, "Very High")], "Extreme",
                 ascending=True)
    return _ok(var, ["VaR = V * sigma * z * sqrt(t)"], tier=tier, var_percent=var_pct, z_score=z)


# 11. Maximum Drawdown ────────────────────────────────────────────────────────
def run_maximum_drawdown(v: Dict[str, Any]) -> Dict[str, Any]:
    values = v["values"]
    if any(x <= 0 for x in values):
        return _err("All portfolio values must be positive", "values")
    peak, peak_idx = values[0], 0
    best = (0.0, 0, 0)  # drawdown, peak index, trough index
    for i, x in enumerate(values):
        if x > peak:
            peak, peak_idx = x, i
        dd = (peak - x) / peak
        if dd > best[0]:
            best = (dd, peak_idx, i)
    dd, p_idx, t_idx = best
    tier = _tier(dd * 100, [(10, "Low"), (20, "Moderate"), (35, "High")], "Severe", ascending=True)
    return _ok(
        dd * 100,
        ["MDD = max over t of (running peak - value_t) / running peak"],
        tier=tier,
        peak_value=values[p_idx],
        trough_value=values[t_idx],
        peak_index=p_idx,
        trough_index=t_idx,
    )


# 12. Minimum Variance Portfolio ──────────────────────────────────────────────
def run_minimum_variance_portfolio(v: Dict[str, Any]) -> Dict[str, Any]:
    s1 = v["volatility_1"] / 100
    s2 = v["volatility_2"] / 100
    a11, a22 = s1 * s1, s2 * s2
    a12 = v["correlation"] * s1 * s2
    det = a11 * a22 - a12 * a12
    if det <= 0:
        return _err("Covariance matrix is singular; correlation cannot be +/-1", "correlation")
    # row sums of the inverse covariance matrix
    r1 = (a22 - a12) / det
    r2 = (a11 - a12) / det
    w1 = r1 / (r1 + r2)
    w2 = 1 - w1
    variance = w1 * w1 * a11 + w2 * w2 * a22 + 2 * w1 * w2 * a12
    return _ok(
        w1 * 100,
        ["w = inv(Sigma) 1 / (1' inv(Sigma) 1)", "sigma_p = sqrt(w' Sigma w)"],
        weight_asset_1=w1 * 100,
        weight_asset_2=w2 * 100,
        portfolio_volatility=math.sqrt(variance) * 100,
    )


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "finance"
_PCT = {"ge": -100, "le": 1000}

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "capm": _make_calc_entry(
        "capm", run_capm, "CAPM Expected Return",
        "Expected return from the risk-free rate, beta and the market return.",
        _CATEGORY,
        [_num("risk_free_rate", "Risk-free rate", "%", **_PCT),
         _num("beta", "Beta", ge=-10, le=10),
         _num("market_return", "Expected market return", "%", **_PCT)],
        tags=["capm", "cost of equity"],
        related=["wacc", "jensens_alpha"],
    ),
    "wacc": _make_calc_entry(
        "wacc", run_wacc, "WACC Calculator",
        "Weighted average cost of capital with the debt tax shield.",
        _CATEGORY,
        [_num("equity_value", "Market value of equity", ge=0),
         _num("debt_value", "Market value of debt", ge=0),
         _num("cost_of_equity", "Cost of equity", "%", ge=0, le=100),
         _num("cost_of_debt", "Cost of debt", "%", ge=0, le=100),
         _num("tax_rate", "Corporate tax rate", "%", ge=0, le=100)],
        tags=["cost of capital"],
        related=["capm"],
    ),
    "sharpe_ratio": _make_calc_entry(
        "sharpe_ratio", run_sharpe_ratio, "Sharpe Ratio Calculator",
        "Excess return per unit of total volatility.",
        _CATEGORY,
        [_num("portfolio_return", "Portfolio return", "%", **_PCT),
         _num("risk_free_rate", "Risk-free rate", "%", **_PCT),
         _num("std_deviation", "Standard deviation", "%", gt=0)],
        tags=["risk-adjusted return"],
        related=["sortino_ratio", "information_ratio"],
    ),
    "sortino_ratio": _make_calc_entry(
        "sortino_ratio", run_sortino_ratio, "Sortino Ratio Calculator",
        "Excess return per unit of downside deviation.",
        _CATEGORY,
        [_num("portfolio_return", "Portfolio return", "%", **_PCT),
         _num("risk_free_rate", "Risk-free rate / target return", "%", **_PCT),
         _num("downside_deviation", "Downside deviation", "%", gt=0)],
        tags=["risk-adjusted return"],
        related=["sharpe_ratio"],
    ),
    "jensens_alpha": _make_calc_entry(
        "jensens_alpha", run_jensens_alpha, "Jensen's Alpha",
        "Portfolio return above what CAPM predicts.",
        _CATEGORY,
        [_num("portfolio_return", "Portfolio return", "%", **_PCT),
         _num("risk_free_rate", "Risk-free rate", "%", **_PCT),
         _num("beta", "Portfolio beta", ge=-10, le=10),
         _num("market_return", "Market return", "%", **_PCT)],
        tags=["alpha", "performance"],
        related=["capm", "information_ratio"],
    ),
    "information_ratio": _make_calc_entry(
        "information_ratio", run_information_ratio, "Information Ratio",
        "Active return per unit of tracking error.",
        _CATEGORY,
        [_num("portfolio_return", "Portfolio return", "%", **_PCT),
         _num("benchmark_return", "Benchmark return", "%", **_PCT),
         _num("tracking_error", "Tracking error", "%", gt=0)],
        tags=["active management"],
        related=["sharpe_ratio", "jensens_alpha"],
    ),
    "kelly_criterion": _make_calc_entry(
        "kelly_criterion", run_kelly_criterion, "Kelly Criterion Calculator",
        "Optimal bet fraction from win probability and the win/loss ratio.",
        _CATEGORY,
        [_num("win_probability", "Win probability", "%", ge=0, le=100),
         _num("average_win", "Average win", gt=0),
         _num("average_loss", "Average loss", gt=0),
         _num("portfolio_value", "Portfolio value", required=False, default=100000.0, gt=0)],
        tags=["trading", "bet sizing"],
        related=["position_size"],
    ),
    "position_size": _make_calc_entry(
        "position_size", run_position_size, "Position Size Calculator",
        "Shares to buy so a stop-loss hit costs a fixed share of the portfolio.",
        _CATEGORY,
        [_num("portfolio_value", "Portfolio value", gt=0),
         _num("risk_percent", "Risk per trade", "%", gt=0, le=100),
         _num("entry_price", "Entry price", gt=0),
         _num("stop_loss", "Stop-loss price", gt=0)],
        tags=["trading", "risk management"],
        related=["risk_reward_ratio", "kelly_criterion"],
    ),
    "risk_reward_ratio": _make_calc_entry(
        "risk_reward_ratio", run_risk_reward_ratio, "Risk/Reward Ratio",
        "Potential reward per unit of risk for a trade.",
        _CATEGORY,
        [_num("entry_price", "Entry price", gt=0),
         _num("stop_loss", "Stop-loss price", gt=0),
         _num("target_price", "Target price", gt=0)],
        tags=["trading"],
        related=["position_size"],
    ),
    "value_at_risk": _make_calc_entry(
        "value_at_risk", run_value_at_risk, "Value at Risk (VaR)",
        "Parametric VaR for a portfolio over a holding period.",
        _CATEGORY,
        [_num("portfolio_value", "Portfolio value", gt=0),
         _num("volatility", "Daily volatility", "%", gt=0, le=100),
         _num("confidence_level", "Confidence level", "%", required=False, default=95.0, gt=50, lt=100),
         _num("time_horizon_days", "Time horizon", "days", required=False, default=1.0, gt=0, le=3650)],
        tags=["risk"],
        related=["maximum_drawdown"],
    ),
    "maximum_drawdown": _make_calc_entry(
        "maximum_drawdown", run_maximum_drawdown, "Maximum Drawdown",
        "Largest peak-to-trough decline in a series of portfolio values.",
        _CATEGORY,
        [_series("values", "Portfolio values in time order", min_items=2)],
        tags=["risk", "drawdown"],
        related=["value_at_risk"],
    ),
    "minimum_variance_portfolio": _make_calc_entry(
        "minimum_variance_portfolio", run_minimum_variance_portfolio, "Minimum Variance Portfolio",
        "Two-asset weights that minimize portfolio volatility.",
        _CATEGORY,
        [_num("volatility_1", "Asset 1 volatility", "%", gt=0),
         _num("volatility_2", "Asset 2 volatility", "%", gt=0),
         _num("correlation", "Correlation", ge=-1, le=1)],
        tags=["portfolio", "diversification"],
        related=["sharpe_ratio"],
    ),
}
