"""
Financial statement ratios, valuation shortcuts and depreciation schedules.
"""

from typing import Any, Dict, List

from ..helpers import _choice, _err, _int, _make_calc_entry, _num, _ok, _tier

_MARGIN_BANDS = [(20, "Excellent"), (15, "Good"), (10, "Average"), (5, "Below Average")]


# 1. Current Ratio ────────────────────────────────────────────────────────────
def run_current_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    ratio = v["current_assets"] / v["current_liabilities"]
    tier = _tier(ratio, [(3, "Very High"), (2, "High"), (1.5, "Moderate"), (1, "Low")], "Very Low")
    return _ok(ratio, ["current ratio = current assets / current liabilities"], tier=tier,
               working_capital=v["current_assets"] - v["current_liabilities"])


# 2. Debt to Equity ───────────────────────────────────────────────────────────
def run_debt_to_equity(v: Dict[str, Any]) -> Dict[str, Any]:
    ratio = v["total_debt"] / v["total_equity"]
    tier = _tier(ratio, [(2, "High Leverage"), (1, "Moderate Leverage"), (0.5, "Low Leverage")],
                 "Very Low Leverage", strict=True)
    return _ok(ratio, ["D/E = total debt / total equity"], tier=tier)


# 3. Return on Assets ─────────────────────────────────────────────────────────
def run_return_on_assets(v: Dict[str, Any]) -> Dict[str, Any]:
    roa = v["net_income"] / v["total_assets"] * 100
    tier = _tier(roa, [(10, "Highly Efficient"), (5, "Efficient"), (2, "Moderately Efficient"),
                       (0, "Inefficient")], "Loss-Making", strict=True)
    return _ok(roa, ["ROA = net income / total assets * 100"], tier=tier)


# 4. Return on Equity ─────────────────────────────────────────────────────────
def run_return_on_equity(v: Dict[str, Any]) -> Dict[str, Any]:
    roe = v["net_income"] / v["shareholder_equity"] * 100
    tier = _tier(roe, _MARGIN_BANDS, "Poor", strict=True)
    return _ok(roe, ["ROE = net income / shareholder equity * 100"], tier=tier)


# 5. Return on Investment ─────────────────────────────────────────────────────
def run_return_on_investment(v: Dict[str, Any]) -> Dict[str, Any]:
    cost = v["amount_invested"]
    gain = v["amount_returned"] - cost
    roi = gain / cost * 100
    tier = _tier(roi, [(50, "Exceptional"), (20, "Strong"), (10, "Moderate"), (0, "Weak")], "Loss", strict=True)
    extra: Dict[str, Any] = {"net_gain": gain}
    if v["years"]:
        ratio = v["amount_returned"] / cost
        try:
            extra["annualized_roi"] = (ratio ** (1 / v["years"]) - 1) * 100 if ratio > 0 else -100.0
        except OverflowError:
            return _err("Holding period is too short to annualize", "years")
    return _ok(roi, ["ROI = (returned - invested) / invested * 100"], tier=tier, **extra)


# 6. Gross Margin ─────────────────────────────────────────────────────────────
def run_gross_margin(v: Dict[str, Any]) -> Dict[str, Any]:
    revenue = v["revenue"]
    gross_profit = revenue - v["cogs"]
    margin = gross_profit / revenue * 100
    tier = _tier(margin, [(50, "Excellent"), (40, "Good"), (30, "Adequate"), (20, "Marginal")], "Poor")
    return _ok(margin, ["gross margin = (revenue - COGS) / revenue * 100"], tier=tier,
               gross_profit=gross_profit, markup=gross_profit / v["cogs"] * 100 if v["cogs"] else None)


# 7. Net Profit Margin ────────────────────────────────────────────────────────
def run_net_profit_margin(v: Dict[str, Any]) -> Dict[str, Any]:
    margin = v["net_income"] / v["revenue"] * 100
    return _ok(margin, ["net margin = net income / revenue * 100"], tier=_tier(margin, _MARGIN_BANDS, "Poor"))


# 8. Operating Margin ─────────────────────────────────────────────────────────
def run_operating_margin(v: Dict[str, Any]) -> Dict[str, Any]:
    margin = v["operating_income"] / v["revenue"] * 100
    return _ok(margin, ["operating margin = operating income / revenue * 100"],
               tier=_tier(margin, _MARGIN_BANDS, "Poor"))


# 9. Dividend Yield ───────────────────────────────────────────────────────────
def run_dividend_yield(v: Dict[str, Any]) -> Dict[str, Any]:
    dividend = v["annual_dividend"]
    dy = dividend / v["share_price"] * 100
    extra: Dict[str, Any] = {}
    if v["cost_basis"]:
        extra["yield_on_cost"] = dividend / v["cost_basis"] * 100
    tier = _tier(dy, [(6, "High"), (3, "Moderate"), (1, "Low")], "Minimal")
    return _ok(dy, ["yield = annual dividend / price * 100"], tier=tier, **extra)


# 10. Dividend Discount Model ─────────────────────────────────────────────────
def run_dividend_discount_model(v: Dict[str, Any]) -> Dict[str, Any]:
    r = v["required_return"] / 100
    g = v["growth_rate"] / 100
    if r <= g:
        return _err("Required return must exceed the dividend growth rate", "required_return")
    if v["next_dividend"] is not None:
        d1 = v["next_dividend"]
    elif v["current_dividend"] is not None:
        d1 = v["current_dividend"] * (1 + g)
    else:
        return _err("Provide the current or the next dividend", "current_dividend")
    value = d1 / (r - g)
    extra: Dict[str, Any] = {"next_dividend": d1}
    if v["share_price"]:
        upside = (value - v["share_price"]) / v["share_price"] * 100
        extra["upside"] = upside
        extra["valuation"] = _tier(upside, [(10, "Undervalued"), (-10, "Fairly Valued")], "Overvalued")
    return _ok(value, ["P = D1 / (r - g)"], **extra)


# 11. Break-Even Units ────────────────────────────────────────────────────────
def run_break_even_units(v: Dict[str, Any]) -> Dict[str, Any]:
    price = v["price_per_unit"]
    contribution = price - v["variable_cost_per_unit"]
    if contribution <= 0:
        return _err("Price per unit must exceed variable cost per unit", "price_per_unit")
    units = v["fixed_costs"] / contribution
    return _ok(
        units,
        ["break-even units = fixed costs / (price - variable cost)"],
        break_even_revenue=units * price,
        contribution_margin=contribution,
        contribution_margin_ratio=contribution / price * 100,
    )


# 12. Inventory Turnover ──────────────────────────────────────────────────────
def run_inventory_turnover(v: Dict[str, Any]) -> Dict[str, Any]:
    average = (v["beginning_inventory"] + v["ending_inventory"]) / 2
    if average == 0:
        return _err("Average inventory must be greater than zero", "ending_inventory")
    turnover = v["cogs"] / average
    tier = _tier(turnover, [(8, "High"), (4, "Healthy"), (2, "Slow")], "Very Slow")
    return _ok(turnover, ["turnover = COGS / average inventory"], tier=tier,
               average_inventory=average, days_in_inventory=365 / turnover if turnover else None)


# 13. Cash Conversion Cycle ───────────────────────────────────────────────────
def run_cash_conversion_cycle(v: Dict[str, Any]) -> Dict[str, Any]:
    ccc = v["dio"] + v["dso"] - v["dpo"]
    tier = _tier(ccc, [(0, "Excellent"), (30, "Very Good"), (60, "Good"), (90, "Moderate")], "Poor",
                 ascending=True)
    return _ok(ccc, ["CCC = DIO + DSO - DPO"], tier=tier)


# 14. Enterprise Value ────────────────────────────────────────────────────────
def run_enterprise_value(v: Dict[str, Any]) -> Dict[str, Any]:
    market_cap = v["market_cap"]
    ev = market_cap + v["total_debt"] - v["cash"]
    ratio = ev / market_cap
    tier = _tier(ratio, [(1.5, "High Leverage"), (1.2, "Moderate Leverage"), (0.8, "Low Leverage")], "Cash Rich")
    extra: Dict[str, Any] = {"ev_to_market_cap": ratio}
    if v["ebitda"]:
        extra["ev_to_ebitda"] = ev / v["ebitda"]
    return _ok(ev, ["EV = market cap + debt - cash"], tier=tier, **extra)


# 15. Rental Yield ────────────────────────────────────────────────────────────
def run_rental_yield(v: Dict[str, Any]) -> Dict[str, Any]:
    price = v["property_price"]
    annual_rent = v["monthly_rent"] * 12
    gross = annual_rent / price * 100
    net_income = annual_rent * (1 - v["vacancy_rate"] / 100) - v["monthly_expenses"] * 12
    net = net_income / price * 100
    tier = _tier(net, [(8, "Excellent"), (6, "Good"), (4, "Average")], "Low")
    return _ok(net, ["gross = rent*12/price", "net = (rent*12*(1 - vacancy) - expenses*12)/price"],
               tier=tier, gross_yield=gross, net_annual_income=net_income)


# 16. Depreciation ────────────────────────────────────────────────────────────
def _depreciation_schedule(cost: float, salvage: float, life: int, method: str) -> List[Dict[str, float]]:
    schedule = []
    book = cost
    accumulated = 0.0
    syd = life * (life + 1) / 2
    for year in range(1, life + 1):
        if method == "straight_line":
            charge = (cost - salvage) / life
        elif method == "double_declining":
            charge = min(book * 2 / life, book - salvage)
            if year == life:
                charge = book - salvage
        else:
            charge = (cost - salvage) * (life - year + 1) / syd
        charge = max(charge, 0.0)
        accumulated += charge
        book -= charge
        schedule.append({"year": year, "depreciation": charge,
                         "accumulated": accumulated, "book_value": book})
    return schedule


def run_depreciation(v: Dict[str, Any]) -> Dict[str, Any]:
    cost = v["asset_cost"]
    salvage = v["salvage_value"]
    if cost <= salvage:
        return _err("Asset cost must be greater than salvage value", "asset_cost")
    method = v["method"]
    schedule = _depreciation_schedule(cost, salvage, v["useful_life"], method)
    formulas = {
        "straight_line": "annual = (cost - salvage) / life",
        "double_declining": "annual = book value * 2/life, stopping at salvage",
        "sum_of_years": "year k = (cost - salvage) * (n - k + 1) / (n(n+1)/2)",
    }
    return _ok(schedule[0]["depreciation"], [formulas[method]],
               depreciable_base=cost - salvage, schedule=schedule)


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "finance"

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "current_ratio": _make_calc_entry(
        "current_ratio", run_current_ratio, "Current Ratio Calculator",
        "Short-term liquidity: current assets over current liabilities.",
        _CATEGORY,
        [_num("current_assets", "Current assets", ge=0),
         _num("current_liabilities", "Current liabilities", gt=0)],
        tags=["liquidity", "ratio"],
        related=["debt_to_equity", "cash_conversion_cycle"],
    ),
    "debt_to_equity": _make_calc_entry(
        "debt_to_equity", run_debt_to_equity, "Debt to Equity Ratio",
        "Balance sheet leverage: total debt over shareholder equity.",
        _CATEGORY,
        [_num("total_debt", "Total debt", ge=0),
         _num("total_equity", "Total equity", gt=0)],
        tags=["leverage", "ratio"],
        related=["current_ratio", "wacc"],
    ),
    "return_on_assets": _make_calc_entry(
        "return_on_assets", run_return_on_assets, "Return on Assets (ROA)",
        "Net income generated per unit of assets.",
        _CATEGORY,
        [_num("net_income", "Net income"),
         _num("total_assets", "Total assets", gt=0)],
        tags=["profitability", "ratio"],
        related=["return_on_equity"],
    ),
    "return_on_equity": _make_calc_entry(
        "return_on_equity", run_return_on_equity, "Return on Equity (ROE)",
        "Net income generated per unit of shareholder equity.",
        _CATEGORY,
        [_num("net_income", "Net income"),
         _num("shareholder_equity", "Shareholder equity", gt=0)],
        tags=["profitability", "ratio"],
        related=["return_on_assets"],
    ),
    "return_on_investment": _make_calc_entry(
        "return_on_investment", run_return_on_investment, "Return on Investment (ROI)",
        "Percentage gain on an investment, optionally annualized.",
        _CATEGORY,
        [_num("amount_invested", "Amount invested", gt=0),
         _num("amount_returned", "Amount returned", ge=0),
         _num("years", "Holding period", "years", required=False, gt=0)],
        tags=["returns"],
    ),
    "gross_margin": _make_calc_entry(
        "gross_margin", run_gross_margin, "Gross Margin Calculator",
        "Gross profit as a share of revenue, with markup.",
        _CATEGORY,
        [_num("revenue", "Revenue", gt=0),
         _num("cogs", "Cost of goods sold", ge=0)],
        tags=["profitability", "margin"],
        related=["net_profit_margin", "operating_margin"],
    ),
    "net_profit_margin": _make_calc_entry(
        "net_profit_margin", run_net_profit_margin, "Net Profit Margin",
        "Net income as a share of revenue.",
        _CATEGORY,
        [_num("net_income", "Net income"),
         _num("revenue", "Revenue", gt=0)],
        tags=["profitability", "margin"],
        related=["gross_margin", "operating_margin"],
    ),
    "operating_margin": _make_calc_entry(
        "operating_margin", run_operating_margin, "Operating Margin",
        "Operating income as a share of revenue.",
        _CATEGORY,
        [_num("operating_income", "Operating income"),
         _num("revenue", "Revenue", gt=0)],
        tags=["profitability", "margin"],
        related=["gross_margin", "net_profit_margin"],
    ),
    "dividend_yield": _make_calc_entry(
        "dividend_yield", run_dividend_yield, "Dividend Yield Calculator",
        "Annual dividend relative to share price and to your cost basis.",
        _CATEGORY,
        [_num("annual_dividend", "Annual dividend per share", ge=0),
         _num("share_price", "Share price", gt=0),
         _num("cost_basis", "Your cost per share", required=False, gt=0)],
        tags=["dividends", "income"],
        related=["dividend_discount_model"],
    ),
    "dividend_discount_model": _make_calc_entry(
        "dividend_discount_model", run_dividend_discount_model, "Dividend Discount Model (Gordon Growth)",
        "Intrinsic share value from next year's dividend, required return and growth.",
        _CATEGORY,
        [_num("current_dividend", "Current annual dividend (D0)", required=False, ge=0),
         _num("next_dividend", "Next year's dividend (D1)", required=False, ge=0),
         _num("required_return", "Required return", "%", gt=0, le=100),
         _num("growth_rate", "Dividend growth rate", "%", ge=-100, le=100),
         _num("share_price", "Current share price", required=False, gt=0)],
        tags=["valuation", "dividends"],
        related=["dividend_yield", "capm", "perpetuity"],
    ),
    "break_even_units": _make_calc_entry(
        "break_even_units", run_break_even_units, "Break-Even Analysis",
        "Units and revenue needed to cover fixed costs.",
        _CATEGORY,
        [_num("fixed_costs", "Fixed costs", ge=0),
         _num("price_per_unit", "Price per unit", gt=0),
         _num("variable_cost_per_unit", "Variable cost per unit", ge=0)],
        tags=["cost accounting", "break-even"],
    ),
    "inventory_turnover": _make_calc_entry(
        "inventory_turnover", run_inventory_turnover, "Inventory Turnover Ratio",
        "How many times inventory is sold and replaced in a year.",
        _CATEGORY,
        [_num("cogs", "Cost of goods sold", ge=0),
         _num("beginning_inventory", "Beginning inventory", ge=0),
         _num("ending_inventory", "Ending inventory", ge=0)],
        tags=["efficiency", "ratio"],
        related=["cash_conversion_cycle"],
    ),
    "cash_conversion_cycle": _make_calc_entry(
        "cash_conversion_cycle", run_cash_conversion_cycle, "Cash Conversion Cycle",
        "Days between paying suppliers and collecting from customers.",
        _CATEGORY,
        [_num("dio", "Days inventory outstanding", "days", ge=0),
         _num("dso", "Days sales outstanding", "days", ge=0),
         _num("dpo", "Days payables outstanding", "days", ge=0)],
        tags=["working capital", "efficiency"],
        related=["inventory_turnover", "current_ratio"],
    ),
    "enterprise_value": _make_calc_entry(
        "enterprise_value", run_enterprise_value, "Enterprise Value Calculator",
        "Market capitalization plus debt minus cash, with EV multiples.",
        _CATEGORY,
        [_num("market_cap", "Market capitalization", gt=0),
         _num("total_debt", "Total debt", ge=0),
         _num("cash", "Cash and equivalents", ge=0),
         _num("ebitda", "EBITDA", required=False)],
        tags=["valuation"],
    ),
    "rental_yield": _make_calc_entry(
        "rental_yield", run_rental_yield, "Rental Yield Calculator",
        "Gross and net yield of a rental property.",
        _CATEGORY,
        [_num("property_price", "Property price", gt=0),
         _num("monthly_rent", "Monthly rent", ge=0),
         _num("monthly_expenses", "Monthly expenses", required=False, default=0.0, ge=0),
         _num("vacancy_rate", "Vacancy rate", "%", required=False, default=0.0, ge=0, le=100)],
        tags=["real estate", "yield"],
    ),
    "depreciation": _make_calc_entry(
        "depreciation", run_depreciation, "Depreciation Calculator",
        "Straight-line, double-declining or sum-of-years'-digits depreciation schedule.",
        _CATEGORY,
        [_num("asset_cost", "Asset cost", gt=0),
         _num("salvage_value", "Salvage value", ge=0),
         _int("useful_life", "Useful life in years", ge=1, le=100),
         _choice("method", "Method", ["straight_line", "double_declining", "sum_of_years"], "straight_line")],
        tags=["accounting", "assets"],
    ),
}
