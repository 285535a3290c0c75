"""Time value of money calculators."""

from typing import Any, Dict, List

from ..helpers import _choice, _err, _flag, _make_calc_entry, _num, _ok, _series, _tier

_FREQUENCIES = {"annual": 1, "semi_annual": 2, "quarterly": 4, "monthly": 12, "daily": 365}


# 1. Compound Interest ────────────────────────────────────────────────────────
def run_compound_interest(v: Dict[str, Any]) -> Dict[str, Any]:
    p = v["principal"]
    r = v["annual_rate"] / 100
    n = _FREQUENCIES[v["compounding"]]
    years = v["years"]
    amount = p * (1 + r / n) ** (n * years)
    series = [
        {"year": y, "balance": p * (1 + r / n) ** (n * y)}
        for y in range(1, int(years) + 1)
    ]
    return _ok(
        amount,
        ["A = P(1 + r/n)^(n*t)"],
        interest_earned=amount - p,
        effective_annual_rate=((1 + r / n) ** n - 1) * 100,
        yearly=series,
    )


# 2. Future Value ─────────────────────────────────────────────────────────────
def run_future_value(v: Dict[str, Any]) -> Dict[str, Any]:
    mode = v["mode"]
    m = _FREQUENCIES[v["frequency"]]
    years = v["years"]
    i = v["annual_rate"] / 100 / m
    periods = years * m

    if mode == "single":
        fv = v["present_value"] * (1 + i) ** periods
        log = ["FV = PV(1 + r/m)^(t*m)"]
    else:
        pmt = v["payment"]
        if pmt is None:
            return _err("Payment is required for annuity modes", "payment")
        if mode == "annuity":
            fv = pmt * periods if i == 0 else pmt * ((1 + i) ** periods - 1) / i
            log = ["FV = pmt((1+i)^N - 1)/i"]
        else:
            g = v["growth_rate"] / 100 / m
            if i == g:
                fv = pmt * periods * (1 + i) ** (periods - 1)
            else:
                fv = pmt * ((1 + i) ** periods - (1 + g) ** periods) / (i - g)
            log = ["FV = pmt((1+i)^N - (1+g)^N)/(i - g)"]
    return _ok(fv, log, periods=periods, periodic_rate=i * 100)


# 3. Present Value ────────────────────────────────────────────────────────────
def run_present_value(v: Dict[str, Any]) -> Dict[str, Any]:
    fv = v["future_value"]
    pv = fv / (1 + v["annual_rate"] / 100) ** v["years"]
    return _ok(pv, ["PV = FV / (1 + r)^t"], discount=fv - pv)


# 4. Net Present Value ────────────────────────────────────────────────────────
def run_npv(v: Dict[str, Any]) -> Dict[str, Any]:
    r = v["discount_rate"] / 100
    flows: List[float] = list(v["cash_flows"])
    if v["initial_investment"] is not None:
        flows = [-abs(v["initial_investment"])] + flows
    discounted = [cf / (1 + r) ** t for t, cf in enumerate(flows)]
    npv = sum(discounted)
    if npv > 0:
        tier = "Accept"
    elif npv < 0:
        tier = "Reject"
    else:
        tier = "Break-even"
    return _ok(npv, ["NPV = sum(CF_t / (1 + r)^t), t from 0"], tier=tier, discounted_cash_flows=discounted)


# 5. Payback Period ───────────────────────────────────────────────────────────
def run_payback_period(v: Dict[str, Any]) -> Dict[str, Any]:
    investment = v["initial_investment"]
    cumulative = -investment
    for year, cf in enumerate(v["cash_flows"], start=1):
        previous = cumulative
        cumulative += cf
        if cumulative >= 0 and cf > 0:
            fraction = -previous / cf
            years = year - 1 + fraction
            whole = int(years)
            months = int(round((years - whole) * 12))
            if months == 12:
                whole, months = whole + 1, 0
            return _ok(
                years,
                ["walk cumulative cash flow until it turns non-negative, interpolate within the year"],
                text=f"{whole} years and {months} months",
                recovered=True,
            )
    return _ok(
        None,
        ["cumulative cash flow never recovers the investment"],
        text="Payback period is longer than the provided cash flows",
        recovered=False,
        shortfall=-cumulative,
    )


# 6. Perpetuity ───────────────────────────────────────────────────────────────
def run_perpetuity(v: Dict[str, Any]) -> Dict[str, Any]:
    r = v["discount_rate"] / 100
    g = v["growth_rate"] / 100
    if r <= g:
        return _err("Discount rate must exceed the growth rate", "discount_rate")
    if g == 0:
        return _ok(v["payment"] / r, ["PV = C / r"])
    return _ok(v["payment"] / (r - g), ["PV = C / (r - g)"])


# 7. Growing Annuity ──────────────────────────────────────────────────────────
def run_growing_annuity(v: Dict[str, Any]) -> Dict[str, Any]:
    pmt = v["payment"]
    i = v["discount_rate"] / 100
    g = v["growth_rate"] / 100
    n = v["periods"]
    if i == g:
        pv = pmt * n / (1 + i)
    else:
        pv = pmt * (1 - ((1 + g) / (1 + i)) ** n) / (i - g)
    extra: Dict[str, Any] = {}
    if i > g:
        extra["growing_perpetuity"] = pmt / (i - g)
    else:
        extra["growing_perpetuity"] = None
        extra["perpetuity_note"] = "Infinite: growth rate meets or exceeds the discount rate"
    return _ok(pv, ["PV = pmt(1 - ((1+g)/(1+i))^N)/(i - g)"], **extra)


# 8. Annuity Payment ──────────────────────────────────────────────────────────
def run_annuity_payment(v: Dict[str, Any]) -> Dict[str, Any]:
    basis = v["basis"]
    amount = v["amount"]
    i = v["annual_rate"] / 100 / _FREQUENCIES[v["frequency"]]
    n = v["periods"]
    try:
        growth = (1 + i) ** n
    except OverflowError:
        return _err("Rate and number of payments are too large to compute", "periods")
    if i == 0:
        payment = amount / n
    elif basis == "present_value":
        payment = amount * i / (1 - 1 / growth)
    else:
        payment = amount * i / (growth - 1)
    if v["annuity_due"] and i != 0:
        payment /= 1 + i
    return _ok(
        payment,
        ["PMT = PV*i(1+i)^N/((1+i)^N - 1)" if basis == "present_value" else "PMT = FV*i/((1+i)^N - 1)"],
        total_paid=payment * n,
    )


# 9. SIP Returns ──────────────────────────────────────────────────────────────
def run_sip_returns(v: Dict[str, Any]) -> Dict[str, Any]:
    monthly = v["monthly_investment"]
    years = v["years"]
    r = v["expected_return"] / 100 / 12
    n = int(round(years * 12))
    if n < 1:
        return _err("Investment period must cover at least one month", "years")
    if r == 0:
        fv = monthly * n
    else:
        fv = monthly * ((1 + r) ** n - 1) / r * (1 + r)
    invested = monthly * n
    annualized = ((fv / invested) ** (1 / years) - 1) * 100
    return _ok(
        fv,
        ["FV = M((1+r)^n - 1)/r * (1+r)"],
        total_invested=invested,
        estimated_gains=fv - invested,
        annualized_return=annualized,
    )


# 10. Real Interest Rate ──────────────────────────────────────────────────────
def run_real_interest_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    nominal = v["nominal_rate"] / 100
    inflation = v["inflation_rate"] / 100
    real = ((1 + nominal) / (1 + inflation) - 1) * 100
    tier = _tier(real, [(5, "Strong"), (2, "Moderate"), (0, "Low"), (-2, "Negative")], "Deeply Negative")
    return _ok(real, ["real = (1 + n)/(1 + i) - 1"], tier=tier, approximate=(nominal - inflation) * 100)


# 11. Tax-Equivalent Yield ────────────────────────────────────────────────────
def run_tax_equivalent_yield(v: Dict[str, Any]) -> Dict[str, Any]:
    tey = v["tax_free_yield"] / (1 - v["tax_rate"] / 100)
    return _ok(tey, ["TEY = tax-free yield / (1 - tax rate)"])


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "finance"
_RATE = dict(ge=-100, le=100)

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "compound_interest": _make_calc_entry(
        "compound_interest", run_compound_interest, "Compound Interest Calculator",
        "Growth of a lump sum with periodic compounding.",
        _CATEGORY,
        [_num("principal", "Initial principal", gt=0),
         _num("annual_rate", "Annual interest rate", "%", ge=0, le=100),
         _num("years", "Years", "years", gt=0, le=100),
         _choice("compounding", "Compounding frequency", list(_FREQUENCIES), "annual")],
        tags=["interest", "savings", "growth"],
        related=["future_value", "sip_returns"],
    ),
    "future_value": _make_calc_entry(
        "future_value", run_future_value, "Future Value Calculator",
        "Future value of a single amount, an annuity or a growing annuity.",
        _CATEGORY,
        [_choice("mode", "Cash flow type", ["single", "annuity", "growing_annuity"], "single"),
         _num("present_value", "Present value", required=False, default=0.0, ge=0),
         _num("payment", "Periodic payment", required=False, ge=0),
         _num("annual_rate", "Annual rate", "%", **_RATE),
         _num("growth_rate", "Payment growth rate", "%", required=False, default=0.0, **_RATE),
         _num("years", "Years", "years", gt=0, le=100),
         _choice("frequency", "Compounding frequency", list(_FREQUENCIES), "annual")],
        tags=["tvm", "annuity"],
        related=["present_value", "compound_interest"],
    ),
    "present_value": _make_calc_entry(
        "present_value", run_present_value, "Present Value Calculator",
        "Today's value of a future amount.",
        _CATEGORY,
        [_num("future_value", "Future value", gt=0),
         _num("annual_rate", "Discount rate", "%", gt=-100, le=100),
         _num("years", "Years", "years", ge=0, le=100)],
        tags=["tvm", "discounting"],
        related=["future_value", "npv"],
    ),
    "npv": _make_calc_entry(
        "npv", run_npv, "Net Present Value (NPV)",
        "Discounted sum of a cash flow series, with an accept/reject signal.",
        _CATEGORY,
        [_num("discount_rate", "Discount rate", "%", gt=-100, le=100),
         _num("initial_investment", "Initial investment (entered as positive)", required=False, ge=0),
         _series("cash_flows", "Cash flows, first entry at t=0 unless an initial investment is given")],
        tags=["capital budgeting", "dcf"],
        related=["payback_period", "present_value"],
    ),
    "payback_period": _make_calc_entry(
        "payback_period", run_payback_period, "Payback Period Calculator",
        "Years until cumulative cash inflows recover the initial investment.",
        _CATEGORY,
        [_num("initial_investment", "Initial investment", gt=0),
         _series("cash_flows", "Annual cash inflows")],
        tags=["capital budgeting"],
        related=["npv"],
    ),
    "perpetuity": _make_calc_entry(
        "perpetuity", run_perpetuity, "Perpetuity Calculator",
        "Present value of a level or growing perpetual payment.",
        _CATEGORY,
        [_num("payment", "Payment per period", gt=0),
         _num("discount_rate", "Discount rate", "%", gt=0, le=100),
         _num("growth_rate", "Growth rate", "%", required=False, default=0.0, ge=-100, le=100)],
        tags=["tvm", "valuation"],
        related=["growing_annuity", "dividend_discount_model"],
    ),
    "growing_annuity": _make_calc_entry(
        "growing_annuity", run_growing_annuity, "Growing Annuity & Perpetuity",
        "Present value of a payment stream growing at a constant rate.",
        _CATEGORY,
        [_num("payment", "First payment", gt=0),
         _num("discount_rate", "Discount rate", "%", ge=0, le=100),
         _num("growth_rate", "Growth rate", "%", ge=-100, le=100),
         _num("periods", "Number of periods", gt=0, le=1000)],
        tags=["tvm", "annuity"],
        related=["perpetuity", "annuity_payment"],
    ),
    "annuity_payment": _make_calc_entry(
        "annuity_payment", run_annuity_payment, "Annuity Payment Calculator",
        "Level payment that amortizes a present value or accumulates a future value.",
        _CATEGORY,
        [_choice("basis", "Solve from", ["present_value", "future_value"], "present_value"),
         _num("amount", "Present or future value", gt=0),
         _num("annual_rate", "Annual rate", "%", ge=0, le=100),
         _num("periods", "Number of payments", gt=0, le=1200),
         _choice("frequency", "Payment frequency", list(_FREQUENCIES), "monthly"),
         _flag("annuity_due", "Payments at the start of each period")],
        tags=["tvm", "annuity"],
        related=["growing_annuity", "loan_emi"],
    ),
    "sip_returns": _make_calc_entry(
        "sip_returns", run_sip_returns, "SIP Returns Calculator",
        "Future value of a monthly systematic investment plan.",
        _CATEGORY,
        [_num("monthly_investment", "Monthly investment", gt=0),
         _num("expected_return", "Expected annual return", "%", ge=0, le=100),
         _num("years", "Investment period", "years", gt=0, le=60)],
        tags=["investing", "mutual fund", "sip"],
        related=["compound_interest", "future_value"],
    ),
    "real_interest_rate": _make_calc_entry(
        "real_interest_rate", run_real_interest_rate, "Real Interest Rate (Fisher)",
        "Inflation-adjusted return from nominal rate and inflation.",
        _CATEGORY,
        [_num("nominal_rate", "Nominal rate", "%", gt=-100, le=100),
         _num("inflation_rate", "Inflation rate", "%", gt=-100, le=100)],
        tags=["inflation", "interest"],
    ),
    "tax_equivalent_yield": _make_calc_entry(
        "tax_equivalent_yield", run_tax_equivalent_yield, "Tax-Equivalent Yield",
        "Taxable yield needed to match a tax-free yield.",
        _CATEGORY,
        [_num("tax_free_yield", "Tax-free yield", "%", ge=0, le=100),
         _num("tax_rate", "Marginal tax rate", "%", ge=0, lt=100)],
        tags=["bonds", "tax"],
        related=["bond_price"],
    ),
}
