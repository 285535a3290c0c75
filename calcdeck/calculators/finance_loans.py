"""
Loan and credit calculators: EMI, mortgage, amortization with extra
payments, student loan plans, interest-only loans and credit utilization.
"""

import math
from typing import Any, Dict, List

from ..helpers import _choice, _err, _make_calc_entry, _num, _ok, _tier

MAX_MONTHS = 600


def _monthly_payment(principal: float, annual_rate_pct: float, months: int) -> float:
    r = annual_rate_pct / 12 / 100
    if r == 0:
        return principal / months
    growth = (1 + r) ** months
    return principal * r * growth / (growth - 1)


def _amortize(balance: float, annual_rate_pct: float, payment: float,
              extra_for_month=None) -> Dict[str, Any]:
    """Run a monthly amortization loop, bounded to MAX_MONTHS."""
    r = annual_rate_pct / 12 / 100
    month = 0
    total_interest = 0.0
    rows: List[Dict[str, float]] = []
    while balance > 0.01 and month < MAX_MONTHS:
        month += 1
        interest = balance * r
        extra = extra_for_month(month) if extra_for_month else 0.0
        principal = min(payment - interest + extra, balance)
        if principal <= 0:
            break
        balance -= principal
        total_interest += interest
        rows.append({
            "month": month,
            "payment": interest + principal,
            "principal": principal,
            "interest": interest,
            "balance": max(balance, 0.0),
        })
    return {"months": month, "total_interest": total_interest, "rows": rows, "paid_off": balance <= 0.01}


def _yearly_schedule(principal: float, annual_rate_pct: float, years: int, payment: float) -> List[Dict[str, float]]:
    r = annual_rate_pct / 12 / 100
    balance = principal
    cumulative_interest = 0.0
    schedule = []
    for year in range(1, years + 1):
        year_principal = year_interest = 0.0
        for _ in range(12):
            if balance <= 0:
                break
            interest = balance * r
            principal_part = min(payment - interest, balance)
            balance -= principal_part
            year_principal += principal_part
            year_interest += interest
        cumulative_interest += year_interest
        schedule.append({
            "year": year,
            "principal_paid": year_principal,
            "interest_paid": year_interest,
            "balance": max(balance, 0.0),
            "cumulative_interest": cumulative_interest,
        })
    return schedule


# 1. Loan EMI ─────────────────────────────────────────────────────────────────
def run_loan_emi(v: Dict[str, Any]) -> Dict[str, Any]:
    principal = v["principal"]
    rate = v["annual_rate"]
    months = int(round(v["tenure_years"] * 12))
    if months < 1:
        return _err("Tenure must cover at least one month", "tenure_years")
    emi = _monthly_payment(principal, rate, months)
    total = emi * months
    return _ok(
        emi,
        ["r = annual_rate/12/100, n = years*12", "EMI = P*r*(1+r)^n / ((1+r)^n - 1)"],
        total_payment=total,
        total_interest=total - principal,
        schedule=_yearly_schedule(principal, rate, math.ceil(months / 12), emi),
    )


# 2. Mortgage Payment ─────────────────────────────────────────────────────────
def run_mortgage_payment(v: Dict[str, Any]) -> Dict[str, Any]:
    price = v["home_price"]
    down = v["down_payment"]
    if down >= price:
        return _err("Down payment must be less than the home price", "down_payment")
    loan = price - down
    months = int(round(v["term_years"] * 12))
    if months < 1:
        return _err("Loan term must cover at least one month", "term_years")
    principal_interest = _monthly_payment(loan, v["annual_rate"], months)
    escrow = (v["annual_property_tax"] + v["annual_insurance"]) / 12
    ltv = loan / price * 100
    tier = _tier(ltv, [(80, "Conventional"), (90, "PMI Likely")], "High LTV", ascending=True)
    return _ok(
        principal_interest + escrow,
        ["loan = price - down payment", "P&I = standard amortizing payment",
         "total = P&I + (tax + insurance)/12"],
        tier=tier,
        loan_amount=loan,
        principal_and_interest=principal_interest,
        escrow=escrow,
        loan_to_value=ltv,
        total_interest=principal_interest * months - loan,
    )


# 3. Loan Amortization with Extra Payments ───────────────────────────────────
def run_loan_amortization_extra_payments(v: Dict[str, Any]) -> Dict[str, Any]:
    principal = v["principal"]
    rate = v["annual_rate"]
    months = int(round(v["term_years"] * 12))
    if months < 1:
        return _err("Loan term must cover at least one month", "term_years")
    extra = v["extra_payment"]
    frequency = v["extra_frequency"]
    payment = _monthly_payment(principal, rate, months)

    def extra_for_month(month: int) -> float:
        if frequency == "monthly":
            return extra
        if frequency == "yearly":
            return extra if month % 12 == 1 else 0.0
        return extra if month == 1 else 0.0

    baseline = _amortize(principal, rate, payment)
    accelerated = _amortize(principal, rate, payment, extra_for_month)
    return _ok(
        accelerated["months"],
        ["payment = standard amortizing payment",
         "principal = min(payment - interest + extra, balance) while balance > 0.01"],
        monthly_payment=payment,
        total_interest=accelerated["total_interest"],
        interest_saved=baseline["total_interest"] - accelerated["total_interest"],
        months_saved=baseline["months"] - accelerated["months"],
        schedule=accelerated["rows"][:12],
    )


# 4. Student Loan Repayment ───────────────────────────────────────────────────
_PLAN_YEARS = {"standard": 10, "extended": 25, "graduated": 10}
_POVERTY_GUIDELINE = 15060
_PER_PERSON = 5250


def run_student_loan_repayment(v: Dict[str, Any]) -> Dict[str, Any]:
    balance = v["loan_balance"]
    rate = v["annual_rate"]
    plan = v["plan"]
    log = []

    if plan in _PLAN_YEARS:
        payment = _monthly_payment(balance, rate, _PLAN_YEARS[plan] * 12)
        if plan == "graduated":
            payment *= 0.5
            log.append("graduated plan starts at half the standard payment")
    else:
        income = v["annual_income"]
        if income is None:
            return _err("Annual income is required for income-driven plans", "annual_income")
        family = v["family_size"]
        discretionary = max(0.0, income - (1.5 * _POVERTY_GUIDELINE + (family - 1) * _PER_PERSON))
        log.append("discretionary = income - 150% of poverty guideline")
        if plan == "paye":
            payment = min(discretionary * 0.10 / 12, _monthly_payment(balance, 6.5, 20 * 12))
        elif plan == "repaye":
            payment = discretionary * 0.10 / 12
        elif plan == "ibr":
            payment = discretionary * 0.15 / 12
        else:
            payment = min(discretionary * 0.20 / 12, _monthly_payment(balance, 6.5, 12 * 12))

    payment += v["extra_payment"]
    if payment <= balance * rate / 12 / 100:
        return _err("Payment does not cover monthly interest; the balance would never be repaid", "plan")
    result = _amortize(balance, rate, payment)
    log.append("amortize monthly while balance > 0.01, up to 600 months")
    return _ok(
        payment,
        log,
        months=result["months"],
        total_interest=result["total_interest"],
        total_cost=balance + result["total_interest"],
        paid_off=result["paid_off"],
        schedule=result["rows"][:12],
    )


# 5. Interest-Only Loan Payment ───────────────────────────────────────────────
def run_interest_only_payment(v: Dict[str, Any]) -> Dict[str, Any]:
    principal = v["principal"]
    rate = v["annual_rate"]
    io_payment = principal * rate / 100 / 12
    remaining_months = int(round((v["term_years"] - v["interest_only_years"]) * 12))
    if remaining_months < 1:
        return _err("Interest-only period must be shorter than the loan term", "interest_only_years")
    amortizing = _monthly_payment(principal, rate, remaining_months)
    return _ok(
        io_payment,
        ["interest-only payment = P * r / 12",
         "amortizing payment over the remaining term"],
        amortizing_payment=amortizing,
        payment_shock=amortizing - io_payment,
        total_interest=io_payment * v["interest_only_years"] * 12 + amortizing * remaining_months - principal,
    )


# 6. Credit Utilization ───────────────────────────────────────────────────────
_UTILIZATION_BANDS = [(10, "Excellent"), (30, "Good"), (50, "Fair")]


def run_credit_utilization(v: Dict[str, Any]) -> Dict[str, Any]:
    used = v["total_balance"]
    limit = v["total_limit"]
    ratio = used / limit * 100
    extra: Dict[str, Any] = {}
    if v["card_balance"] is not None and v["card_limit"]:
        card_ratio = v["card_balance"] / v["card_limit"] * 100
        extra["card_utilization"] = card_ratio
        extra["card_tier"] = _tier(card_ratio, _UTILIZATION_BANDS, "High", ascending=True)
    return _ok(
        ratio,
        ["utilization = balance / limit * 100"],
        tier=_tier(ratio, _UTILIZATION_BANDS, "High", ascending=True),
        balance_to_reach_30=max(0.0, used - 0.30 * limit),
        **extra,
    )


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "finance"

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "loan_emi": _make_calc_entry(
        "loan_emi", run_loan_emi, "Loan EMI Calculator",
        "Equated monthly instalment, total interest and a yearly balance schedule.",
        _CATEGORY,
        [_num("principal", "Loan amount", gt=0),
         _num("annual_rate", "Annual interest rate", "%", ge=0, le=100),
         _num("tenure_years", "Tenure in years", "years", gt=0, le=50)],
        tags=["loan", "emi", "interest"],
        related=["mortgage_payment", "loan_amortization_extra_payments"],
    ),
    "mortgage_payment": _make_calc_entry(
        "mortgage_payment", run_mortgage_payment, "Mortgage Payment Calculator",
        "Monthly principal, interest, tax and insurance for a home loan.",
        _CATEGORY,
        [_num("home_price", "Home price", gt=0),
         _num("down_payment", "Down payment", ge=0),
         _num("annual_rate", "Annual interest rate", "%", ge=0, le=100),
         _num("term_years", "Loan term in years", "years", gt=0, le=50),
         _num("annual_property_tax", "Annual property tax", required=False, default=0.0, ge=0),
         _num("annual_insurance", "Annual home insurance", required=False, default=0.0, ge=0)],
        tags=["mortgage", "home", "loan"],
        related=["loan_emi", "interest_only_payment"],
    ),
    "loan_amortization_extra_payments": _make_calc_entry(
        "loan_amortization_extra_payments", run_loan_amortization_extra_payments,
        "Loan Amortization with Extra Payments",
        "Months and interest saved by monthly, yearly or one-time extra payments.",
        _CATEGORY,
        [_num("principal", "Loan amount", gt=0),
         _num("annual_rate", "Annual interest rate", "%", ge=0, le=100),
         _num("term_years", "Loan term in years", "years", gt=0, le=50),
         _num("extra_payment", "Extra payment amount", required=False, default=0.0, ge=0),
         _choice("extra_frequency", "Extra payment frequency", ["monthly", "yearly", "one_time"], "monthly")],
        tags=["loan", "amortization", "prepayment"],
        related=["loan_emi", "student_loan_repayment"],
    ),
    "student_loan_repayment": _make_calc_entry(
        "student_loan_repayment", run_student_loan_repayment, "Student Loan Repayment Calculator",
        "Monthly payment, payoff time and total interest under federal repayment plans.",
        _CATEGORY,
        [_num("loan_balance", "Loan balance", gt=0),
         _num("annual_rate", "Annual interest rate", "%", ge=0, le=30),
         _choice("plan", "Repayment plan",
                 ["standard", "extended", "graduated", "paye", "repaye", "ibr", "icr"], "standard"),
         _num("annual_income", "Annual gross income", required=False, ge=0),
         _num("family_size", "Family size", required=False, default=1, ge=1, le=20),
         _num("extra_payment", "Extra monthly payment", required=False, default=0.0, ge=0)],
        tags=["student loan", "education", "idr"],
        related=["loan_amortization_extra_payments"],
    ),
    "interest_only_payment": _make_calc_entry(
        "interest_only_payment", run_interest_only_payment, "Interest-Only Loan Payment",
        "Interest-only payment, the amortizing payment that follows, and the payment shock.",
        _CATEGORY,
        [_num("principal", "Loan amount", gt=0),
         _num("annual_rate", "Annual interest rate", "%", gt=0, le=100),
         _num("term_years", "Total loan term in years", "years", gt=0, le=50),
         _num("interest_only_years", "Interest-only period in years", "years", ge=0)],
        tags=["loan", "interest only"],
        related=["mortgage_payment"],
    ),
    "credit_utilization": _make_calc_entry(
        "credit_utilization", run_credit_utilization, "Credit Utilization Ratio",
        "Revolving balance as a share of credit limit, overall and per card.",
        _CATEGORY,
        [_num("total_balance", "Total card balances", ge=0),
         _num("total_limit", "Total credit limits", gt=0),
         _num("card_balance", "Single card balance", required=False, ge=0),
         _num("card_limit", "Single card limit", required=False, gt=0)],
        tags=["credit", "credit score"],
    ),
}
