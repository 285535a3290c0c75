"""
Fixed-coupon bond calculators.

All four share the same cash flow model: ``years * payments_per_year``
coupons of ``coupon_rate * face_value / payments_per_year`` plus the face
value at maturity, discounted at ``ytm / payments_per_year`` per period.
"""

from typing import Any, Dict, List, Tuple

from ..helpers import _choice, _clamp, _err, _make_calc_entry, _num, _ok, _tier

_PAYMENT_FREQUENCIES = {"annual": 1, "semi_annual": 2, "quarterly": 4, "monthly": 12}

MAX_ITERATIONS = 100
TOLERANCE = 1e-4


# ── Helpers ──────────────────────────────────────────────────────────────────

def _cash_flows(face: float, coupon_pct: float, years: float, m: int) -> List[Tuple[int, float]]:
    n = int(round(years * m))
    c = coupon_pct / 100 * face / m
    flows = [(t, c) for t in range(1, n + 1)]
    if flows:
        flows[-1] = (n, c + face)
    return flows


def _price(flows: List[Tuple[int, float]], y: float) -> float:
    return sum(cf / (1 + y) ** t for t, cf in flows)


def _price_derivative(flows: List[Tuple[int, float]], y: float) -> float:
    return sum(-t * cf / (1 + y) ** (t + 1) for t, cf in flows)


def _periods_check(v: Dict[str, Any]) -> Any:
    m = _PAYMENT_FREQUENCIES[v["payment_frequency"]]
    flows = _cash_flows(v["face_value"], v["coupon_rate"], v["years"], m)
    if not flows:
        return None, m
    return flows, m


# 1. Bond Price ───────────────────────────────────────────────────────────────
def run_bond_price(v: Dict[str, Any]) -> Dict[str, Any]:
    flows, m = _periods_check(v)
    if flows is None:
        return _err("Maturity must cover at least one coupon period", "years")
    face = v["face_value"]
    y = v["yield_to_maturity"] / 100 / m
    price = _price(flows, y)
    premium = (price - face) / face * 100
    tier = _tier(premium, [(10, "High Premium"), (5, "Premium"), (0, "At Par"),
                           (-5, "Discount"), (-10, "Deep Discount")], "Very Deep Discount")
    coupon = v["coupon_rate"] / 100 * face
    return _ok(
        price,
        ["P = sum(c / (1+y)^t) + F / (1+y)^n"],
        tier=tier,
        premium_percent=premium,
        current_yield=coupon / price * 100,
        total_coupons=coupon * v["years"],
    )


# 2. Yield to Maturity ────────────────────────────────────────────────────────
def run_bond_yield_to_maturity(v: Dict[str, Any]) -> Dict[str, Any]:
    flows, m = _periods_check(v)
    if flows is None:
        return _err("Maturity must cover at least one coupon period", "years")
    target = v["current_price"]
    y = v["coupon_rate"] / 100 / m
    converged = False
    iterations = 0
    try:
        for iterations in range(1, MAX_ITERATIONS + 1):
            diff = _price(flows, y) - target
            if abs(diff) < TOLERANCE:
                converged = True
                break
            slope = _price_derivative(flows, y)
            if abs(slope) < 1e-10:
                y += 0.01
                continue
            y = _clamp(y - diff / slope, -0.5, 2.0)
    except (OverflowError, ZeroDivisionError):
        return _err("No yield in range prices the bond at this market price", "current_price")

    ytm = y * m * 100
    face = v["face_value"]
    if target > face:
        status = "Premium"
    elif target < face:
        status = "Discount"
    else:
        status = "Par"
    result = _ok(
        ytm,
        ["solve P = sum(c / (1+y)^t) + F / (1+y)^n for y (Newton)", "YTM = y * payments per year"],
        tier=status,
        current_yield=v["coupon_rate"] / 100 * face / target * 100,
        iterations=iterations,
    )
    if not converged:
        result["warnings"].append(f"Yield did not converge within {MAX_ITERATIONS} iterations")
    return result


# 3. Duration ─────────────────────────────────────────────────────────────────
def run_bond_duration(v: Dict[str, Any]) -> Dict[str, Any]:
    flows, m = _periods_check(v)
    if flows is None:
        return _err("Maturity must cover at least one coupon period", "years")
    y = v["yield_to_maturity"] / 100 / m
    price = _price(flows, y)
    macaulay = sum(t * cf / (1 + y) ** t for t, cf in flows) / price / m
    modified = macaulay / (1 + y)
    shift = v["yield_change_bp"] / 10000
    price_change_pct = -modified * shift * 100
    tier = _tier(modified, [(8, "Very High"), (5, "High"), (3, "Moderate"), (1, "Low")], "Very Low")
    return _ok(
        macaulay,
        ["D_mac = sum(t * PV_t) / P / m", "D_mod = D_mac / (1 + y)", "dP/P = -D_mod * dy"],
        tier=tier,
        modified_duration=modified,
        price=price,
        price_change_percent=price_change_pct,
        price_change=price * price_change_pct / 100,
    )


# 4. Convexity ────────────────────────────────────────────────────────────────
def run_bond_convexity(v: Dict[str, Any]) -> Dict[str, Any]:
    flows, m = _periods_check(v)
    if flows is None:
        return _err("Maturity must cover at least one coupon period", "years")
    y = v["yield_to_maturity"] / 100 / m
    price = _price(flows, y)
    raw = sum(t * (t + 1) * cf / (1 + y) ** t for t, cf in flows)
    convexity = raw / price / m ** 2
    per_year = convexity / v["years"]
    tier = _tier(per_year, [(50, "Very High"), (20, "High"), (10, "Moderate"), (5, "Low")], "Very Low")
    return _ok(
        convexity,
        ["C = sum(t(t+1) PV_t) / P / m^2", "textbook C = C / (1+y)^2"],
        tier=tier,
        convexity_per_year=per_year,
        textbook_convexity=convexity / (1 + y) ** 2,
        price=price,
    )


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "finance"


def _bond_inputs(*middle: Any) -> list:
    return [
        _num("face_value", "Face value", gt=0),
        _num("coupon_rate", "Annual coupon rate", "%", ge=0, le=100),
        *middle,
        _num("years", "Years to maturity", "years", gt=0, le=100),
        _choice("payment_frequency", "Coupon frequency", list(_PAYMENT_FREQUENCIES), "semi_annual"),
    ]


_YTM = _num("yield_to_maturity", "Yield to maturity", "%", gt=-50, le=100)

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "bond_price": _make_calc_entry(
        "bond_price", run_bond_price, "Bond Price Calculator",
        "Present value of a bond's coupons and face value at a given yield.",
        _CATEGORY,
        _bond_inputs(_YTM),
        tags=["bonds", "fixed income"],
        related=["bond_yield_to_maturity", "bond_duration"],
    ),
    "bond_yield_to_maturity": _make_calc_entry(
        "bond_yield_to_maturity", run_bond_yield_to_maturity, "Bond Yield to Maturity (YTM)",
        "Annualized yield that prices the bond at its market price.",
        _CATEGORY,
        _bond_inputs(_num("current_price", "Current market price", gt=0)),
        tags=["bonds", "yield"],
        related=["bond_price"],
    ),
    "bond_duration": _make_calc_entry(
        "bond_duration", run_bond_duration, "Bond Duration Calculator",
        "Macaulay and modified duration with a price change estimate.",
        _CATEGORY,
        _bond_inputs(_YTM, _num("yield_change_bp", "Yield change", "bp", required=False,
                                default=100.0, ge=-1000, le=1000)),
        tags=["bonds", "interest rate risk"],
        related=["bond_convexity", "bond_price"],
    ),
    "bond_convexity": _make_calc_entry(
        "bond_convexity", run_bond_convexity, "Bond Convexity Calculator",
        "Second-order price sensitivity of a bond to yield changes.",
        _CATEGORY,
        _bond_inputs(_YTM),
        tags=["bonds", "interest rate risk"],
        related=["bond_duration"],
    ),
}
