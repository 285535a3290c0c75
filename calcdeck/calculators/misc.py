"""Everyday utilities: battery runtime, date spans, travel emissions, mining yield and Punnett squares."""

import calendar
from datetime import date, timedelta
from typing import Any, Dict, List

from ..helpers import _choice, _date, _err, _int, _make_calc_entry, _num, _ok

_CATEGORY = "misc"


# 1. Battery Life ─────────────────────────────────────────────────────────────
def _format_hours(hours: float) -> str:
    h = int(hours)
    m = int((hours - h) * 60)
    return f"{h} hours and {m} minutes"


def run_battery_life(v: Dict[str, Any]) -> Dict[str, Any]:
    capacity = v["capacity_mah"]
    if v["voltage"] and v["power_mw"]:
        hours = capacity * v["voltage"] / v["power_mw"]
        log = ["hours = capacity mAh * voltage V / power mW"]
    elif v["current_ma"]:
        hours = capacity / v["current_ma"]
        log = ["hours = capacity mAh / current mA"]
    else:
        return _err("Provide either current_ma, or voltage and power_mw", "current_ma")
    return _ok(hours, log, formatted=_format_hours(hours), days=hours / 24)


# 2. Date Difference ──────────────────────────────────────────────────────────
def _add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _business_days(start: date, end: date) -> int:
    """Mon-Fri days in [start, end)."""
    full_weeks, extra = divmod((end - start).days, 7)
    count = full_weeks * 5
    for offset in range(extra):
        if (start + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            count += 1
    return count


def run_date_difference(v: Dict[str, Any]) -> Dict[str, Any]:
    start, end = v["start_date"], v["end_date"]
    log: List[str] = []
    if end < start:
        start, end = end, start
        log.append("end date is before start date: dates swapped")

    total_days = (end - start).days
    months = (end.year - start.year) * 12 + end.month - start.month
    if _add_months(start, months) > end:
        months -= 1
    anchor = _add_months(start, months)
    years, months = divmod(months, 12)
    days = (end - anchor).days

    log.append(f"{years} years, {months} months, {days} days")
    return _ok(total_days, log, years=years, months=months, days=days,
               weeks=total_days // 7, remaining_days=total_days % 7,
               business_days=_business_days(start, end))


# 3. Travel Carbon Footprint ──────────────────────────────────────────────────
# kg CO2e per passenger-km
FLIGHT_FACTOR = 0.158
TRAIN_FACTOR = 0.041
PETROL_KG_PER_L = 2.31
DEFAULT_CAR_L_PER_100KM = 7.0


def run_travel_carbon_footprint(v: Dict[str, Any]) -> Dict[str, Any]:
    distance = v["distance_km"]
    passengers = v["passengers"]
    mode = v["mode"]
    if mode == "flight":
        total = distance * FLIGHT_FACTOR * passengers
        log = [f"flight: {FLIGHT_FACTOR} kg/km per passenger"]
    elif mode == "train":
        total = distance * TRAIN_FACTOR * passengers
        log = [f"train: {TRAIN_FACTOR} kg/km per passenger"]
    else:
        efficiency = v["car_l_per_100km"] or DEFAULT_CAR_L_PER_100KM
        litres = efficiency * distance / 100
        total = litres * PETROL_KG_PER_L
        log = [f"car: {litres:.2f} L of fuel * {PETROL_KG_PER_L} kg/L, shared by the whole car"]
    return _ok(total, log, per_passenger_kg=total / passengers)


# 4. Crypto Mining Profit ─────────────────────────────────────────────────────
def run_crypto_mining_profit(v: Dict[str, Any]) -> Dict[str, Any]:
    hashes_per_day = v["hash_rate_ths"] * 1e12 * 86400
    coins_per_day = hashes_per_day / (v["network_difficulty"] * 2 ** 32) * v["block_reward"]
    revenue = coins_per_day * v["coin_price"]
    cost = v["power_kw"] * 24 * v["electricity_cost"]
    profit = revenue - cost
    tier = "Profitable" if profit > 0 else "Break-even" if profit == 0 else "Unprofitable"
    return _ok(profit, ["coins/day = hashes/day / (difficulty * 2^32) * block reward",
                        "profit = coins * price - kW * 24 * cost per kWh"],
               tier=tier, coins_per_day=coins_per_day, revenue_per_day=revenue, cost_per_day=cost,
               profit_per_month=profit * 30)


# 5. Genetic Trait Probability ────────────────────────────────────────────────
GENOTYPES = ["AA", "Aa", "aa"]


def run_genetic_trait_probability(v: Dict[str, Any]) -> Dict[str, Any]:
    p1, p2 = v["parent1"], v["parent2"]
    counts = dict.fromkeys(GENOTYPES, 0)
    square = []
    for a2 in p2:
        row = []
        for a1 in p1:
            child = "".join(sorted(a1 + a2))  # uppercase sorts first: "Aa"
            counts[child] += 1
            row.append(child)
        square.append(row)

    genotypes = {g: n / 4 * 100 for g, n in counts.items()}
    dominant = genotypes["AA"] + genotypes["Aa"]
    return _ok(dominant, [f"{p1} x {p2} Punnett square"], genotypes=genotypes,
               phenotypes={"dominant": dominant, "recessive": genotypes["aa"]}, punnett_square=square)


# ── Registry ─────────────────────────────────────────────────────────────────

CALCULATORS: Dict[str, Dict[str, Any]] = {
    "battery_life": _make_calc_entry(
        "battery_life", run_battery_life, "Battery Life Estimator",
        "Runtime from capacity and either current draw or power draw.",
        _CATEGORY,
        [_num("capacity_mah", "Battery capacity", unit="mAh", gt=0),
         _num("current_ma", "Current draw", unit="mA", required=False, gt=0),
         _num("voltage", "Battery voltage", unit="V", required=False, gt=0),
         _num("power_mw", "Power draw", unit="mW", required=False, gt=0)],
        tags=["electronics", "technology"],
    ),
    "date_difference": _make_calc_entry(
        "date_difference", run_date_difference, "Date Difference Calculator",
        "Days between two dates with a years, months and days breakdown.",
        _CATEGORY,
        [_date("start_date", "Start date"), _date("end_date", "End date")],
        tags=["time", "calendar"],
        related=["due_date"],
    ),
    "travel_carbon_footprint": _make_calc_entry(
        "travel_carbon_footprint", run_travel_carbon_footprint, "Travel Carbon Footprint Calculator",
        "CO2e for a trip by plane, train or car.",
        _CATEGORY,
        [_choice("mode", "Travel mode", ["flight", "train", "car"]),
         _num("distance_km", "Distance", unit="km", analyte="distance", gt=0),
         _int("passengers", "Passengers", default=1, required=False, ge=1),
         _num("car_l_per_100km", "Car fuel use", unit="L/100km", required=False, gt=0)],
        tags=["travel", "environment"],
    ),
    "crypto_mining_profit": _make_calc_entry(
        "crypto_mining_profit", run_crypto_mining_profit, "Crypto Mining Profitability Calculator",
        "Daily and monthly mining profit from hash rate, difficulty and power cost.",
        _CATEGORY,
        [_num("hash_rate_ths", "Hash rate", unit="TH/s", gt=0),
         _num("power_kw", "Power consumption", unit="kW", ge=0),
         _num("electricity_cost", "Electricity cost", unit="$/kWh", ge=0),
         _num("block_reward", "Block reward", unit="coins", gt=0),
         _num("network_difficulty", "Network difficulty", gt=0),
         _num("coin_price", "Coin price", unit="$", ge=0)],
        tags=["crypto", "bitcoin"],
    ),
    "genetic_trait_probability": _make_calc_entry(
        "genetic_trait_probability", run_genetic_trait_probability, "Genetic Trait Probability Calculator",
        "Offspring genotype and phenotype odds for a single-gene trait.",
        _CATEGORY,
        [_choice("parent1", "Parent 1 genotype", GENOTYPES), _choice("parent2", "Parent 2 genotype", GENOTYPES)],
        tags=["genetics", "punnett"],
    ),
}
