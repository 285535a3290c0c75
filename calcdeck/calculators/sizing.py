"""Clothing, shoe, ring, glove and hat size converters."""

import math
from fractions import Fraction
from typing import Any, Dict, List, Optional

from ..helpers import _choice, _err, _make_calc_entry, _num, _ok, _round_int, _text, _tier


def _even_up(size: int) -> int:
    return size + 1 if size % 2 else size


# 1. Body Measurements to Clothing Size ───────────────────────────────────────
def run_body_to_clothing_size(v: Dict[str, Any]) -> Dict[str, Any]:
    waist = v["waist"]
    if v["gender"] == "men":
        if v["chest"] is None:
            return _err("Chest measurement is required for men's sizes", "chest")
        shirt = _even_up(_round_int(v["chest"]))
        pants = _round_int(waist)
        waist_cm = waist * 2.54
        shirts = {"US": shirt, "UK": shirt, "EU": shirt + 10, "India": shirt - 2, "Japan": shirt + 8}
        bottoms = {"US": pants, "UK": pants, "EU": _round_int(waist_cm + 10),
                   "India": _round_int(waist_cm - 2), "Japan": _round_int(waist_cm + 4)}
        return _ok(shirt, ["shirt = chest in, rounded up to even", "pants = waist in"],
                   shirt_sizes=shirts, pants_sizes=bottoms)

    if v["bust"] is None:
        return _err("Bust measurement is required for women's sizes", "bust")
    top = _even_up(_round_int((v["bust"] - 32) * 1.5))
    bottom = _even_up(_round_int(waist - 24))
    if top < 0 or bottom < 0:
        return _err("Measurements are below the smallest women's size", "bust" if top < 0 else "waist")

    def row(us: int) -> Dict[str, int]:
        return {"US": us, "UK": us - 2, "EU": us + 30, "India": us + 26, "Japan": us + 6}

    return _ok(top, ["top = (bust - 32) * 1.5, rounded up to even", "bottom = waist - 24, rounded up to even"],
               top_sizes=row(top), bottom_sizes=row(bottom))


# 2. Clothing Size Chart ──────────────────────────────────────────────────────
_SYSTEMS = ["US", "UK", "EU", "India", "Japan", "Intl"]

_SIZE_CHARTS: Dict[str, List[List[str]]] = {
    "men": [
        ["34", "34", "44", "34", "S", "S"],
        ["36", "36", "46", "36", "M", "M"],
        ["38", "38", "48", "38", "L", "L"],
        ["40", "40", "50", "40", "XL", "XL"],
        ["42", "42", "52", "42", "XXL", "XXL"],
        ["44", "44", "54", "44", "3XL", "3XL"],
    ],
    "women": [
        ["2", "6", "34", "XS", "5", "XS"],
        ["4", "8", "36", "S", "7", "S"],
        ["6", "10", "38", "M", "9", "M"],
        ["8", "12", "40", "L", "11", "L"],
        ["10", "14", "42", "XL", "13", "XL"],
        ["12", "16", "44", "XXL", "15", "XXL"],
    ],
    "kids": [
        ["2T", "2", "92", "2Y", "90", "2Y"],
        ["3T", "3", "98", "3Y", "95", "3Y"],
        ["4T", "4", "104", "4Y", "100", "4Y"],
        ["5", "5", "110", "5Y", "105", "5Y"],
        ["6", "6", "116", "6Y", "110", "6Y"],
        ["7", "7", "122", "7Y", "115", "7Y"],
        ["8", "8", "128", "8Y", "120", "8Y"],
        ["10", "10", "140", "10Y", "130", "10Y"],
        ["12", "12", "152", "12Y", "140", "12Y"],
    ],
}


def run_clothing_size_chart(v: Dict[str, Any]) -> Dict[str, Any]:
    chart = _SIZE_CHARTS[v["gender"]]
    col = _SYSTEMS.index(v["from_system"])
    wanted = v["size"].strip().lower()
    for row in chart:
        if row[col].lower() == wanted:
            sizes = dict(zip(_SYSTEMS, row))
            return _ok(sizes, [f"lookup {v['gender']} chart by {v['from_system']}"], **sizes)
    available = ", ".join(row[col] for row in chart)
    return _err(f"Size not found. Available {v['from_system']} sizes: {available}", "size")


# 3. Shoe Size ────────────────────────────────────────────────────────────────
_SHOE = {
    # UK offset, EU offset, CM intercept
    "men": (0.5, 33, 18.66),
    "women": (2.0, 31, 17.2),
}


def run_shoe_size(v: Dict[str, Any]) -> Dict[str, Any]:
    uk_off, eu_off, cm_base = _SHOE[v["gender"]]
    size = v["size"]
    system = v["from_system"]
    if system == "us":
        us = size
        cm = us * 0.847 + cm_base
    elif system in ("uk", "india"):
        us = size + uk_off
        cm = us * 0.847 + cm_base
    elif system == "eu":
        us = size - eu_off
        cm = size * 2 / 3
    else:
        cm = size
        us = (cm - cm_base) / 0.847
    if us <= 0 or cm <= 0:
        return _err("Size is outside the convertible range", "size")
    uk = us - uk_off
    sizes = {"US": us, "UK": uk, "EU": us + eu_off, "India": uk, "CM": cm, "JP": cm}
    return _ok(us, [f"UK = US - {uk_off}", f"EU = US + {eu_off}", f"CM = US * 0.847 + {cm_base}"], **sizes)


# 4. Ring Size ────────────────────────────────────────────────────────────────
# US, UK, diameter mm, circumference mm, EU, JP
_RING_SIZES = [
    (3, "F", 13.7, 43.1, 44, 4),
    (3.5, "G", 14.1, 44.3, 45, 5),
    (4, "H", 14.5, 45.5, 46, 6),
    (4.5, "I", 14.9, 46.8, 47, 7),
    (5, "J", 15.3, 48.0, 49, 9),
    (5.5, "K", 15.7, 49.3, 50, 10),
    (6, "L", 16.1, 50.6, 51, 11),
    (6.5, "M", 16.5, 51.8, 52, 12),
    (7, "N", 16.9, 53.1, 54, 14),
    (7.5, "O", 17.3, 54.4, 55, 15),
    (8, "P", 17.7, 55.7, 56, 16),
    (8.5, "Q", 18.1, 57.0, 58, 17),
    (9, "R", 18.5, 58.3, 59, 18),
    (9.5, "S", 19.0, 59.5, 60, 19),
    (10, "T", 19.4, 60.8, 62, 20),
    (10.5, "U", 19.8, 62.1, 63, 22),
    (11, "V", 20.2, 63.3, 64, 23),
    (11.5, "W", 20.6, 64.6, 66, 25),
    (12, "X", 21.0, 65.9, 67, 26),
    (12.5, "Y", 21.4, 67.2, 68, 27),
    (13, "Z", 21.8, 68.5, 70, 28),
]


def _interpolate(x: float, xs: List[float], ys: List[float]) -> float:
    if x <= xs[0]:
        return ys[0]
    if x >= xs[-1]:
        return ys[-1]
    for (x0, x1), (y0, y1) in zip(zip(xs, xs[1:]), zip(ys, ys[1:])):
        if x0 <= x <= x1:
            return y0 + (x - x0) / (x1 - x0) * (y1 - y0)
    return ys[0]


def _parse_ring_value(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def run_ring_size(v: Dict[str, Any]) -> Dict[str, Any]:
    measure = v["measure"]
    raw = v["value"].strip()
    us_col = [r[0] for r in _RING_SIZES]
    circ_col = [r[3] for r in _RING_SIZES]

    if measure == "uk":
        letter = raw.upper()
        entry = next((r for r in _RING_SIZES if r[1] == letter), None)
        if entry is None:
            return _err("UK letter not recognized; use F to Z", "value")
        diameter, circumference = entry[2], entry[3]
    else:
        value = _parse_ring_value(raw)
        if value is None:
            return _err(f"Enter a positive number for {measure}", "value")
        if measure == "circumference":
            circumference, diameter = value, value / math.pi
        elif measure == "diameter":
            diameter, circumference = value, value * math.pi
        else:
            diameter = _interpolate(value, us_col, [r[2] for r in _RING_SIZES])
            circumference = diameter * math.pi

    best = min(_RING_SIZES, key=lambda r: abs(circumference - r[3]))
    us_interp = _interpolate(circumference, circ_col, us_col)
    return _ok(
        us_interp,
        ["circumference = diameter * pi", "US interpolated on the standard circumference table"],
        closest_standard=f"{best[0]:g} (UK {best[1]})",
        closest_difference=circumference - best[3],
        diameter_mm=diameter,
        circumference_mm=circumference,
        UK=best[1],
        EU=_round_int(circumference),
        JP=_round_int(diameter),
    )


# 5. Foot Length to Shoe Size ─────────────────────────────────────────────────
def run_foot_length_size(v: Dict[str, Any]) -> Dict[str, Any]:
    length = v["foot_length"]
    us_men = _round_int(length * 0.3937 * 3 - 22 + 0.5)
    uk = us_men - 1
    return _ok(
        us_men,
        ["US men = round(len_in * 3 - 22 + 0.5)", "EU = round(len_cm * 1.5 + 17)"],
        us_men=us_men,
        us_women=us_men + 1.5,
        uk=uk,
        eu=_round_int(length * 1.5 + 17),
        jp=_round_int(length),
        india=uk,
    )


# 6. Glove Size ───────────────────────────────────────────────────────────────
def run_glove_size(v: Dict[str, Any]) -> Dict[str, Any]:
    inches = v["hand_circumference"] / 2.54
    letter = _tier(inches, [(7, "XS"), (8, "S"), (9, "M"), (10, "L"), (11, "XL")], "XXL", ascending=True)
    return _ok(
        _round_int(inches * 2) / 2,
        ["US/UK = round(in * 2) / 2", "EU = JP = round(in * 2.54)"],
        tier=letter,
        us_uk=_round_int(inches * 2) / 2,
        eu=_round_int(inches * 2.54),
        jp=_round_int(inches * 2.54),
        india=_round_int(inches * 2.54 - 1),
    )


# 7. Hat Size ─────────────────────────────────────────────────────────────────
def _eighths(decimal: float) -> str:
    frac = Fraction(_round_int(decimal * 8), 8)
    whole = frac.numerator // frac.denominator
    rest = frac - whole
    if rest == 0:
        return str(whole)
    return f"{whole} {rest.numerator}/{rest.denominator}" if whole else f"{rest.numerator}/{rest.denominator}"


def run_hat_size(v: Dict[str, Any]) -> Dict[str, Any]:
    cm = v["head_circumference"]
    inches = cm / 2.54
    us = inches / math.pi
    letter = _tier(cm, [(55, "S"), (57, "M"), (59, "L"), (61, "XL")], "XXL", ascending=True)
    return _ok(_eighths(us), ["US fitted = inches / pi, nearest 1/8"], tier=letter,
               us_decimal=us, inches=inches, eu=_round_int(cm), jp=_round_int(cm))


# 8. Height Converter ─────────────────────────────────────────────────────────
def run_height_converter(v: Dict[str, Any]) -> Dict[str, Any]:
    cm = v["cm"]
    if cm is None:
        if v["feet"] is None and v["inches"] is None:
            return _err("Enter a height in centimetres or in feet and inches", "cm")
        total_in = (v["feet"] or 0) * 12 + (v["inches"] or 0)
        cm = total_in * 2.54
        log = ["cm = (ft * 12 + in) * 2.54"]
    else:
        total_in = cm / 2.54
        log = ["in = cm / 2.54", "ft = floor(in / 12)"]
    feet = math.floor(total_in / 12)
    inches = total_in - feet * 12
    return _ok(cm, log, feet=feet, inches=inches, total_inches=total_in,
               formatted=f"{feet}' {inches:.1f}\"", meters=cm / 100)


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "conversions"


def _inches(field_id: str, label: str, required: bool = True) -> Any:
    return _num(field_id, label, "in", "length", required=required, gt=0, le=100)


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "body_to_clothing_size": _make_calc_entry(
        "body_to_clothing_size", run_body_to_clothing_size, "Body Measurement to Clothing Size",
        "Shirt, pants, top and bottom sizes across US, UK, EU, India and Japan.",
        _CATEGORY,
        [_choice("gender", "Gender", ["men", "women"]),
         _inches("chest", "Chest", required=False),
         _inches("bust", "Bust", required=False),
         _inches("waist", "Waist")],
        tags=["clothing", "sizes"],
        related=["clothing_size_chart"],
    ),
    "clothing_size_chart": _make_calc_entry(
        "clothing_size_chart", run_clothing_size_chart, "Clothing Size Converter",
        "Convert a labelled clothing size between regional systems.",
        _CATEGORY,
        [_choice("gender", "Chart", list(_SIZE_CHARTS)),
         _choice("from_system", "Size system", _SYSTEMS, "US"),
         _text("size", "Size")],
        tags=["clothing", "sizes"],
        related=["body_to_clothing_size"],
    ),
    "shoe_size": _make_calc_entry(
        "shoe_size", run_shoe_size, "Shoe Size Converter",
        "Convert shoe sizes between US, UK, EU, India and centimetres.",
        _CATEGORY,
        [_choice("gender", "Gender", list(_SHOE)),
         _choice("from_system", "From", ["us", "uk", "india", "eu", "cm", "jp"], "us"),
         _num("size", "Size", gt=0, le=60)],
        tags=["shoes", "sizes"],
        related=["foot_length_size"],
    ),
    "ring_size": _make_calc_entry(
        "ring_size", run_ring_size, "Ring Size Converter",
        "Ring size from circumference, diameter, a US size or a UK letter.",
        _CATEGORY,
        [_choice("measure", "Known measurement", ["circumference", "diameter", "us", "uk"], "circumference"),
         _text("value", "Value")],
        tags=["jewelry", "sizes"],
    ),
    "foot_length_size": _make_calc_entry(
        "foot_length_size", run_foot_length_size, "Foot Length to Shoe Size",
        "Shoe sizes from a measured foot length.",
        _CATEGORY,
        [_num("foot_length", "Foot length", "cm", "length", gt=10, le=40)],
        tags=["shoes", "sizes"],
        related=["shoe_size"],
    ),
    "glove_size": _make_calc_entry(
        "glove_size", run_glove_size, "Glove Size Converter",
        "Glove sizes from hand circumference.",
        _CATEGORY,
        [_num("hand_circumference", "Hand circumference", "cm", "length", gt=0, le=60)],
        tags=["gloves", "sizes"],
    ),
    "hat_size": _make_calc_entry(
        "hat_size", run_hat_size, "Hat Size Converter",
        "Fitted hat size from head circumference.",
        _CATEGORY,
        [_num("head_circumference", "Head circumference", "cm", "length", gt=20, le=90)],
        tags=["hats", "sizes"],
    ),
    "height_converter": _make_calc_entry(
        "height_converter", run_height_converter, "Height Converter",
        "Convert between centimetres and feet and inches.",
        _CATEGORY,
        [_num("cm", "Height in cm", required=False, gt=0, le=300),
         _num("feet", "Feet", required=False, ge=0, le=9),
         _num("inches", "Inches", required=False, ge=0, lt=120)],
        tags=["height", "length"],
    ),
}
