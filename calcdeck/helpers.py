"""
Shared parsing, unit conversion, tiering and result helpers used by every
calculator module.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import CalcInput, CalculatorDef, build_input_model


class UnitError(ValueError):
    """Raised when a value arrives in a unit its field cannot accept."""


# ── Helpers ──────────────────────────────────────────────────────────────────

def _clamp(val: float, lo: float, hi: float) -> float:
    return max(lo, min(val, hi))


def _round_half_up(val: float, ndigits: int = 0) -> float:
    """Round like a spreadsheet does: 2.5 -> 3, -2.5 -> -2."""
    factor = 10 ** ndigits
    return math.floor(val * factor + 0.5) / factor


def _round_int(val: float) -> int:
    return int(math.floor(val + 0.5))


def _parse_num(raw: Any, default: float = 0.0) -> float:
    """Parse a numeric variable (ignore unit)."""
    if isinstance(raw, dict):
        return _parse_num(raw.get("value"), default)
    if raw is None:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, dict):
        return _parse_bool(raw.get("value", False))
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "yes", "y", "1")
    if isinstance(raw, (int, float)):
        return bool(raw)
    return False


def _parse_str(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("value", ""))
    return str(raw) if raw is not None else ""


def _parse_date(raw: Any) -> Optional[date]:
    """Accept a date, a datetime or an ISO YYYY-MM-DD string."""
    if isinstance(raw, dict):
        return _parse_date(raw.get("value"))
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw.strip():
        return date.fromisoformat(raw.strip()[:10])
    return None


_SERIES_SPLIT = re.compile(r"[,;\s]+")
_RECORD_SPLIT = re.compile(r"[;\n]+")


def _parse_series(raw: Any) -> Any:
    """Split "100, -20 30" into [100.0, -20.0, 30.0]; lists pass through."""
    if isinstance(raw, str):
        parts = [p for p in _SERIES_SPLIT.split(raw.strip()) if p]
        try:
            return [float(p) for p in parts]
        except ValueError:
            return parts  # let validation report the bad item
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return [float(raw)]
    return raw


def _parse_records(raw: Any) -> Any:
    """Split "3x10x60; 4x8x80" into one string per record."""
    if isinstance(raw, str):
        return [p.strip() for p in _RECORD_SPLIT.split(raw) if p.strip()]
    if isinstance(raw, dict):
        return [raw]
    return raw


# ── Unit conversion ─────────────────────────────────────────────────────────

# Factors convert each unit to the family's base unit (first key).
_UNIT_CONVERSIONS: Dict[str, Dict[str, float]] = {
    "weight":      {"kg": 1.0, "kgs": 1.0, "g": 0.001, "lb": 0.45359237, "lbs": 0.45359237,
                    "pound": 0.45359237, "pounds": 0.45359237, "st": 6.35029318, "stone": 6.35029318},
    "length":      {"cm": 1.0, "mm": 0.1, "m": 100.0, "in": 2.54, "inch": 2.54, "inches": 2.54,
                    "ft": 30.48, "feet": 30.48, "foot": 30.48},
    "distance":    {"km": 1.0, "m": 0.001, "mi": 1.609344, "mile": 1.609344, "miles": 1.609344,
                    "yd": 0.0009144},
    "area":        {"sq ft": 1.0, "sqft": 1.0, "ft2": 1.0, "ft²": 1.0,
                    "sq m": 10.7639, "sqm": 10.7639, "m2": 10.7639, "m²": 10.7639},
    "glucose":     {"mg/dl": 1.0, "mmol/l": 18.018},
    "creatinine":  {"mg/dl": 1.0, "µmol/l": 1 / 88.4, "umol/l": 1 / 88.4, "μmol/l": 1 / 88.4,
                    "micromol/l": 1 / 88.4},
    "cholesterol": {"mg/dl": 1.0, "mmol/l": 38.67},
    "percent":     {"%": 1.0, "percent": 1.0, "pct": 1.0},
}


def _convert(raw: Any, canonical_unit: str = "", analyte: str = "", field: str = "") -> Any:
    """Parse a numeric variable and convert to canonical unit if needed.

    Handles:
      - raw numbers or numeric strings → returned as-is (assumed canonical)
      - {"value": N, "unit": U} → converted if U differs from canonical
    Non-numeric values are returned untouched so validation can report them.
    """
    if isinstance(raw, dict):
        val = raw.get("value")
        unit = str(raw.get("unit") or "").strip()
    else:
        return raw

    if val is None or not unit:
        return val
    try:
        num = float(val)
    except (TypeError, ValueError):
        return val

    unit_lower = unit.lower()
    canonical_lower = canonical_unit.lower()

    # Already in canonical unit
    if unit_lower == canonical_lower:
        return num

    if not analyte and canonical_lower == "%":
        analyte = "percent"
    factors = _UNIT_CONVERSIONS.get(analyte, {})
    src = factors.get(unit_lower)
    dst = factors.get(canonical_lower)
    if src is None or dst is None:
        accepted = ", ".join(factors) if factors else canonical_unit or "no unit"
        raise UnitError(f"Unsupported unit '{unit}' for {field or analyte or 'value'} (accepted: {accepted})")
    return num * src / dst


# ── Tiers and result envelopes ──────────────────────────────────────────────

Bands = Sequence[Tuple[float, str]]


def _tier(value: float, bands: Bands, default: str, ascending: bool = False, strict: bool = False) -> str:
    """
    Map a value to the first matching band label.

    Descending bands match value >= threshold (> when strict); ascending
    bands match value <= threshold (< when strict).
    """
    for threshold, label in bands:
        if ascending:
            hit = value < threshold if strict else value <= threshold
        else:
            hit = value > threshold if strict else value >= threshold
        if hit:
            return label
    return default


def _ok(result: Any, log: List[str], tier: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    outputs: Dict[str, Any] = {"result": result}
    if tier is not None:
        outputs["tier"] = tier
    outputs.update(extra)
    return {
        "success": True,
        "outputs": outputs,
        "audit_trace": {"log": log},
        "errors": [],
        "warnings": [],
    }


def _err(msg: str, field: Optional[str] = None) -> Dict[str, Any]:
    error: Any = {"field": field, "message": msg} if field else msg
    return {"success": False, "outputs": {}, "errors": [error], "warnings": []}


# ── Input declarations ──────────────────────────────────────────────────────

def _num(field_id: str, label: str, unit: str = "", analyte: str = "", required: bool = True,
         default: Any = None, synonyms: Iterable[str] = (), **bounds: float) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="number", required=required, default=default,
                     canonical_unit=unit, analyte=analyte, synonyms=list(synonyms), constraints=bounds)


def _int(field_id: str, label: str, required: bool = True, default: Any = None, **bounds: float) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="int", required=required, default=default, constraints=bounds)


def _choice(field_id: str, label: str, options: Iterable[str], default: Optional[str] = None) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="categorical", required=default is None,
                     default=default, constraints={"allowed_values": list(options)})


def _flag(field_id: str, label: str, default: bool = False) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="bool", required=False, default=default)


def _text(field_id: str, label: str, required: bool = True, default: Any = None) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="text", required=required, default=default)


def _date(field_id: str, label: str, required: bool = True) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="date", required=required)


def _series(field_id: str, label: str, min_items: int = 1) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="series", constraints={"min_items": min_items})


def _records(field_id: str, label: str, min_items: int = 1) -> CalcInput:
    return CalcInput(id=field_id, label=label, type="records", constraints={"min_items": min_items})


def _make_calc_entry(calc_id: str, run_fn: Callable[[Dict[str, Any]], Dict[str, Any]], title: str,
                     description: str, category: str, inputs: List[CalcInput],
                     tags: Optional[List[str]] = None, related: Optional[List[str]] = None) -> Dict[str, Any]:
    return {
        "def": CalculatorDef(
            id=calc_id,
            title=title,
            description=description,
            category=category,
            tags=tags or [],
            inputs=inputs,
            related=related or [],
        ),
        "run": run_fn,
        "input_model": build_input_model(calc_id, inputs),
    }
