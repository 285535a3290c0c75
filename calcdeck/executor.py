"""
Single evaluation path: resolve a calculator, normalize variables, validate
them through the calculator's pydantic model, run it and shape the response.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .config import Settings, get_settings
from .helpers import UnitError, _convert, _parse_date, _parse_records, _parse_series, _parse_str
from .models import CalcInput, ExecuteCalcResult
from .registry import CalculatorNotFound, get_calculator

logger = logging.getLogger(__name__)


def _unwrap(value_obj: Any) -> Tuple[Any, str]:
    """Split {"value": ..., "unit": ...} into (value, unit); plain values have no unit."""
    if isinstance(value_obj, dict) and "value" in value_obj:
        return value_obj.get("value"), str(value_obj.get("unit") or "").strip()
    return value_obj, ""


def _match_choice(raw: Any, allowed: List[str]) -> Any:
    """Exact match first, then case-insensitive; unmatched values go to validation as-is."""
    text = _parse_str(raw).strip()
    if text in allowed:
        return text
    for option in allowed:
        if option.lower() == text.lower():
            return option
    return text


def _prepare(inp: CalcInput, value_obj: Any) -> Any:
    """Bring one variable into the shape its pydantic field expects."""
    raw, _ = _unwrap(value_obj)
    if inp.type in ("number", "int"):
        return _convert(value_obj, inp.canonical_unit, inp.analyte, inp.id)
    if inp.type == "categorical":
        return _match_choice(raw, inp.constraints.get("allowed_values", []))
    if inp.type == "series":
        return _parse_series(raw)
    if inp.type == "records":
        return _parse_records(raw)
    if inp.type == "date":
        return _parse_date(raw)
    if inp.type == "text":
        return _parse_str(raw)
    return raw


def _synonym_map(inputs: List[CalcInput]) -> Dict[str, CalcInput]:
    lookup: Dict[str, CalcInput] = {}
    for inp in inputs:
        lookup[inp.id.lower()] = inp
        for synonym in inp.synonyms:
            lookup.setdefault(synonym.lower(), inp)
    return lookup


def _validation_errors(exc: ValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or None
        errors.append({"field": field, "message": err.get("msg", "invalid value")})
    return errors


def _round(value: Any, precision: int) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return round(value, precision)
    if isinstance(value, dict):
        return {k: _round(v, precision) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_round(v, precision) for v in value]
    return value


def run(calc_id: str, variables: Optional[Dict[str, Any]], settings: Optional[Settings] = None) -> ExecuteCalcResult:
    """
    Execute one calculation.

    Parameters
    ----------
    calc_id   : calculator id; case and -/_ differences are tolerated
    variables : {field_id: value} where value is raw or {"value": ..., "unit": ...}
    settings  : overrides get_settings(), mainly for tests

    Returns
    -------
    ExecuteCalcResult; validation and domain failures come back with
    success=False rather than raising.
    """
    settings = settings or get_settings()
    try:
        entry = get_calculator(calc_id)
    except CalculatorNotFound as exc:
        return ExecuteCalcResult(success=False, errors=[str(exc)])

    calc_def = entry["def"]
    lookup = _synonym_map(calc_def.inputs)

    prepared: Dict[str, Any] = {}
    inputs_used: Dict[str, str] = {}
    warnings: List[Any] = []
    errors: List[Any] = []

    for field_id, value_obj in (variables or {}).items():
        inp = lookup.get(str(field_id).lower())
        if inp is None:
            warnings.append(f"Unrecognised field ignored: {field_id}")
            logger.warning("%s: unrecognised field %r", calc_def.id, field_id)
            continue

        raw, unit = _unwrap(value_obj)
        if raw is None:
            if inp.required:
                errors.append({"field": inp.id, "message": "Null value for required field"})
            continue

        try:
            prepared[inp.id] = _prepare(inp, value_obj)
        except UnitError as exc:
            logger.warning("%s: %s", calc_def.id, exc)
            errors.append({"field": inp.id, "message": str(exc)})
            continue
        except ValueError:
            errors.append({"field": inp.id, "message": f"Invalid {inp.type} value: {raw!r}"})
            continue
        inputs_used[inp.id] = f"{raw} {unit or inp.canonical_unit}".strip()

    if errors:
        return ExecuteCalcResult(success=False, errors=errors, warnings=warnings)

    try:
        validated = entry["input_model"].model_validate(prepared)
    except ValidationError as exc:
        return ExecuteCalcResult(success=False, errors=_validation_errors(exc), warnings=warnings)

    logger.debug("running %s with %s", calc_def.id, inputs_used)
    try:
        data = entry["run"](validated.model_dump())
    except Exception as exc:
        logger.exception("calculation %s failed", calc_def.id)
        return ExecuteCalcResult(success=False, errors=[f"Calculation error: {exc}"], warnings=warnings)

    warnings.extend(data.get("warnings", []))
    if not data.get("success", False):
        return ExecuteCalcResult(success=False, errors=data.get("errors", []), warnings=warnings)

    trace = data.get("audit_trace") or {}
    return ExecuteCalcResult(
        success=True,
        outputs=_round(data.get("outputs", {}), settings.precision),
        warnings=warnings,
        audit_trace={"inputs_used": inputs_used, "log": trace.get("log", [])},
    )
