"""Pydantic models for CalcDeck."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, create_model


class CalcInput(BaseModel):
    """One input field of a calculator."""

    id: str
    label: str
    type: str = "number"  # number | int | bool | categorical | text | date | series | records
    required: bool = True
    default: Any = None
    canonical_unit: str = ""
    analyte: str = ""  # unit family used by _convert
    synonyms: List[str] = []
    constraints: Dict[str, Any] = {}


class CalculatorDef(BaseModel):
    id: str
    title: str
    description: str
    category: str
    version: str = "1.0"
    tags: List[str] = []
    inputs: List[CalcInput] = []
    related: List[str] = []
    presets: List[Dict[str, Any]] = []


class CalcInfoResult(BaseModel):
    """Result from calc_info tool."""

    calc_id: str
    title: str
    description: Optional[str] = None
    category: str
    version: str
    tags: List[str] = []
    inputs: List[Dict[str, Any]]  # Input specifications
    related: List[str] = []
    presets: List[Dict[str, Any]] = []


class ExecuteCalcResult(BaseModel):
    """Result from execute_calc tool."""

    success: bool
    outputs: Optional[Dict[str, Any]] = None
    errors: List[Any] = []  # strings or {"field", "message"} dicts
    warnings: List[Any] = []
    audit_trace: Optional[Dict[str, Any]] = None

    def error_messages(self) -> List[str]:
        """Get error messages as strings."""
        msgs = []
        for e in self.errors:
            if isinstance(e, str):
                msgs.append(e)
            elif isinstance(e, dict):
                field = e.get("field")
                message = e.get("message", str(e))
                msgs.append(f"{field}: {message}" if field else message)
            else:
                msgs.append(str(e))
        return msgs


_NUMERIC_BOUNDS = ("gt", "ge", "lt", "le")

_PY_TYPES: Dict[str, Any] = {
    "number": float,
    "int": int,
    "bool": bool,
    "text": str,
    "date": date,
    "series": List[float],
    "records": List[Union[str, Dict[str, Any]]],
}


def _field_type(inp: CalcInput) -> Any:
    if inp.type == "categorical":
        allowed = tuple(inp.constraints.get("allowed_values", []))
        if not allowed:
            raise ValueError(f"categorical input '{inp.id}' has no allowed_values")
        return Literal[allowed]
    try:
        return _PY_TYPES[inp.type]
    except KeyError:
        raise ValueError(f"unsupported input type '{inp.type}' for '{inp.id}'") from None


def _camel(calc_id: str) -> str:
    return "".join(part.capitalize() for part in calc_id.replace("-", "_").split("_"))


def build_input_model(calc_id: str, inputs: List[CalcInput]) -> Type[BaseModel]:
    """
    Build a pydantic model that validates a calculator's canonical inputs.

    Numeric bounds come from each input's constraints; categorical inputs
    become Literal fields. Unit, analyte and synonym metadata is carried in
    json_schema_extra so calc_info can expose it.
    """
    fields: Dict[str, Tuple[Any, Any]] = {}

    for inp in inputs:
        py_type = _field_type(inp)
        kwargs: Dict[str, Any] = {
            "description": inp.label,
            "json_schema_extra": {
                "type": inp.type,
                "unit": inp.canonical_unit,
                "analyte": inp.analyte,
                "synonyms": list(inp.synonyms),
                "constraints": dict(inp.constraints),
            },
        }
        if inp.type in ("number", "int"):
            for bound in _NUMERIC_BOUNDS:
                if bound in inp.constraints:
                    kwargs[bound] = inp.constraints[bound]
        elif inp.type in ("series", "records"):
            kwargs["min_length"] = inp.constraints.get("min_items", 1)
        elif inp.type == "text" and inp.required:
            kwargs["min_length"] = 1

        if inp.required:
            fields[inp.id] = (py_type, Field(..., **kwargs))
        else:
            fields[inp.id] = (Optional[py_type], Field(inp.default, **kwargs))

    return create_model(
        f"{_camel(calc_id)}Input",
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )
