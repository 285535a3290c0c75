"""Tool definitions and handlers for function-calling clients."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from . import executor
from .config import get_settings
from .models import CalcInfoResult, ExecuteCalcResult
from .registry import CalculatorNotFound, get_calculator, list_calculators, resolve_id

logger = logging.getLogger(__name__)

# Tool definitions for LLM function calling
TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "list_calculators",
            "description": "List available calculators, optionally limited to one category.",
            "parameters": {
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "description": "Category slug (e.g., finance, health, fitness, cricket, conversions)",
                    },
                },
                "required": [],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "calc_info",
            "description": (
                "Get the input schema for a calculator. "
                "Returns field names, types, units, and constraints needed for execute_calc."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "calc_id": {
                        "type": "string",
                        "description": "Calculator ID (e.g., loan_emi, bmi, one_rep_max, net_run_rate)",
                    },
                },
                "required": ["calc_id"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "execute_calc",
            "description": (
                "Execute a calculation with extracted variables. "
                "Returns the calculated result or validation errors."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "calc_id": {
                        "type": "string",
                        "description": "Calculator ID",
                    },
                    "variables": {
                        "type": "object",
                        "description": (
                            "Variables as key-value pairs. "
                            "For numeric inputs with units: {\"value\": number, \"unit\": string}. "
                            "For booleans: true/false. For enums: string value. "
                            "For dates: YYYY-MM-DD. For series: a list of numbers."
                        ),
                    },
                },
                "required": ["calc_id", "variables"],
            },
        },
    },
]


class ToolHandler:
    """
    Handles tool execution against the local registry.

    Enforces the rule that calc_info must be called before execute_calc,
    unless require_calc_info is switched off.
    """

    def __init__(self, require_calc_info: Optional[bool] = None):
        if require_calc_info is None:
            require_calc_info = get_settings().require_calc_info
        self.require_calc_info = require_calc_info
        self._calc_info_cache: Dict[str, CalcInfoResult] = {}
        self._session_calc_info_calls: Set[str] = set()

    def reset_session(self):
        """Reset session state (called when starting a new conversation)."""
        self._session_calc_info_calls.clear()

    def has_calc_info(self, calc_id: str) -> bool:
        """Check if calc_info was called for this calculator in current session."""
        try:
            return resolve_id(calc_id) in self._session_calc_info_calls
        except CalculatorNotFound:
            return False

    def get_cached_calc_info(self, calc_id: str) -> Optional[CalcInfoResult]:
        try:
            return self._calc_info_cache.get(resolve_id(calc_id))
        except CalculatorNotFound:
            return None

    def list_calculators(self, category: Optional[str] = None) -> List[Dict[str, str]]:
        return list_calculators(category)

    def calc_info(self, calc_id: str) -> CalcInfoResult:
        """
        Get calculator input schema.

        Includes, for every input: id, label, type, required flag, default,
        canonical unit, synonyms and constraints. Raises CalculatorNotFound
        for an unknown id.
        """
        entry = get_calculator(calc_id)
        calc_def = entry["def"]

        if calc_def.id in self._calc_info_cache:
            self._session_calc_info_calls.add(calc_def.id)
            return self._calc_info_cache[calc_def.id]

        inputs = []
        for field_name, field_info in entry["input_model"].model_fields.items():
            extra = field_info.json_schema_extra or {}
            inputs.append({
                "id": field_name,
                "label": field_info.description or field_name,
                "type": extra.get("type", "number"),
                "required": field_info.is_required(),
                "default": None if field_info.is_required() else field_info.default,
                "canonical_unit": extra.get("unit", ""),
                "synonyms": extra.get("synonyms", []),
                "constraints": extra.get("constraints", {}),
            })

        result = CalcInfoResult(
            calc_id=calc_def.id,
            title=calc_def.title,
            description=calc_def.description,
            category=calc_def.category,
            version=calc_def.version,
            tags=calc_def.tags,
            inputs=inputs,
            related=calc_def.related,
            presets=calc_def.presets,
        )

        # Cache and mark as called
        self._calc_info_cache[calc_def.id] = result
        self._session_calc_info_calls.add(calc_def.id)
        return result

    def execute_calc(self, calc_id: str, variables: Dict[str, Any]) -> ExecuteCalcResult:
        """
        Execute calculation with extracted variables.

        Args:
            calc_id: Calculator ID
            variables: Extracted variables keyed by input id

        Returns:
            ExecuteCalcResult with outputs or errors
        """
        if self.require_calc_info and not self.has_calc_info(calc_id):
            return ExecuteCalcResult(
                success=False,
                errors=[
                    f"calc_info must be called for '{calc_id}' before execute_calc. "
                    "Call calc_info first to get the input schema."
                ],
            )
        return executor.run(calc_id, variables)

    def execute_tool(self, tool_name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Execute a tool by name and return the result as a dict.

        Never raises: bad tool names, missing arguments and unknown
        calculators come back as {"error": ...}.
        """
        arguments = arguments or {}
        logger.debug("tool call %s %s", tool_name, arguments)

        if tool_name == "list_calculators":
            return {"calculators": self.list_calculators(arguments.get("category"))}

        elif tool_name == "calc_info":
            calc_id = arguments.get("calc_id")
            if not calc_id:
                return {"error": "Missing required parameter: calc_id"}
            try:
                return self.calc_info(calc_id).model_dump()
            except CalculatorNotFound as e:
                return {"error": str(e)}

        elif tool_name == "execute_calc":
            calc_id = arguments.get("calc_id")
            variables = arguments.get("variables") or {}
            if not calc_id:
                return {"error": "Missing required parameter: calc_id"}
            if not isinstance(variables, dict):
                return {"error": "Parameter 'variables' must be an object"}
            return self.execute_calc(calc_id, variables).model_dump()

        else:
            return {"error": f"Unknown tool: {tool_name}"}


def _describe_constraints(constraints: Dict[str, Any]) -> str:
    parts = []
    for key, symbol in (("gt", ">"), ("ge", ">="), ("lt", "<"), ("le", "<=")):
        if key in constraints:
            parts.append(f"{symbol}{constraints[key]}")
    if "min_items" in constraints:
        parts.append(f"min_items={constraints['min_items']}")
    return " ".join(parts)


def format_calc_info(calc_info: CalcInfoResult) -> str:
    """
    Format calculator info as plain text.

    Required inputs are starred; units, allowed values and bounds follow
    each input.
    """
    lines = [
        f"Calculator: {calc_info.title} ({calc_info.calc_id})",
        f"Category: {calc_info.category}",
        "",
        "Inputs (* = required):",
    ]

    for inp in calc_info.inputs:
        inp_id = inp.get("id", "unknown")
        label = inp.get("label", inp_id)
        inp_type = inp.get("type", "number")
        unit = inp.get("canonical_unit", "")
        synonyms = inp.get("synonyms", [])
        constraints = inp.get("constraints", {})

        req_marker = "*" if inp.get("required") else ""
        unit_str = f" (unit: {unit})" if unit else ""
        line = f"  - {inp_id}{req_marker}: {label}{unit_str} [{inp_type}]"

        if synonyms:
            line += f" (also known as: {', '.join(synonyms)})"
        if constraints.get("allowed_values"):
            line += f" one of: {', '.join(map(str, constraints['allowed_values']))}"
        bounds = _describe_constraints(constraints)
        if bounds:
            line += f" {bounds}"
        if not inp.get("required") and inp.get("default") is not None:
            line += f" default={inp['default']}"

        lines.append(line)

    if calc_info.related:
        lines.append("")
        lines.append(f"Related: {', '.join(calc_info.related)}")

    return "\n".join(lines)
