"""Merged calculator catalog with lookup, listing and search."""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from .calculators import (
    cricket,
    finance_bonds,
    finance_loans,
    finance_markets,
    finance_ratios,
    finance_tvm,
    fitness,
    fun,
    health,
    home,
    misc,
    sizing,
)
from .models import CalculatorDef

logger = logging.getLogger(__name__)

_MODULES = [
    finance_loans,
    finance_tvm,
    finance_ratios,
    finance_markets,
    finance_bonds,
    health,
    fitness,
    sizing,
    cricket,
    home,
    fun,
    misc,
]


class CalculatorNotFound(KeyError):
    """Raised when a calculator id cannot be resolved."""

    def __str__(self) -> str:
        return f"Calculator '{self.args[0]}' not found"


def _merge(modules: List[Any]) -> Dict[str, Dict[str, Any]]:
    merged: Dict[str, Dict[str, Any]] = {}
    for module in modules:
        for calc_id, entry in module.CALCULATORS.items():
            if calc_id in merged:
                raise ValueError(f"Duplicate calculator id '{calc_id}' in {module.__name__}")
            merged[calc_id] = entry
    return merged


CALCULATORS: Dict[str, Dict[str, Any]] = _merge(_MODULES)


def _normalize(calc_id: str) -> str:
    return calc_id.strip().lower().replace("-", "_")


def resolve_id(calc_id: str) -> str:
    """
    Resolve a possibly malformed calculator id to a registered one.

    Tries an exact match, then a case-insensitive match, then a match with
    hyphens and underscores treated alike.
    """
    if calc_id in CALCULATORS:
        return calc_id
    lowered = calc_id.strip().lower()
    for cid in CALCULATORS:
        if cid.lower() == lowered:
            return cid
    normalized = _normalize(calc_id)
    for cid in CALCULATORS:
        if _normalize(cid) == normalized:
            return cid
    raise CalculatorNotFound(calc_id)


def get_calculator(calc_id: str) -> Dict[str, Any]:
    return CALCULATORS[resolve_id(calc_id)]


def _summary(calc_def: CalculatorDef) -> Dict[str, str]:
    return {
        "id": calc_def.id,
        "title": calc_def.title,
        "description": calc_def.description,
        "category": calc_def.category,
        "version": calc_def.version,
    }


def list_calculators(category: Optional[str] = None) -> List[Dict[str, str]]:
    defs = [entry["def"] for entry in CALCULATORS.values()]
    if category:
        defs = [d for d in defs if d.category == category.lower()]
    return [_summary(d) for d in defs]


def categories() -> Dict[str, int]:
    """Category name -> number of calculators, in catalog order."""
    return dict(Counter(entry["def"].category for entry in CALCULATORS.values()))


def search(query: str, category: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, str]]:
    """
    Case-insensitive substring search over title, description, tags and id.

    Title matches come first; the rest keep catalog order.
    """
    needle = query.strip().lower()
    title_hits: List[CalculatorDef] = []
    other_hits: List[CalculatorDef] = []
    for entry in CALCULATORS.values():
        calc_def: CalculatorDef = entry["def"]
        if category and calc_def.category != category.lower():
            continue
        if needle in calc_def.title.lower():
            title_hits.append(calc_def)
        elif (needle in calc_def.description.lower()
              or needle in calc_def.id.lower()
              or any(needle in tag.lower() for tag in calc_def.tags)):
            other_hits.append(calc_def)
    hits = [_summary(d) for d in title_hits + other_hits]
    logger.debug("search %r matched %d calculators", query, len(hits))
    return hits[:limit] if limit else hits


def related(calc_id: str, limit: int = 5) -> List[str]:
    """Explicitly related calculators first, then others from the same category."""
    calc_def: CalculatorDef = get_calculator(calc_id)["def"]
    picks = [rid for rid in calc_def.related if rid in CALCULATORS and rid != calc_def.id]
    for cid, entry in CALCULATORS.items():
        if len(picks) >= limit:
            break
        if cid != calc_def.id and cid not in picks and entry["def"].category == calc_def.category:
            picks.append(cid)
    return picks[:limit]
