"""
Command-line interface.

Usage:
    calcdeck list [--category finance] [--search margin]
    calcdeck info loan_emi
    calcdeck run bmi --var weight=180:lb --var height=70:in [--json]
    calcdeck check [--cases data/reference_cases.csv] [--calc-filter bmi] [--output results.json]
    calcdeck schema bmi
"""

import argparse
import csv
import json
import logging
import re
import sys
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import executor
from .config import get_settings
from .registry import CalculatorNotFound, categories, get_calculator, list_calculators, search
from .schema_org import calculator_schema
from .tools import ToolHandler, format_calc_info

logger = logging.getLogger(__name__)

_UNIT_SUFFIX = re.compile(r"^(?P<value>.*?):(?P<unit>[^\d:][^:]*)$")


# ── argument helpers ─────────────────────────────────────────────────────────

def parse_var(text: str) -> tuple:
    """
    Parse one --var argument.

    weight=180:lb -> ("weight", {"value": "180", "unit": "lb"})
    sex=male      -> ("sex", "male")
    """
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{text}'")
    key, value = text.split("=", 1)
    match = _UNIT_SUFFIX.match(value)
    if match and match.group("value"):
        return key.strip(), {"value": match.group("value").strip(), "unit": match.group("unit").strip()}
    return key.strip(), value.strip()


# ── result checking ──────────────────────────────────────────────────────────

def parse_result_value(result: Any) -> Optional[float]:
    if result is None or isinstance(result, bool):
        return None
    if isinstance(result, (int, float)):
        return float(result)
    if isinstance(result, str):
        try:
            return float(result)
        except ValueError:
            return None
    return None


def check_result(result_value: Any, ground_truth: str, lower_limit: str, upper_limit: str) -> dict:
    gt = ground_truth.strip()

    try:
        gv: Optional[float] = float(gt)
    except ValueError:
        gv = None

    # Text answers: exact match
    if gv is None:
        rs = str(result_value).strip() if result_value is not None else ""
        ok = rs == gt
        return {"correct": ok, "result": rs, "ground_truth": gt,
                "comparison": "exact_match" if ok else "mismatch"}

    res_val = parse_result_value(result_value)
    if res_val is None:
        return {"correct": False, "result": str(result_value), "ground_truth": gt, "comparison": "parse_error"}
    try:
        lo, hi = float(lower_limit), float(upper_limit)
    except ValueError:
        lo, hi = sorted((gv * 0.95, gv * 1.05))
    ok = lo <= res_val <= hi
    return {"correct": ok, "result": res_val, "ground_truth": gt,
            "lower": lo, "upper": hi, "comparison": "in_range" if ok else "out_of_range"}


def load_cases(csv_path: Path, calc_filter: Optional[str] = None) -> List[dict]:
    cases = []
    with open(csv_path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            cid = row["Calculator Id"].strip()
            if calc_filter and cid != calc_filter:
                continue
            cases.append({
                "row_number": row["Row Number"],
                "calc_id": cid,
                "variables": json.loads(row["Variables"] or "{}"),
                "ground_truth": row["Ground Truth Answer"],
                "lower_limit": row.get("Lower Limit") or "",
                "upper_limit": row.get("Upper Limit") or "",
            })
    return cases


# ── subcommands ──────────────────────────────────────────────────────────────

def cmd_list(args: argparse.Namespace) -> int:
    if args.search:
        rows = search(args.search, category=args.category)
    else:
        rows = list_calculators(args.category)
    if not rows:
        print("No calculators found.")
        return 0
    for row in rows:
        print(f"{row['id']:<38} {row['category']:<18} {row['title']}")
    if not args.search and not args.category:
        print("\n" + ", ".join(f"{name} ({n})" for name, n in categories().items()))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    handler = ToolHandler(require_calc_info=False)
    try:
        info = handler.calc_info(args.calc_id)
    except CalculatorNotFound as e:
        print(str(e), file=sys.stderr)
        return 1
    print(format_calc_info(info))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    variables = dict(args.var or [])
    result = executor.run(args.calc_id, variables)
    if args.json:
        print(json.dumps(result.model_dump(), indent=2, default=str))
        return 0 if result.success else 1

    if not result.success:
        for msg in result.error_messages():
            print(f"error: {msg}", file=sys.stderr)
        return 1
    for key, value in (result.outputs or {}).items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, default=str)
        print(f"{key}: {value}")
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    cases_path = Path(args.cases) if args.cases else get_settings().reference_cases
    print(f"Loading reference cases from {cases_path}...")
    cases = load_cases(cases_path, args.calc_filter)
    if not cases:
        print("No reference cases found.")
        return 0

    per_calc: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "correct": 0, "errors": 0})
    results = []
    total = len(cases)
    print(f"\nRunning {total} cases...\n" + "-" * 90)

    for i, tc in enumerate(cases, 1):
        outcome = executor.run(tc["calc_id"], tc["variables"])
        result_value = (outcome.outputs or {}).get("result") if outcome.success else None
        chk = check_result(result_value, tc["ground_truth"], tc["lower_limit"], tc["upper_limit"])

        error = None if outcome.success else "; ".join(outcome.error_messages())
        tag = "PASS" if chk["correct"] else ("ERR" if error else "FAIL")
        print(f"[{i}/{total}] Row {tc['row_number']}: {tc['calc_id']}... "
              f"{tag}  got={chk.get('result')}  gt={tc['ground_truth']}")

        stats = per_calc[tc["calc_id"]]
        stats["total"] += 1
        if error:
            stats["errors"] += 1
        elif chk["correct"]:
            stats["correct"] += 1
        results.append({**tc, "correct": chk["correct"], "error": error, "check_details": chk})

    # ── Summary ──────────────────────────────────────────────────────────────
    print("\n" + "=" * 90)
    print("RESULTS SUMMARY")
    print("=" * 90)
    print(f"\n{'Calculator':<55} {'Acc':>6} {'Correct':>8} {'Total':>6} {'Err':>4}")
    print("-" * 90)

    total_correct = sum(1 for r in results if r["correct"])
    summary_rows = []
    for name in sorted(per_calc):
        s = per_calc[name]
        acc = s["correct"] / s["total"] * 100
        print(f"{name:<55} {acc:>5.1f}% {s['correct']:>8}/{s['total']:<6} {s['errors']:>3}E")
        summary_rows.append({"calculator": name, "accuracy": round(acc, 2), **s})

    overall = total_correct / total * 100
    print("-" * 90)
    print(f"{'OVERALL':<55} {overall:>5.1f}% {total_correct:>8}/{total:<6}")
    print("=" * 90)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump({
                "metadata": {
                    "timestamp": datetime.now().isoformat(),
                    "cases": str(cases_path),
                    "calc_filter": args.calc_filter,
                    "total_cases": total,
                },
                "summary": {
                    "overall_accuracy": round(overall, 2),
                    "total_correct": total_correct,
                    "per_calculator": summary_rows,
                },
                "results": results,
            }, f, indent=2, default=str)
        print(f"\nResults saved to {out_path}")

    return 0 if total_correct == total else 1


def cmd_schema(args: argparse.Namespace) -> int:
    try:
        calc_def = get_calculator(args.calc_id)["def"]
    except CalculatorNotFound as e:
        print(str(e), file=sys.stderr)
        return 1
    print(json.dumps(calculator_schema(calc_def, args.base_url), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calcdeck", description="Catalog of single-purpose calculators")
    parser.add_argument("--log-level", default=None, help="Override CALCDECK_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List calculators")
    p.add_argument("--category", default=None, help="Only this category")
    p.add_argument("--search", default=None, help="Case-insensitive search text")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("info", help="Show a calculator's inputs")
    p.add_argument("calc_id")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("run", help="Run a calculator")
    p.add_argument("calc_id")
    p.add_argument("--var", action="append", type=parse_var, metavar="KEY=VALUE[:UNIT]",
                   help="Input value, repeatable (e.g. weight=180:lb)")
    p.add_argument("--json", action="store_true", help="Print the full result as JSON")
    p.set_defaults(func=cmd_run)

    p = sub.add_parser("check", help="Replay reference cases")
    p.add_argument("--cases", default=None, help="Reference CSV (default: CALCDECK_REFERENCE_CASES)")
    p.add_argument("--calc-filter", default=None, help="Only run cases for this calculator id")
    p.add_argument("--output", default=None, help="Write a JSON report here")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("schema", help="Print a calculator's JSON-LD")
    p.add_argument("calc_id")
    p.add_argument("--base-url", default=None, help="Override CALCDECK_BASE_URL")
    p.set_defaults(func=cmd_schema)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
