"""Training, heart rate and energy balance calculators."""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..helpers import _choice, _err, _int, _make_calc_entry, _num, _ok, _records, _round_half_up, _round_int, _tier

_ACTIVITY_FACTORS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


# ── Helpers ──────────────────────────────────────────────────────────────────

def _mifflin(weight: float, height: float, age: float, sex: str) -> float:
    base = 10 * weight + 6.25 * height - 5 * age
    return base + 5 if sex == "male" else base - 161


def _hms(total_seconds: float) -> str:
    total = int(round(total_seconds))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"


def _ms(total_seconds: float) -> str:
    total = int(round(total_seconds))
    m, s = divmod(total, 60)
    return f"{m}:{s:02d}"


# 1. Target Heart Rate ────────────────────────────────────────────────────────
def run_target_heart_rate(v: Dict[str, Any]) -> Dict[str, Any]:
    max_hr = 220 - v["age"]
    resting = v["resting_hr"]
    if resting is not None:
        if resting >= max_hr:
            return _err("Resting heart rate must be below the maximum heart rate", "resting_hr")
        reserve = max_hr - resting
        moderate = (resting + reserve * 0.5, resting + reserve * 0.7)
        vigorous = (resting + reserve * 0.7, resting + reserve * 0.85)
        method = "karvonen"
        log = ["max = 220 - age", "target = resting + (max - resting) * intensity"]
    else:
        moderate = (max_hr * 0.5, max_hr * 0.7)
        vigorous = (max_hr * 0.7, max_hr * 0.85)
        method = "percent_of_max"
        log = ["max = 220 - age", "target = max * intensity"]
    return _ok(
        max_hr,
        log,
        method=method,
        moderate_zone={"low": _round_int(moderate[0]), "high": _round_int(moderate[1])},
        vigorous_zone={"low": _round_int(vigorous[0]), "high": _round_int(vigorous[1])},
    )


# 2. Heart Rate Zones ─────────────────────────────────────────────────────────
_ZONES = [
    ("Zone 1 - Recovery", 0.5, 0.6),
    ("Zone 2 - Aerobic Base", 0.6, 0.7),
    ("Zone 3 - Tempo", 0.7, 0.8),
    ("Zone 4 - Threshold", 0.8, 0.9),
    ("Zone 5 - Maximum", 0.9, 1.0),
]


def run_heart_rate_zones(v: Dict[str, Any]) -> Dict[str, Any]:
    max_hr = v["max_hr"] if v["max_hr"] is not None else 220 - v["age"]
    rest = v["resting_hr"]
    if rest >= max_hr:
        return _err("Resting heart rate must be below the maximum heart rate", "resting_hr")
    reserve = max_hr - rest
    zones = [
        {"zone": name, "low": _round_int(rest + reserve * lo), "high": _round_int(rest + reserve * hi)}
        for name, lo, hi in _ZONES
    ]
    return _ok(reserve, ["zone bound = rest + reserve * pct"], max_hr=max_hr, zones=zones)


# 3. VO2 Max ──────────────────────────────────────────────────────────────────
def run_vo2_max(v: Dict[str, Any]) -> Dict[str, Any]:
    max_hr = 220 - v["age"]
    vo2 = 15.3 * max_hr / v["resting_hr"]
    tier = _tier(vo2, [(50, "Excellent"), (43, "Good"), (36, "Average"), (30, "Below Average")], "Poor")
    return _ok(vo2, ["VO2max = 15.3 * HRmax / HRrest"], tier=tier, max_hr=max_hr)


# 4. Running Pace ─────────────────────────────────────────────────────────────
def run_running_pace(v: Dict[str, Any]) -> Dict[str, Any]:
    total_time = (v["hours"] or 0) * 3600 + (v["minutes"] or 0) * 60 + (v["seconds"] or 0)
    pace = (v["pace_minutes"] or 0) * 60 + (v["pace_seconds"] or 0)
    distance = v["distance"]
    solve_for = v["solve_for"]

    if solve_for == "pace":
        if not distance or total_time <= 0:
            return _err("Distance and a finishing time are required to solve for pace", "distance")
        pace = total_time / distance
        log = ["pace = time / distance"]
    elif solve_for == "time":
        if not distance or pace <= 0:
            return _err("Distance and a pace are required to solve for time", "distance")
        total_time = distance * pace
        log = ["time = distance * pace"]
    else:
        if total_time <= 0 or pace <= 0:
            return _err("A finishing time and a pace are required to solve for distance", "pace_minutes")
        distance = total_time / pace
        log = ["distance = time / pace"]

    headline = {"pace": pace, "time": total_time, "distance": distance}[solve_for]
    return _ok(
        headline,
        log,
        pace_seconds=pace,
        pace_formatted=_ms(pace),
        time_seconds=total_time,
        time_formatted=_hms(total_time),
        distance=distance,
        speed_per_hour=distance / (total_time / 3600),
    )


# 5. METs Calories ────────────────────────────────────────────────────────────
_METS = {
    "walking": 5.0,
    "running": 9.8,
    "cycling": 8.0,
    "swimming": 8.0,
    "gardening": 3.8,
    "weightlifting": 6.0,
}


def run_mets_calories(v: Dict[str, Any]) -> Dict[str, Any]:
    met = v["custom_met"] if v["custom_met"] is not None else _METS[v["activity"]]
    per_minute = met * v["weight"] * 3.5 / 200
    return _ok(per_minute * v["minutes"], ["kcal = MET * kg * 3.5 / 200 * minutes"],
               met=met, calories_per_minute=per_minute)


# 6. Strength to Weight ───────────────────────────────────────────────────────
_LIFT_STANDARDS = {
    "back_squat": (1.0, 1.5, 2.0),
    "deadlift": (1.25, 1.75, 2.25),
    "bench_press": (0.75, 1.0, 1.5),
    "overhead_press": (0.5, 0.75, 1.0),
    "front_squat": (0.8, 1.2, 1.8),
    "power_clean": (0.6, 0.9, 1.3),
    "pull_up": (0.8, 1.2, 1.6),
    "custom": (1.0, 1.5, 2.0),
}


def run_strength_to_weight(v: Dict[str, Any]) -> Dict[str, Any]:
    ratio = v["lift_weight"] / v["body_weight"]
    novice, intermediate, advanced = _LIFT_STANDARDS[v["lift"]]
    tier = _tier(ratio, [(advanced, "Advanced"), (intermediate, "Intermediate"), (novice, "Novice")], "Beginner")
    return _ok(ratio, ["ratio = lift / bodyweight"], tier=tier,
               standards={"novice": novice, "intermediate": intermediate, "advanced": advanced})


# 7. One Rep Max ──────────────────────────────────────────────────────────────
_TRAINING_PERCENTAGES = (95, 90, 85, 80, 75, 70, 65, 60)


def run_one_rep_max(v: Dict[str, Any]) -> Dict[str, Any]:
    w = v["weight"]
    reps = v["reps"]
    if reps == 1:
        brzycki = epley = lombardi = w
    else:
        brzycki = w / (1.0278 - 0.0278 * reps)
        epley = w * (1 + reps / 30)
        lombardi = w * reps ** 0.1
    table = [{"percent": p, "weight": brzycki * p / 100} for p in _TRAINING_PERCENTAGES]
    return _ok(
        brzycki,
        ["Brzycki: w / (1.0278 - 0.0278 reps)", "Epley: w(1 + reps/30)", "Lombardi: w * reps^0.1"],
        epley=epley,
        lombardi=lombardi,
        average=(brzycki + epley + lombardi) / 3,
        training_loads=table,
    )


# 8. Physical Therapy Exercise Load ───────────────────────────────────────────
_PHASE_PERCENT = {"acute": 0.3, "subacute": 0.5, "late": 0.7}
_PHASE_REPS = {"acute": 15, "subacute": 12, "late": 8}


def run_pt_exercise_load(v: Dict[str, Any]) -> Dict[str, Any]:
    phase = v["phase"]
    pct = max(0.2, _PHASE_PERCENT[phase] - v["pain"] / 10 * 0.1)
    load = _round_half_up(v["one_rep_max"] * pct, 1)
    return _ok(load, ["pct = phase pct - pain/10 * 0.1 (min 0.2)", "load = 1RM * pct"],
               percent_of_1rm=pct * 100, reps=_PHASE_REPS[phase])


# 9. Calorie Deficit ──────────────────────────────────────────────────────────
def run_calorie_deficit(v: Dict[str, Any]) -> Dict[str, Any]:
    bmr = _mifflin(v["weight"], v["height"], v["age"], v["sex"])
    tdee = bmr * _ACTIVITY_FACTORS[v["activity_level"]]
    daily_deficit = v["weekly_loss"] * 7700 / 7
    target = tdee - daily_deficit
    floor = 1200 if v["sex"] == "female" else 1500
    result = _ok(
        target,
        ["TDEE = BMR * activity", "target = TDEE - weekly kg * 7700 / 7"],
        tier="Below Safe Minimum" if target < floor else "Safe",
        bmr=bmr,
        tdee=tdee,
        daily_deficit=daily_deficit,
        minimum_intake=floor,
    )
    if target < floor:
        result["warnings"].append(f"Target intake is below the {floor} kcal minimum")
    return result


# 10. Total Energy Expenditure ────────────────────────────────────────────────
_EXERCISE_MULTIPLIERS = {"low": 3.5, "moderate": 5.0, "high": 7.0}


def run_total_energy_expenditure(v: Dict[str, Any]) -> Dict[str, Any]:
    bmr = _mifflin(v["weight"], v["height"], v["age"], v["sex"])
    activity = bmr * (_ACTIVITY_FACTORS[v["activity_level"]] - 1)
    exercise = v["exercise_hours"] * _EXERCISE_MULTIPLIERS[v["exercise_intensity"]] * v["weight"]
    return _ok(bmr + activity + exercise, ["TEE = BMR + BMR(activity - 1) + hours * mult * kg"],
               bmr=bmr, activity_calories=activity, exercise_calories=exercise)


# 11. Macro Split ─────────────────────────────────────────────────────────────
def run_macro_split(v: Dict[str, Any]) -> Dict[str, Any]:
    kcal = v["calories"]
    p, c, f = v["protein_percent"], v["carb_percent"], v["fat_percent"]
    if abs(p + c + f - 100) > 1:
        return _err(f"Macro percentages must add up to 100 (got {p + c + f:g})", "protein_percent")
    protein = kcal * p / 100 / 4
    carbs = kcal * c / 100 / 4
    fat = kcal * f / 100 / 9
    return _ok(
        {"protein_g": protein, "carbs_g": carbs, "fat_g": fat},
        ["protein g = kcal * % / 4", "carbs g = kcal * % / 4", "fat g = kcal * % / 9"],
        protein_g=protein,
        carbs_g=carbs,
        fat_g=fat,
    )


# 12. Training Volume ─────────────────────────────────────────────────────────
_SET_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[x×*]\s*(\d+(?:\.\d+)?)\s*[x×*@]\s*(\d+(?:\.\d+)?)\s*$", re.I)


def _parse_set(entry: Any) -> Optional[Tuple[float, float, float]]:
    if isinstance(entry, dict):
        try:
            return float(entry["sets"]), float(entry["reps"]), float(entry["weight"])
        except (KeyError, TypeError, ValueError):
            return None
    m = _SET_PATTERN.match(str(entry))
    if not m:
        return None
    return float(m.group(1)), float(m.group(2)), float(m.group(3))


def run_training_volume(v: Dict[str, Any]) -> Dict[str, Any]:
    rows: List[Dict[str, float]] = []
    for i, entry in enumerate(v["exercises"]):
        parsed = _parse_set(entry)
        if parsed is None:
            return _err(f"Exercise {i + 1} must look like 'sets x reps x weight'", "exercises")
        sets, reps, weight = parsed
        rows.append({"sets": sets, "reps": reps, "weight": weight, "volume": sets * reps * weight})
    total = sum(r["volume"] for r in rows)
    return _ok(total, ["volume = sum(sets * reps * weight)"], exercises=rows,
               total_sets=sum(r["sets"] for r in rows), total_reps=sum(r["sets"] * r["reps"] for r in rows))


# 13. Step Calories ───────────────────────────────────────────────────────────
_SPEED_MULTIPLIERS = {"slow": 1.0, "moderate": 1.2, "brisk": 1.5, "fast": 1.8}
_SPEED_KMH = {"slow": 3.0, "moderate": 4.5, "brisk": 6.0, "fast": 7.5}
_TERRAIN_MULTIPLIERS = {"flat": 1.0, "hilly": 1.3, "stairs": 1.6, "mixed": 1.2}


def run_step_calories(v: Dict[str, Any]) -> Dict[str, Any]:
    w, h, age = v["weight"], v["height"], v["age"]
    if v["sex"] == "male":
        bmr = 88.362 + 13.397 * w + 4.799 * h - 5.677 * age
    else:
        bmr = 447.593 + 9.247 * w + 3.098 * h - 4.330 * age
    per_step = bmr / 24 / 60 * 0.05 * _SPEED_MULTIPLIERS[v["speed"]] * _TERRAIN_MULTIPLIERS[v["terrain"]]
    steps = v["steps"]
    distance_km = steps * h * 0.43 / 100000
    return _ok(
        steps * per_step,
        ["BMR = Harris-Benedict", "kcal/step = BMR/1440 * 0.05 * speed * terrain", "stride = h * 0.43"],
        calories_per_step=per_step,
        distance_km=distance_km,
        duration_minutes=distance_km / _SPEED_KMH[v["speed"]] * 60,
        bmr=bmr,
    )


# 14. Progressive Overload ────────────────────────────────────────────────────
def run_progressive_overload(v: Dict[str, Any]) -> Dict[str, Any]:
    load = v["current_load"]
    p = v["weekly_increase"] / 100
    plan = [{"week": i + 1, "load": _round_int(load * (1 + p) ** (i + 1))} for i in range(v["weeks"])]
    final = plan[-1]["load"]
    return _ok(final, ["load_week_i = load * (1 + p)^i"], plan=plan, total_increase=final - load)


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "fitness"


def _weight(field_id: str = "weight", label: str = "Body weight") -> Any:
    return _num(field_id, label, "kg", "weight", gt=0, le=500)


def _height() -> Any:
    return _num("height", "Height", "cm", "length", gt=30, le=275)


def _age() -> Any:
    return _int("age", "Age", ge=1, le=120)


def _sex() -> Any:
    return _choice("sex", "Sex", ["male", "female"])


def _activity() -> Any:
    return _choice("activity_level", "Activity level", list(_ACTIVITY_FACTORS), "sedentary")


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "target_heart_rate": _make_calc_entry(
        "target_heart_rate", run_target_heart_rate, "Target Heart Rate",
        "Moderate and vigorous training ranges, Karvonen when resting HR is known.",
        _CATEGORY,
        [_age(), _num("resting_hr", "Resting heart rate", "bpm", required=False, gt=20, lt=200)],
        tags=["heart rate", "cardio"],
        related=["heart_rate_zones"],
    ),
    "heart_rate_zones": _make_calc_entry(
        "heart_rate_zones", run_heart_rate_zones, "Heart Rate Zone Training",
        "Five training zones from heart rate reserve.",
        _CATEGORY,
        [_age(), _num("resting_hr", "Resting heart rate", "bpm", gt=20, lt=200),
         _num("max_hr", "Measured maximum heart rate", "bpm", required=False, gt=60, le=240)],
        tags=["heart rate", "zones"],
        related=["target_heart_rate", "vo2_max"],
    ),
    "vo2_max": _make_calc_entry(
        "vo2_max", run_vo2_max, "VO2 Max Estimate",
        "Aerobic capacity from the heart rate ratio method.",
        _CATEGORY,
        [_age(), _num("resting_hr", "Resting heart rate", "bpm", gt=20, lt=200)],
        tags=["cardio", "aerobic"],
    ),
    "running_pace": _make_calc_entry(
        "running_pace", run_running_pace, "Running Pace Calculator",
        "Solve for pace, finishing time or distance.",
        _CATEGORY,
        [_choice("solve_for", "Solve for", ["pace", "time", "distance"], "pace"),
         _num("distance", "Distance", required=False, gt=0),
         _num("hours", "Hours", required=False, ge=0),
         _num("minutes", "Minutes", required=False, ge=0),
         _num("seconds", "Seconds", required=False, ge=0),
         _num("pace_minutes", "Pace minutes per unit", required=False, ge=0),
         _num("pace_seconds", "Pace seconds per unit", required=False, ge=0)],
        tags=["running"],
    ),
    "mets_calories": _make_calc_entry(
        "mets_calories", run_mets_calories, "METs Calories Burned",
        "Calories burned from an activity's metabolic equivalent.",
        _CATEGORY,
        [_choice("activity", "Activity", list(_METS), "walking"),
         _weight(), _num("minutes", "Duration", "min", gt=0, le=1440),
         _num("custom_met", "Custom MET value", required=False, gt=0, le=25)],
        tags=["calories", "exercise"],
        related=["step_calories"],
    ),
    "strength_to_weight": _make_calc_entry(
        "strength_to_weight", run_strength_to_weight, "Strength to Weight Ratio",
        "Lift relative to bodyweight against novice to advanced standards.",
        _CATEGORY,
        [_weight("body_weight"), _weight("lift_weight", "Weight lifted"),
         _choice("lift", "Lift", list(_LIFT_STANDARDS), "custom")],
        tags=["strength"],
        related=["one_rep_max"],
    ),
    "one_rep_max": _make_calc_entry(
        "one_rep_max", run_one_rep_max, "One Rep Max (1RM)",
        "Estimated 1RM by Brzycki, Epley and Lombardi with a training load table.",
        _CATEGORY,
        [_weight("weight", "Weight lifted"), _int("reps", "Repetitions", ge=1, le=36)],
        tags=["strength", "1rm"],
        related=["strength_to_weight", "progressive_overload"],
    ),
    "pt_exercise_load": _make_calc_entry(
        "pt_exercise_load", run_pt_exercise_load, "Physical Therapy Exercise Load",
        "Rehab load and reps from 1RM, healing phase and pain.",
        _CATEGORY,
        [_weight("one_rep_max", "Estimated 1RM"),
         _num("pain", "Pain score (0-10)", required=False, default=0.0, ge=0, le=10),
         _choice("phase", "Rehab phase", list(_PHASE_PERCENT), "subacute")],
        tags=["rehab"],
    ),
    "calorie_deficit": _make_calc_entry(
        "calorie_deficit", run_calorie_deficit, "Calorie Deficit Calculator",
        "Daily intake target for a weekly weight loss goal.",
        _CATEGORY,
        [_weight(), _height(), _age(), _sex(), _activity(),
         _num("weekly_loss", "Weekly loss goal", "kg", ge=0, le=1.5)],
        tags=["weight loss", "calories"],
        related=["total_energy_expenditure", "macro_split"],
    ),
    "total_energy_expenditure": _make_calc_entry(
        "total_energy_expenditure", run_total_energy_expenditure, "Total Energy Expenditure",
        "BMR plus daily activity plus exercise calories.",
        _CATEGORY,
        [_weight(), _height(), _age(), _sex(), _activity(),
         _num("exercise_hours", "Exercise per day", "hours", required=False, default=0.0, ge=0, le=24),
         _choice("exercise_intensity", "Exercise intensity", list(_EXERCISE_MULTIPLIERS), "moderate")],
        tags=["calories", "tdee"],
        related=["calorie_deficit"],
    ),
    "macro_split": _make_calc_entry(
        "macro_split", run_macro_split, "Macro Ratio Calculator",
        "Grams of protein, carbs and fat from a calorie target.",
        _CATEGORY,
        [_num("calories", "Daily calories", "kcal", gt=0, le=20000),
         _num("protein_percent", "Protein", "%", ge=0, le=100),
         _num("carb_percent", "Carbohydrate", "%", ge=0, le=100),
         _num("fat_percent", "Fat", "%", ge=0, le=100)],
        tags=["nutrition", "macros"],
        related=["calorie_deficit"],
    ),
    "training_volume": _make_calc_entry(
        "training_volume", run_training_volume, "Training Volume",
        "Total sets x reps x weight across a session.",
        _CATEGORY,
        [_records("exercises", "Exercises as 'sets x reps x weight'")],
        tags=["strength", "volume"],
        related=["progressive_overload"],
    ),
    "step_calories": _make_calc_entry(
        "step_calories", run_step_calories, "Steps to Calories",
        "Calories, distance and time for a step count.",
        _CATEGORY,
        [_int("steps", "Steps", gt=0, le=200000), _weight(), _height(), _age(), _sex(),
         _choice("speed", "Walking speed", list(_SPEED_MULTIPLIERS), "moderate"),
         _choice("terrain", "Terrain", list(_TERRAIN_MULTIPLIERS), "flat")],
        tags=["walking", "calories"],
        related=["mets_calories"],
    ),
    "progressive_overload": _make_calc_entry(
        "progressive_overload", run_progressive_overload, "Progressive Overload Planner",
        "Week by week load plan at a fixed weekly increase.",
        _CATEGORY,
        [_num("current_load", "Current load", gt=0),
         _num("weekly_increase", "Weekly increase", "%", ge=0, le=20),
         _int("weeks", "Weeks", ge=1, le=52)],
        tags=["strength", "planning"],
        related=["one_rep_max", "training_volume"],
    ),
}
