"""
Body composition, clinical screening and pregnancy calculators.

Weights are canonical in kg and lengths in cm; pounds, inches, feet and
stones are converted by the executor before a run function sees them.
"""

import math
from datetime import date, timedelta
from typing import Any, Dict

from ..helpers import _choice, _err, _flag, _date, _int, _make_calc_entry, _num, _ok, _tier

_ACTIVITY_FACTORS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


# 1. BMI ──────────────────────────────────────────────────────────────────────
def run_bmi(v: Dict[str, Any]) -> Dict[str, Any]:
    h_m = v["height"] / 100
    bmi = v["weight"] / (h_m * h_m)
    if bmi < 18.5:
        category = "Underweight"
    elif bmi < 25:
        category = "Normal weight"
    elif bmi < 30:
        category = "Overweight"
    else:
        category = "Obese"
    return _ok(
        bmi,
        ["BMI = kg / m^2"],
        tier=category,
        healthy_weight_min=18.5 * h_m * h_m,
        healthy_weight_max=24.9 * h_m * h_m,
    )


# 2. BMR ──────────────────────────────────────────────────────────────────────
def run_bmr(v: Dict[str, Any]) -> Dict[str, Any]:
    base = 10 * v["weight"] + 6.25 * v["height"] - 5 * v["age"]
    bmr = base + 5 if v["sex"] == "male" else base - 161
    tdee = {level: bmr * factor for level, factor in _ACTIVITY_FACTORS.items()}
    return _ok(bmr, ["Mifflin-St Jeor: 10w + 6.25h - 5a + 5 (male) / -161 (female)"], tdee=tdee)


# 3. Body Fat (US Navy) ───────────────────────────────────────────────────────
_BODY_FAT_LABELS = ["Below Essential", "Essential Fat", "Athletes", "Fitness", "Average"]
_BODY_FAT_CUTS = {"female": [10, 14, 21, 25, 32], "male": [2, 6, 14, 18, 25]}


def run_body_fat_navy(v: Dict[str, Any]) -> Dict[str, Any]:
    sex = v["sex"]
    waist, neck, height = v["waist"], v["neck"], v["height"]
    if sex == "male":
        if waist - neck <= 0:
            return _err("Waist must be larger than neck", "waist")
        bf = 495 / (1.0324 - 0.19077 * math.log10(waist - neck) + 0.15456 * math.log10(height)) - 450
        log = ["BF% = 495 / (1.0324 - 0.19077 log10(waist - neck) + 0.15456 log10(h)) - 450"]
    else:
        hip = v["hip"]
        if hip is None:
            return _err("Hip circumference is required for women", "hip")
        if waist + hip - neck <= 0:
            return _err("Waist plus hip must be larger than neck", "waist")
        bf = 495 / (1.29579 - 0.35004 * math.log10(waist + hip - neck) + 0.22100 * math.log10(height)) - 450
        log = ["BF% = 495 / (1.29579 - 0.35004 log10(waist + hip - neck) + 0.22100 log10(h)) - 450"]
    bands = list(zip(_BODY_FAT_CUTS[sex], _BODY_FAT_LABELS))
    tier = _tier(bf, bands, "Obese", ascending=True, strict=True)
    extra: Dict[str, Any] = {}
    if v["weight"] is not None:
        extra["fat_mass"] = v["weight"] * bf / 100
        extra["lean_mass"] = v["weight"] - extra["fat_mass"]
    return _ok(bf, log, tier=tier, **extra)


# 4. Body Surface Area ────────────────────────────────────────────────────────
def run_body_surface_area(v: Dict[str, Any]) -> Dict[str, Any]:
    h, w = v["height"], v["weight"]
    formulas = {
        "mosteller": (math.sqrt(h * w / 3600), "BSA = sqrt(h * w / 3600)"),
        "du_bois": (0.007184 * h ** 0.725 * w ** 0.425, "BSA = 0.007184 h^0.725 w^0.425"),
        "haycock": (0.024265 * h ** 0.3964 * w ** 0.5378, "BSA = 0.024265 h^0.3964 w^0.5378"),
        "gehan_george": (0.0235 * h ** 0.42246 * w ** 0.51456, "BSA = 0.0235 h^0.42246 w^0.51456"),
    }
    bsa, line = formulas[v["formula"]]
    return _ok(round(bsa, 4), [line], all_formulas={k: round(f[0], 4) for k, f in formulas.items()})


# 5. Lean Body Mass ───────────────────────────────────────────────────────────
def run_lean_body_mass(v: Dict[str, Any]) -> Dict[str, Any]:
    w = v["weight"]
    fat = w * v["body_fat"] / 100
    return _ok(w - fat, ["LBM = w - w * bf%"], fat_mass=fat, lean_percent=100 - v["body_fat"])


# 6. Ponderal Index ───────────────────────────────────────────────────────────
def run_ponderal_index(v: Dict[str, Any]) -> Dict[str, Any]:
    h_m = v["height"] / 100
    pi = v["weight"] / h_m ** 3
    tier = _tier(pi, [(11, "Low"), (15, "Normal")], "High", ascending=True)
    return _ok(pi, ["PI = kg / m^3"], tier=tier)


# 7. Fat-Free Mass Index ──────────────────────────────────────────────────────
def run_ffmi(v: Dict[str, Any]) -> Dict[str, Any]:
    h_m = v["height"] / 100
    ffm = v["weight"] * (1 - v["body_fat"] / 100)
    ffmi = ffm / (h_m * h_m)
    normalized = ffmi + 6.1 * (1.8 - h_m)
    limit = 25 if v["sex"] == "male" else 20
    tier = "Above Natural Limit" if normalized > limit else "Within Natural Limit"
    return _ok(
        ffmi,
        ["FFM = w(1 - bf)", "FFMI = FFM / h^2", "normalized = FFMI + 6.1(1.8 - h)"],
        tier=tier,
        fat_free_mass=ffm,
        normalized_ffmi=normalized,
        natural_limit=limit,
    )


# 8. Relative Fat Mass ────────────────────────────────────────────────────────
def run_relative_fat_mass(v: Dict[str, Any]) -> Dict[str, Any]:
    constant = 64 if v["sex"] == "male" else 76
    rfm = constant - 20 * v["height"] / v["waist"]
    bands = [(2, "Below Essential"), (6, "Essential Fat"), (14, "Athletes"), (18, "Fitness"), (25, "Average")]
    if v["sex"] == "female":
        bands = [(10, "Below Essential"), (14, "Essential Fat"), (21, "Athletes"), (25, "Fitness"), (32, "Average")]
    tier = _tier(rfm, bands, "Obese", ascending=True, strict=True)
    return _ok(rfm, [f"RFM = {constant} - 20 * height / waist"], tier=tier)


# 9. Hypertension Stage ───────────────────────────────────────────────────────
def run_hypertension_stage(v: Dict[str, Any]) -> Dict[str, Any]:
    sys_bp, dia_bp = v["systolic"], v["diastolic"]
    if sys_bp < 120 and dia_bp < 80:
        stage, risk_level = "Normal", "Low"
    elif sys_bp < 130 and dia_bp < 80:
        stage, risk_level = "Elevated", "Low-Moderate"
    elif sys_bp < 140 and dia_bp < 90:
        stage, risk_level = "Stage 1 Hypertension", "Moderate"
    elif sys_bp < 180 and dia_bp < 120:
        stage, risk_level = "Stage 2 Hypertension", "High"
    else:
        stage, risk_level = "Hypertensive Crisis", "Very High"

    score = 0
    age = v["age"]
    if age >= 65:
        score += 3
    elif age >= 55:
        score += 2
    elif age >= 45:
        score += 1
    if v["sex"] == "male":
        score += 1
    points = {"diabetes": 2, "kidney_disease": 2, "heart_disease": 3, "stroke": 3,
              "family_history": 1, "smoking": 2}
    score += sum(p for key, p in points.items() if v[key])
    if v["cholesterol"] is not None and v["cholesterol"] > 200:
        score += 1
    return _ok(stage, ["stage from systolic/diastolic cut-offs", "risk score from age, sex and history"],
               tier=stage, risk_level=risk_level, risk_score=score)


# 10. HbA1c from Glucose ──────────────────────────────────────────────────────
def run_hba1c_from_glucose(v: Dict[str, Any]) -> Dict[str, Any]:
    glucose = v["average_glucose"]
    a1c = (glucose + 46.7) / 28.7
    if a1c < 5.7:
        tier = "Normal"
    elif a1c < 6.5:
        tier = "Prediabetes"
    else:
        tier = "Diabetes"
    return _ok(a1c, ["HbA1c = (mg/dL + 46.7) / 28.7"], tier=tier,
               glucose_mmol=glucose / 18.018, ifcc_mmol_mol=(a1c - 2.15) * 10.929)


# 11. eGFR (CKD-EPI 2009) ─────────────────────────────────────────────────────
def run_egfr_ckd_epi(v: Dict[str, Any]) -> Dict[str, Any]:
    scr = v["creatinine"]
    if v["sex"] == "female":
        k, alpha, constant = 0.7, -0.329, 144
    else:
        k, alpha, constant = 0.9, -0.411, 141
    ratio = scr / k
    egfr = constant * min(ratio, 1) ** alpha * max(ratio, 1) ** -1.209 * 0.993 ** v["age"]
    if v["black"]:
        egfr *= 1.159
    stage = _tier(egfr, [(90, "G1"), (60, "G2"), (45, "G3a"), (30, "G3b"), (15, "G4")], "G5")
    return _ok(egfr, ["eGFR = C * min(scr/k, 1)^a * max(scr/k, 1)^-1.209 * 0.993^age"], tier=stage)


# 12. Ideal Waist ─────────────────────────────────────────────────────────────
_WAIST_RATIOS = {
    ("male", False): (0.45, 0.53),
    ("male", True): (0.42, 0.50),
    ("female", False): (0.43, 0.51),
    ("female", True): (0.40, 0.48),
}


def run_ideal_waist(v: Dict[str, Any]) -> Dict[str, Any]:
    ideal_ratio, max_ratio = _WAIST_RATIOS[(v["sex"], v["ethnicity"] == "asian")]
    ideal = v["height"] * ideal_ratio
    maximum = v["height"] * max_ratio
    extra: Dict[str, Any] = {"maximum_waist": maximum}
    tier = None
    current = v["current_waist"]
    if current is not None:
        if current <= ideal:
            tier = "Ideal"
        elif current <= maximum:
            tier = "Acceptable"
        else:
            tier = "Above Maximum"
        extra["waist_to_height"] = current / v["height"]
    return _ok(ideal, [f"ideal = height * {ideal_ratio}", f"maximum = height * {max_ratio}"], tier=tier, **extra)


# 13. Waist to BMI Ratio ──────────────────────────────────────────────────────
def run_waist_to_bmi_ratio(v: Dict[str, Any]) -> Dict[str, Any]:
    h_m = v["height"] / 100
    bmi = v["weight"] / (h_m * h_m)
    ratio = v["waist"] / bmi
    cuts = [0.45, 0.50, 0.55] if v["sex"] == "male" else [0.42, 0.47, 0.52]
    if v["age"] >= 65:
        cuts = [c - 0.1 for c in cuts]
    elif v["age"] >= 45:
        cuts = [c - 0.05 for c in cuts]
    bands = list(zip(cuts, ["Low Risk", "Moderate Risk", "High Risk"]))
    tier = _tier(ratio, bands, "Very High Risk", ascending=True, strict=True)
    return _ok(ratio, ["ratio = waist cm / BMI"], tier=tier, bmi=bmi)


# 14. Due Date ────────────────────────────────────────────────────────────────
def run_due_date(v: Dict[str, Any]) -> Dict[str, Any]:
    method = v["method"]
    if method == "lmp":
        if v["last_period"] is None:
            return _err("Last menstrual period date is required", "last_period")
        due = v["last_period"] + timedelta(days=280 + v["cycle_length"] - 28)
        log = ["due = LMP + 280 days + (cycle length - 28)"]
    elif method == "conception":
        if v["conception_date"] is None:
            return _err("Conception date is required", "conception_date")
        due = v["conception_date"] + timedelta(days=266)
        log = ["due = conception + 266 days"]
    else:
        if v["ultrasound_date"] is None or v["ultrasound_weeks"] is None:
            return _err("Ultrasound date and gestational weeks are required", "ultrasound_date")
        offset = 280 - v["ultrasound_weeks"] * 7 - (v["ultrasound_days"] or 0)
        due = v["ultrasound_date"] + timedelta(days=offset)
        log = ["due = scan date + (280 - weeks*7 - days)"]

    as_of = v["as_of"] or date.today()
    gestation_days = 280 - (due - as_of).days
    weeks = math.floor(gestation_days / 7)
    if weeks < 14:
        trimester = 1
    elif weeks < 28:
        trimester = 2
    else:
        trimester = 3
    return _ok(
        due.isoformat(),
        log,
        tier=f"Trimester {trimester}",
        current_weeks=weeks,
        current_days=gestation_days % 7,
        days_remaining=(due - as_of).days,
        trimester=trimester,
    )


# 15. Sleep Efficiency ────────────────────────────────────────────────────────
def run_sleep_efficiency(v: Dict[str, Any]) -> Dict[str, Any]:
    asleep, in_bed = v["time_asleep"], v["time_in_bed"]
    if asleep > in_bed:
        return _err("Time asleep cannot exceed time in bed", "time_asleep")
    eff = asleep / in_bed * 100
    tier = _tier(eff, [(85, "Poor"), (90, "Fair"), (95, "Good")], "Excellent", ascending=True, strict=True)
    return _ok(eff, ["SE = time asleep / time in bed * 100"], tier=tier, time_awake=in_bed - asleep)


# 16. Glycemic Load ───────────────────────────────────────────────────────────
def run_glycemic_load(v: Dict[str, Any]) -> Dict[str, Any]:
    gl = v["glycemic_index"] * v["carbohydrates"] / 100
    tier = _tier(gl, [(10, "Low"), (19, "Medium")], "High", ascending=True)
    return _ok(gl, ["GL = GI * carbs / 100"], tier=tier)


# ── Registry ────────────────────────────────────────────────────────────────

_CATEGORY = "health"


def _weight(required: bool = True) -> Any:
    return _num("weight", "Weight", "kg", "weight", required=required, synonyms=["body weight", "mass"],
                gt=0, le=500)


def _height() -> Any:
    return _num("height", "Height", "cm", "length", synonyms=["stature"], gt=30, le=275)


def _sex() -> Any:
    return _choice("sex", "Sex", ["male", "female"])


def _cm(field_id: str, label: str, required: bool = True) -> Any:
    return _num(field_id, label, "cm", "length", required=required, gt=0, le=300)


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "bmi": _make_calc_entry(
        "bmi", run_bmi, "BMI Calculator",
        "Body mass index with WHO category and healthy weight range.",
        _CATEGORY,
        [_weight(), _height()],
        tags=["body composition", "weight"],
        related=["ponderal_index", "waist_to_bmi_ratio", "bmr"],
    ),
    "bmr": _make_calc_entry(
        "bmr", run_bmr, "BMR Calculator",
        "Basal metabolic rate (Mifflin-St Jeor) with TDEE for each activity level.",
        _CATEGORY,
        [_weight(), _height(), _int("age", "Age", ge=1, le=120), _sex()],
        tags=["metabolism", "calories"],
        related=["total_energy_expenditure", "calorie_deficit"],
    ),
    "body_fat_navy": _make_calc_entry(
        "body_fat_navy", run_body_fat_navy, "Body Fat Percentage (US Navy)",
        "Body fat from neck, waist and hip circumference.",
        _CATEGORY,
        [_sex(), _height(), _cm("neck", "Neck circumference"), _cm("waist", "Waist circumference"),
         _cm("hip", "Hip circumference", required=False), _weight(required=False)],
        tags=["body composition", "body fat"],
        related=["lean_body_mass", "relative_fat_mass"],
    ),
    "body_surface_area": _make_calc_entry(
        "body_surface_area", run_body_surface_area, "Body Surface Area",
        "BSA by Mosteller, Du Bois, Haycock or Gehan-George.",
        _CATEGORY,
        [_height(), _weight(),
         _choice("formula", "Formula", ["mosteller", "du_bois", "haycock", "gehan_george"], "mosteller")],
        tags=["clinical", "dosing"],
    ),
    "lean_body_mass": _make_calc_entry(
        "lean_body_mass", run_lean_body_mass, "Lean Body Mass",
        "Body weight minus fat mass.",
        _CATEGORY,
        [_weight(), _num("body_fat", "Body fat", "%", ge=0, lt=100)],
        tags=["body composition"],
        related=["ffmi", "body_fat_navy"],
    ),
    "ponderal_index": _make_calc_entry(
        "ponderal_index", run_ponderal_index, "Ponderal Index",
        "Weight over height cubed.",
        _CATEGORY,
        [_weight(), _height()],
        tags=["body composition"],
        related=["bmi"],
    ),
    "ffmi": _make_calc_entry(
        "ffmi", run_ffmi, "Fat-Free Mass Index (FFMI)",
        "Fat-free mass relative to height, normalized to 1.8 m.",
        _CATEGORY,
        [_weight(), _height(), _num("body_fat", "Body fat", "%", ge=0, lt=100), _sex()],
        tags=["body composition", "muscle"],
        related=["lean_body_mass"],
    ),
    "relative_fat_mass": _make_calc_entry(
        "relative_fat_mass", run_relative_fat_mass, "Relative Fat Mass (RFM)",
        "Body fat estimate from height and waist circumference.",
        _CATEGORY,
        [_height(), _cm("waist", "Waist circumference"), _sex()],
        tags=["body composition", "body fat"],
        related=["body_fat_navy"],
    ),
    "hypertension_stage": _make_calc_entry(
        "hypertension_stage", run_hypertension_stage, "Hypertension Stage",
        "Blood pressure stage (ACC/AHA) with a cardiovascular risk score.",
        _CATEGORY,
        [_num("systolic", "Systolic pressure", "mmHg", gt=50, le=300),
         _num("diastolic", "Diastolic pressure", "mmHg", gt=30, le=200),
         _int("age", "Age", ge=1, le=120), _sex(),
         _flag("diabetes", "Diabetes"), _flag("kidney_disease", "Chronic kidney disease"),
         _flag("heart_disease", "Heart disease"), _flag("stroke", "Previous stroke"),
         _flag("family_history", "Family history of hypertension"), _flag("smoking", "Smoker"),
         _num("cholesterol", "Total cholesterol", "mg/dL", "cholesterol", required=False, gt=0)],
        tags=["blood pressure", "cardiovascular"],
    ),
    "hba1c_from_glucose": _make_calc_entry(
        "hba1c_from_glucose", run_hba1c_from_glucose, "Blood Sugar to HbA1c",
        "Estimated HbA1c from average glucose.",
        _CATEGORY,
        [_num("average_glucose", "Average glucose", "mg/dL", "glucose", synonyms=["eAG", "blood sugar"],
              gt=0, le=1000)],
        tags=["diabetes", "glucose"],
    ),
    "egfr_ckd_epi": _make_calc_entry(
        "egfr_ckd_epi", run_egfr_ckd_epi, "Kidney Function (eGFR)",
        "Estimated glomerular filtration rate by CKD-EPI 2009.",
        _CATEGORY,
        [_num("creatinine", "Serum creatinine", "mg/dL", "creatinine", synonyms=["scr"], gt=0, le=30),
         _int("age", "Age", ge=18, le=120), _sex(), _flag("black", "Black race")],
        tags=["kidney", "clinical"],
    ),
    "ideal_waist": _make_calc_entry(
        "ideal_waist", run_ideal_waist, "Ideal Waist Size",
        "Ideal and maximum waist from height, sex and ethnicity.",
        _CATEGORY,
        [_height(), _sex(),
         _choice("ethnicity", "Ethnicity", ["caucasian", "asian", "african", "hispanic", "other"], "other"),
         _cm("current_waist", "Current waist", required=False)],
        tags=["body shape", "waist"],
        related=["waist_to_bmi_ratio"],
    ),
    "waist_to_bmi_ratio": _make_calc_entry(
        "waist_to_bmi_ratio", run_waist_to_bmi_ratio, "Waist to BMI Ratio",
        "Waist circumference per BMI unit as a cardiometabolic risk marker.",
        _CATEGORY,
        [_cm("waist", "Waist circumference"), _weight(), _height(), _sex(), _int("age", "Age", ge=1, le=120)],
        tags=["risk", "waist"],
        related=["bmi", "ideal_waist"],
    ),
    "due_date": _make_calc_entry(
        "due_date", run_due_date, "Pregnancy Due Date",
        "Estimated due date from LMP, conception or ultrasound dating.",
        _CATEGORY,
        [_choice("method", "Dating method", ["lmp", "conception", "ultrasound"], "lmp"),
         _date("last_period", "First day of last period", required=False),
         _int("cycle_length", "Cycle length in days", required=False, default=28, ge=20, le=45),
         _date("conception_date", "Conception date", required=False),
         _date("ultrasound_date", "Ultrasound date", required=False),
         _int("ultrasound_weeks", "Gestational weeks at scan", required=False, ge=0, le=42),
         _int("ultrasound_days", "Extra days at scan", required=False, default=0, ge=0, le=6),
         _date("as_of", "Calculate as of", required=False)],
        tags=["pregnancy"],
    ),
    "sleep_efficiency": _make_calc_entry(
        "sleep_efficiency", run_sleep_efficiency, "Sleep Efficiency",
        "Share of time in bed actually spent asleep.",
        _CATEGORY,
        [_num("time_asleep", "Time asleep", "hours", gt=0, le=24),
         _num("time_in_bed", "Time in bed", "hours", gt=0, le=24)],
        tags=["sleep"],
    ),
    "glycemic_load": _make_calc_entry(
        "glycemic_load", run_glycemic_load, "Glycemic Load",
        "Blood sugar impact of a food portion.",
        _CATEGORY,
        [_num("glycemic_index", "Glycemic index", ge=0, le=150),
         _num("carbohydrates", "Available carbohydrates", "g", ge=0, le=1000)],
        tags=["nutrition", "diabetes"],
        related=["hba1c_from_glucose"],
    ),
}