# scoring.py
import logging
import math
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from config import BMI, EXERCISE_LEVELS, QUICK_CHECK, RISK, VITALS

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = [
    "age",
    "systolic_bp",
    "diastolic_bp",
    "total_cholesterol",
    "hdl_cholesterol",
    "ldl_cholesterol",
    "triglycerides",
    "height_cm",
    "weight_kg",
    "resting_heart_rate",
    "blood_glucose",
    "waist_circumference",
    "oxygen_saturation",
]

FLAG_FIELDS = ["smoking", "diabetes", "family_history"]


def _num(value) -> float:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0
    # nan / inf parse as floats but are not usable readings
    return result if math.isfinite(result) else 0


def _points(value: float, table: List[Tuple[float, int]], strict: bool = False) -> int:
    # table is ordered from the highest cutoff down; first match wins
    for cutoff, pts in table:
        if (value > cutoff) if strict else (value >= cutoff):
            return pts
    return 0


def _cutoffs(table: List[Tuple[float, int]]) -> Tuple[float, float]:
    # (upper, lower) cutoff of a two-step points table
    return table[0][0], table[1][0]


def normalize_metrics(data: Dict) -> Dict:
    """Coerce a raw form/record dict into the metric shape the scorer expects.

    Missing or unparsable numbers become 0, flags become bools and an
    unknown exercise level falls back to "none".
    """
    out = {}
    for key in NUMERIC_FIELDS:
        out[key] = _num(data.get(key))
    for key in FLAG_FIELDS:
        out[key] = bool(data.get(key))

    exercise = str(data.get("exercise") or "none").strip().lower()
    out["exercise"] = exercise if exercise in EXERCISE_LEVELS else "none"

    sex = str(data.get("sex") or "").strip().lower()
    out["sex"] = sex if sex in ("male", "female") else None
    return out


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    height_cm, weight_kg = _num(height_cm), _num(weight_kg)
    if height_cm <= 0 or weight_kg <= 0:
        return 0
    h_m = height_cm / 100.0
    return round(weight_kg / (h_m * h_m), 1)


def bmi_category(bmi: float) -> str:
    if bmi < BMI["underweight_below"]:
        return "Underweight"
    if bmi < BMI["normal_below"]:
        return "Normal"
    if bmi < BMI["overweight_below"]:
        return "Overweight"
    return "Obese"


def waist_threshold(sex: Optional[str]) -> float:
    if sex == "female":
        return VITALS["waist_female_cm"]
    return VITALS["waist_male_cm"]


def calculate_risk_score(data: Dict) -> int:
    """
    Weighted sum of independent threshold checks, clamped to [0, 100].
    Optional metrics left at 0 contribute nothing.
    """
    d = normalize_metrics(data)
    score = 0

    score += _points(d["age"], RISK["age_points"])
    score += _points(d["systolic_bp"], RISK["sbp_points"])

    # HDL of 0 is treated as 1 so the ratio stays finite
    ratio = d["total_cholesterol"] / (d["hdl_cholesterol"] or 1)
    score += _points(ratio, RISK["ratio_points"])

    score += _points(calculate_bmi(d["height_cm"], d["weight_kg"]), RISK["bmi_points"])

    if d["resting_heart_rate"] > 0:
        score += _points(d["resting_heart_rate"], RISK["hr_points"], strict=True)

    if d["blood_glucose"] > 0:
        score += _points(d["blood_glucose"], RISK["glucose_points"])

    if d["waist_circumference"] > 0 and d["waist_circumference"] > waist_threshold(d["sex"]):
        score += RISK["waist_points"]

    if d["triglycerides"] > 0:
        score += _points(d["triglycerides"], RISK["tg_points"])

    if d["smoking"]:
        score += RISK["smoking_points"]
    if d["diabetes"]:
        score += RISK["diabetes_points"]
    if d["family_history"]:
        score += RISK["family_history_points"]

    score += RISK["exercise_points"].get(d["exercise"], 0)

    return int(max(RISK["min_score"], min(RISK["max_score"], score)))


def risk_level(score: float) -> str:
    if score < RISK["low_below"]:
        return "low"
    if score < RISK["moderate_below"]:
        return "moderate"
    return "high"


def vital_statuses(data: Dict) -> List[Dict]:
    """
    Returns one entry per optional vital that was provided:
      {"name", "value", "unit", "status", "severity"}
    severity: "normal" | "caution" | "alert"
    """
    d = normalize_metrics(data)
    out: List[Dict] = []
    hr_high, hr_mid = _cutoffs(RISK["hr_points"])
    glucose_high, glucose_mid = _cutoffs(RISK["glucose_points"])
    tg_high, tg_mid = _cutoffs(RISK["tg_points"])

    hr = d["resting_heart_rate"]
    if hr > 0:
        if hr > hr_high:
            status, sev = "Elevated", "alert"
        elif hr > hr_mid:
            status, sev = "Slightly High", "caution"
        else:
            status, sev = "Normal", "normal"
        out.append({"name": "Resting HR", "value": hr, "unit": "bpm", "status": status, "severity": sev})

    glucose = d["blood_glucose"]
    if glucose > 0:
        if glucose >= glucose_high:
            status, sev = "Diabetic", "alert"
        elif glucose >= glucose_mid:
            status, sev = "Pre-diabetic", "caution"
        else:
            status, sev = "Normal", "normal"
        out.append({"name": "Blood Glucose", "value": glucose, "unit": "mg/dL", "status": status, "severity": sev})

    waist = d["waist_circumference"]
    if waist > 0:
        if waist > waist_threshold(d["sex"]):
            status, sev = "Elevated", "alert"
        else:
            status, sev = "Normal", "normal"
        out.append({"name": "Waist Circ.", "value": waist, "unit": "cm", "status": status, "severity": sev})

    tg = d["triglycerides"]
    if tg > 0:
        if tg >= tg_high:
            status, sev = "High", "alert"
        elif tg >= tg_mid:
            status, sev = "Borderline", "caution"
        else:
            status, sev = "Normal", "normal"
        out.append({"name": "Triglycerides", "value": tg, "unit": "mg/dL", "status": status, "severity": sev})

    spo2 = d["oxygen_saturation"]
    if spo2 > 0:
        if spo2 < VITALS["spo2_low_below"]:
            status, sev = "Low", "alert"
        else:
            status, sev = "Normal", "normal"
        out.append({"name": "SpO2", "value": spo2, "unit": "%", "status": status, "severity": sev})

    ldl = d["ldl_cholesterol"]
    if ldl > 0:
        if ldl >= VITALS["ldl_high"]:
            status, sev = "High", "alert"
        elif ldl >= VITALS["ldl_borderline"]:
            status, sev = "Borderline High", "caution"
        elif ldl >= VITALS["ldl_near_optimal"]:
            status, sev = "Near Optimal", "caution"
        else:
            status, sev = "Optimal", "normal"
        out.append({"name": "LDL Cholesterol", "value": ldl, "unit": "mg/dL", "status": status, "severity": sev})

    return out


def generate_recommendations(data: Dict, level: str) -> List[str]:
    d = normalize_metrics(data)
    recs: List[str] = []
    bmi = calculate_bmi(d["height_cm"], d["weight_kg"])
    hr_high, hr_mid = _cutoffs(RISK["hr_points"])
    glucose_high, glucose_mid = _cutoffs(RISK["glucose_points"])
    tg_high, tg_mid = _cutoffs(RISK["tg_points"])

    # BMI (only when height + weight were given)
    if bmi > 0:
        if bmi >= BMI["overweight_below"]:
            recs.append("Weight management is critical - aim for 5-10% weight loss to reduce cardiovascular risk")
        elif bmi >= BMI["normal_below"]:
            recs.append("Consider weight loss through diet and exercise to achieve BMI < 25")
        elif bmi < BMI["underweight_below"]:
            recs.append("Maintain healthy weight through balanced nutrition")

    if d["systolic_bp"] >= VITALS["bp_recommend_sys"]:
        recs.append("Consider lifestyle changes to lower blood pressure (reduce sodium, increase exercise)")
    if d["total_cholesterol"] > VITALS["tc_recommend_above"]:
        recs.append("Adopt a heart-healthy diet (Mediterranean diet, reduce saturated fats)")
    if d["smoking"]:
        recs.append("Quit smoking immediately - seek support programs")
    if d["diabetes"]:
        recs.append("Maintain strict blood glucose control")
    if d["exercise"] in ("none", "light"):
        recs.append("Increase physical activity to 30-45 minutes daily")

    hr = d["resting_heart_rate"]
    if hr > hr_high:
        recs.append("Elevated resting heart rate detected - consult with healthcare provider")
    elif hr > hr_mid:
        recs.append("Consider cardiovascular fitness training to lower resting heart rate")

    glucose = d["blood_glucose"]
    if glucose >= glucose_high:
        recs.append("Blood glucose in diabetic range - immediate medical consultation needed")
    elif glucose >= glucose_mid:
        recs.append("Pre-diabetic range detected - focus on diet and exercise to prevent progression")

    if d["waist_circumference"] > waist_threshold(d["sex"]):
        recs.append("Elevated waist circumference indicates central obesity - prioritize weight loss")

    tg = d["triglycerides"]
    if tg >= tg_high:
        recs.append("High triglycerides detected - reduce refined carbs and sugars, increase omega-3 intake")
    elif tg >= tg_mid:
        recs.append("Borderline high triglycerides - monitor diet and consider lifestyle changes")

    if level == "high":
        recs.append("Consult with a cardiologist for comprehensive evaluation")
        recs.append("Consider medication therapy (statins, antihypertensives)")
    elif level == "moderate":
        recs.append("Monitor risk factors every 6 months")
        recs.append("Maintain healthy lifestyle habits")
    else:
        recs.append("Continue current healthy lifestyle")
        recs.append("Annual cardiovascular risk reassessment recommended")

    return recs


def assess(data: Dict, patient_id: Optional[int] = None, now: Optional[datetime] = None) -> Dict:
    """Score one set of metrics. The returned dict is not persisted."""
    metrics = normalize_metrics(data)
    score = calculate_risk_score(metrics)
    level = risk_level(score)
    bmi = calculate_bmi(metrics["height_cm"], metrics["weight_kg"])

    logger.debug("Assessment scored: score=%s level=%s bmi=%s", score, level, bmi)

    return {
        "patient_id": patient_id,
        "created_at": now or datetime.now(),
        "data": metrics,
        "bmi": bmi,
        "risk_score": score,
        "risk_level": level,
        "recommendations": generate_recommendations(metrics, level),
    }


def quick_check(
    age: Optional[float],
    systolic_bp: Optional[float],
    cholesterol: Optional[float],
    smoking: bool,
    diabetes: bool,
) -> Tuple[str, str]:
    """
    Five-factor screen. Returns:
      level: "low" | "moderate" | "high"
      message: human-readable summary
    """
    score = 0
    if _num(age) > QUICK_CHECK["age_above"]:
        score += 1
    if _num(systolic_bp) > QUICK_CHECK["sbp_above"]:
        score += 1
    if _num(cholesterol) > QUICK_CHECK["chol_above"]:
        score += 1
    if smoking:
        score += 1
    if diabetes:
        score += 1

    if score <= QUICK_CHECK["low_max"]:
        return "low", "Low Risk – Keep up healthy habits!"
    if score <= QUICK_CHECK["moderate_max"]:
        return "moderate", "Moderate Risk – Improve diet and exercise."
    return "high", "High Risk – Consult a doctor for evaluation."
