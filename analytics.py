# analytics.py
# Chart data for the Dashboard / Analytics tabs. Every function takes the plain
# record dicts returned by storage.py and returns numbers or a DataFrame.
import math
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from config import AGE_BUCKETS, RISK_LEVELS
from scoring import bmi_category, calculate_bmi
from appointments import upcoming_appointments

RISK_LABELS = {"low": "Low Risk", "moderate": "Moderate Risk", "high": "High Risk"}
BMI_CATEGORIES = ["Underweight", "Normal", "Overweight", "Obese"]


def _in_bucket(age: pd.Series, low: int, high: Optional[int]) -> pd.Series:
    mask = age >= low
    if high is not None:
        mask &= age <= high
    return mask


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def dashboard_stats(patients: List[Dict], assessments: List[Dict], appointments: List[Dict], now: datetime) -> Dict:
    return {
        "total_patients": len(patients),
        "total_assessments": len(assessments),
        "high_risk_patients": sum(1 for p in patients if p.get("risk_level") == "high"),
        "upcoming_appointments": len(upcoming_appointments(appointments, now)),
    }


def age_distribution(patients: List[Dict]) -> pd.DataFrame:
    ages = pd.to_numeric(pd.Series([p.get("age") for p in patients], dtype="object"), errors="coerce")
    rows = [
        {"range": label, "count": int(_in_bucket(ages, low, high).sum())}
        for label, low, high in AGE_BUCKETS
    ]
    return pd.DataFrame(rows, columns=["range", "count"])


def risk_distribution(records: List[Dict]) -> pd.DataFrame:
    """Counts per risk level; works on patients or assessments."""
    levels = pd.Series([r.get("risk_level") for r in records], dtype="object")
    counts = levels.value_counts()
    rows = [
        {"level": lvl, "label": RISK_LABELS[lvl], "count": int(counts.get(lvl, 0))}
        for lvl in RISK_LEVELS
    ]
    return pd.DataFrame(rows, columns=["level", "label", "count"])


def bmi_distribution(assessments: List[Dict]) -> pd.DataFrame:
    cats = []
    for a in assessments:
        data = a.get("data") or {}
        bmi = calculate_bmi(data.get("height_cm"), data.get("weight_kg"))
        if bmi > 0:
            cats.append(bmi_category(bmi))
    counts = pd.Series(cats, dtype="object").value_counts()
    rows = [{"category": c, "count": int(counts.get(c, 0))} for c in BMI_CATEGORIES]
    return pd.DataFrame(rows, columns=["category", "count"])


def average_risk_score(assessments: List[Dict]) -> int:
    if not assessments:
        return 0
    scores = pd.Series([a.get("risk_score", 0) for a in assessments], dtype="float")
    return _round_half_up(scores.mean())


def monthly_trends(assessments: List[Dict], now: datetime, months: int = 6) -> pd.DataFrame:
    """Assessments and high-risk assessments per calendar month, oldest first."""
    current = pd.Period(now, freq="M")
    periods = [current - (months - 1 - i) for i in range(months)]

    if assessments:
        df = pd.DataFrame({
            "created_at": pd.to_datetime([a.get("created_at") for a in assessments]),
            "high": [a.get("risk_level") == "high" for a in assessments],
        })
        df["period"] = df["created_at"].dt.to_period("M")
    else:
        df = pd.DataFrame({"period": pd.Series([], dtype="period[M]"), "high": pd.Series([], dtype="bool")})

    rows = []
    for p in periods:
        in_month = df[df["period"] == p]
        rows.append({
            "month": p.strftime("%b"),
            "assessments": int(len(in_month)),
            "high_risk": int(in_month["high"].sum()),
        })
    return pd.DataFrame(rows, columns=["month", "assessments", "high_risk"])


def risk_by_age(assessments: List[Dict]) -> pd.DataFrame:
    """Mean / min / max risk score per age bucket (0 for empty buckets)."""
    df = pd.DataFrame({
        "age": [(a.get("data") or {}).get("age", 0) for a in assessments],
        "score": [a.get("risk_score", 0) for a in assessments],
    }, columns=["age", "score"])
    df["age"] = pd.to_numeric(df["age"], errors="coerce")
    df["score"] = pd.to_numeric(df["score"], errors="coerce")

    rows = []
    for label, low, high in AGE_BUCKETS:
        scores = df.loc[_in_bucket(df["age"], low, high), "score"]
        if scores.empty:
            rows.append({"age": label, "avg_risk": 0, "low": 0, "high": 0, "count": 0})
        else:
            rows.append({
                "age": label,
                "avg_risk": _round_half_up(scores.mean()),
                "low": int(scores.min()),
                "high": int(scores.max()),
                "count": int(len(scores)),
            })
    return pd.DataFrame(rows, columns=["age", "avg_risk", "low", "high", "count"])


def filter_patients(patients: List[Dict], search: str = "", risk: str = "all") -> List[Dict]:
    term = (search or "").strip().lower()
    out = []
    for p in patients:
        name = (p.get("name") or "").lower()
        email = (p.get("email") or "").lower()
        if term and term not in name and term not in email:
            continue
        if risk != "all" and p.get("risk_level") != risk:
            continue
        out.append(p)
    return out


def patient_vitals_trend(assessments: List[Dict]) -> pd.DataFrame:
    rows = [
        {
            "date": pd.to_datetime(a.get("created_at")),
            "systolic_bp": (a.get("data") or {}).get("systolic_bp", 0),
            "total_cholesterol": (a.get("data") or {}).get("total_cholesterol", 0),
        }
        for a in assessments
    ]
    df = pd.DataFrame(rows, columns=["date", "systolic_bp", "total_cholesterol"])
    return df.sort_values("date").reset_index(drop=True)
