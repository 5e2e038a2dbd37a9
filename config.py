# config.py
# Scoring thresholds + settings (clinical reviewers can tweak these easily)
import os

RISK = {
    # Age points (years)
    "age_points": [(65, 8), (55, 6), (45, 4), (35, 2)],

    # Systolic BP points (mmHg)
    "sbp_points": [(160, 7), (140, 5), (130, 3), (120, 1)],

    # Total / HDL cholesterol ratio points
    "ratio_points": [(6, 6), (5, 4), (4, 2)],

    # BMI points
    "bmi_points": [(30, 4), (25, 2)],

    # Resting heart rate points (strictly above, bpm)
    "hr_points": [(100, 2), (80, 1)],

    # Fasting glucose points (mg/dL)
    "glucose_points": [(126, 3), (100, 1)],

    # Triglyceride points (mg/dL)
    "tg_points": [(200, 2), (150, 1)],

    "waist_points": 2,
    "smoking_points": 4,
    "diabetes_points": 5,
    "family_history_points": 2,

    # Exercise is a negative factor
    "exercise_points": {"none": 0, "light": 0, "moderate": -1, "intense": -2},

    # Score → level
    "low_below": 20,
    "moderate_below": 50,

    "min_score": 0,
    "max_score": 100,
}

BMI = {
    "underweight_below": 18.5,
    "normal_below": 25.0,
    "overweight_below": 30.0,
}

VITALS = {
    "waist_male_cm": 102,
    "waist_female_cm": 88,
    "spo2_low_below": 95,
    "ldl_near_optimal": 100,
    "ldl_borderline": 130,
    "ldl_high": 160,
    "bp_recommend_sys": 130,
    "tc_recommend_above": 200,
}

QUICK_CHECK = {
    # Simple five-factor screen (one point each)
    "age_above": 45,
    "sbp_above": 130,
    "chol_above": 200,
    "low_max": 1,
    "moderate_max": 3,
}

EXERCISE_LEVELS = ["none", "light", "moderate", "intense"]

EXERCISE_LABELS = {
    "none": "None",
    "light": "Light (1-2 days/week)",
    "moderate": "Moderate (3-4 days/week)",
    "intense": "Intense (5+ days/week)",
}

RISK_LEVELS = ["low", "moderate", "high"]

# Inclusive (low, high) age ranges; None = open-ended
AGE_BUCKETS = [
    ("18-30", 18, 30),
    ("31-45", 31, 45),
    ("46-60", 46, 60),
    ("61-75", 61, 75),
    ("76+", 76, None),
]

APPOINTMENTS = {
    "types": ["consultation", "follow-up", "assessment", "urgent"],
    "statuses": ["scheduled", "completed", "cancelled"],
    "default_time": "09:00",
}

COLORS = {
    "low": "#10b981",
    "moderate": "#f59e0b",
    "high": "#ef4444",
    "Underweight": "#3b82f6",
    "Normal": "#10b981",
    "Overweight": "#f59e0b",
    "Obese": "#ef4444",
    "primary": "#0ea5e9",
}

APP = {
    "title": "ArteryCheck",
    "subtitle": "Cardiovascular risk dashboard",
    "disclaimer": (
        "Educational support tool only. Not medical advice. "
        "The risk score is a simplified screening estimate and does not replace "
        "clinician evaluation. If you feel unwell, seek medical care."
    ),
    "recent_limit": 5,
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
}
