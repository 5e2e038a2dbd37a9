"""Tests for dashboard statistics and chart data."""

from datetime import datetime

from analytics import (
    age_distribution,
    average_risk_score,
    bmi_distribution,
    dashboard_stats,
    filter_patients,
    monthly_trends,
    patient_vitals_trend,
    risk_by_age,
    risk_distribution,
)

NOW = datetime(2026, 10, 18, 12, 0)


def _assessment(score, level, created_at=NOW, **data):
    return {"risk_score": score, "risk_level": level, "created_at": created_at, "data": data}


class TestDashboardStats:
    """Stat cards on the dashboard tab."""

    def test_counts(self):
        patients = [{"risk_level": "high"}, {"risk_level": "low"}, {"risk_level": "high"}]
        assessments = [_assessment(10, "low")]
        appts = [
            {"date": "2026-10-19", "time": "09:00", "status": "scheduled"},
            {"date": "2026-10-20", "time": "09:00", "status": "cancelled"},
            {"date": "2026-10-01", "time": "09:00", "status": "scheduled"},
        ]
        stats = dashboard_stats(patients, assessments, appts, NOW)
        assert stats == {
            "total_patients": 3,
            "total_assessments": 1,
            "high_risk_patients": 2,
            "upcoming_appointments": 1,
        }

    def test_empty(self):
        stats = dashboard_stats([], [], [], NOW)
        assert all(v == 0 for v in stats.values())


class TestAgeDistribution:
    """Inclusive age buckets."""

    def test_bucket_edges(self):
        ages = [18, 30, 31, 45, 46, 60, 61, 75, 76, 90, None, 10]
        df = age_distribution([{"age": a} for a in ages])
        assert list(df["range"]) == ["18-30", "31-45", "46-60", "61-75", "76+"]
        assert list(df["count"]) == [2, 2, 2, 2, 2]

    def test_no_patients(self):
        df = age_distribution([])
        assert df["count"].sum() == 0
        assert len(df) == 5


class TestRiskDistribution:
    """Counts per risk level."""

    def test_counts(self):
        records = [{"risk_level": l} for l in ["low", "low", "moderate", "high", None]]
        df = risk_distribution(records)
        assert list(df["level"]) == ["low", "moderate", "high"]
        assert list(df["label"]) == ["Low Risk", "Moderate Risk", "High Risk"]
        assert list(df["count"]) == [2, 1, 1]

    def test_empty(self):
        assert list(risk_distribution([])["count"]) == [0, 0, 0]


class TestBMIDistribution:
    """BMI categories from stored assessment inputs."""

    def test_categories(self):
        assessments = [
            _assessment(0, "low", height_cm=175, weight_kg=50),   # 16.3
            _assessment(0, "low", height_cm=175, weight_kg=70),   # 22.9
            _assessment(0, "low", height_cm=175, weight_kg=80),   # 26.1
            _assessment(0, "low", height_cm=175, weight_kg=95),   # 31.0
            _assessment(0, "low", height_cm=175, weight_kg=100),  # 32.7
            _assessment(0, "low", height_cm=0, weight_kg=70),
            _assessment(0, "low"),
        ]
        df = bmi_distribution(assessments)
        assert list(df["category"]) == ["Underweight", "Normal", "Overweight", "Obese"]
        assert list(df["count"]) == [1, 1, 1, 2]


class TestAverageRiskScore:
    """Rounded mean risk score."""

    def test_rounds_half_up(self):
        assert average_risk_score([_assessment(10, "low"), _assessment(21, "moderate")]) == 16

    def test_empty_is_zero(self):
        assert average_risk_score([]) == 0


class TestMonthlyTrends:
    """Per-month assessment counts."""

    def test_last_six_months(self):
        assessments = [
            _assessment(30, "moderate", datetime(2026, 10, 2)),
            _assessment(55, "high", datetime(2026, 10, 17)),
            _assessment(10, "low", datetime(2026, 8, 5)),
            _assessment(60, "high", datetime(2026, 3, 1)),
        ]
        df = monthly_trends(assessments, NOW)
        assert list(df["month"]) == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
        assert list(df["assessments"]) == [0, 0, 0, 1, 0, 2]
        assert list(df["high_risk"]) == [0, 0, 0, 0, 0, 1]

    def test_crosses_year_boundary(self):
        assessments = [_assessment(10, "low", datetime(2025, 12, 24))]
        df = monthly_trends(assessments, datetime(2026, 2, 10))
        assert list(df["month"]) == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
        assert list(df["assessments"]) == [0, 0, 0, 1, 0, 0]

    def test_no_assessments(self):
        df = monthly_trends([], NOW, months=3)
        assert list(df["assessments"]) == [0, 0, 0]
        assert list(df["high_risk"]) == [0, 0, 0]


class TestRiskByAge:
    """Score statistics per age bucket."""

    def test_stats(self):
        assessments = [
            _assessment(10, "low", age=25),
            _assessment(20, "moderate", age=28),
            _assessment(40, "moderate", age=70),
        ]
        df = risk_by_age(assessments).set_index("age")
        assert df.loc["18-30", "avg_risk"] == 15
        assert df.loc["18-30", "low"] == 10
        assert df.loc["18-30", "high"] == 20
        assert df.loc["18-30", "count"] == 2
        assert df.loc["61-75", "avg_risk"] == 40
        assert df.loc["31-45", "count"] == 0
        assert df.loc["31-45", "avg_risk"] == 0


class TestFilterPatients:
    """Search and risk filter on the patient list."""

    PATIENTS = [
        {"name": "Ada Obi", "email": "ada@example.com", "risk_level": "high"},
        {"name": "Ben Cole", "email": "ben@clinic.org", "risk_level": "low"},
        {"name": "Cara Diaz", "email": None, "risk_level": "moderate"},
    ]

    def test_no_filters(self):
        assert len(filter_patients(self.PATIENTS)) == 3

    def test_search_name_case_insensitive(self):
        assert [p["name"] for p in filter_patients(self.PATIENTS, "ben")] == ["Ben Cole"]

    def test_search_email(self):
        assert [p["name"] for p in filter_patients(self.PATIENTS, "EXAMPLE.com")] == ["Ada Obi"]

    def test_risk_filter(self):
        assert [p["name"] for p in filter_patients(self.PATIENTS, risk="moderate")] == ["Cara Diaz"]

    def test_combined(self):
        assert filter_patients(self.PATIENTS, "ada", "low") == []


class TestPatientVitalsTrend:
    """Systolic BP / cholesterol series for one patient."""

    def test_sorted_by_date(self):
        assessments = [
            _assessment(0, "low", datetime(2026, 9, 1), systolic_bp=140, total_cholesterol=220),
            _assessment(0, "low", datetime(2026, 6, 1), systolic_bp=120, total_cholesterol=180),
        ]
        df = patient_vitals_trend(assessments)
        assert list(df["systolic_bp"]) == [120, 140]
        assert list(df["total_cholesterol"]) == [180, 220]

    def test_empty(self):
        assert patient_vitals_trend([]).empty
