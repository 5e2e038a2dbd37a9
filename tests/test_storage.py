"""Tests for the local record store."""

from datetime import datetime

import pytest

import storage
from scoring import assess


class TestPatients:
    """Patient create/read."""

    def test_add_and_get(self, db):
        pid = storage.add_patient({
            "name": "  Ada Obi ",
            "age": 52,
            "email": "ada@example.com",
            "medications": ["Atorvastatin", "Aspirin"],
            "height_cm": 170,
            "weight_kg": 80,
            "bmi": 27.7,
        })
        patient = storage.get_patient(pid)

        assert patient["name"] == "Ada Obi"
        assert patient["age"] == 52
        assert patient["risk_level"] == "low"
        assert patient["last_assessment"] is None
        assert patient["medications"] == ["Atorvastatin", "Aspirin"]
        assert patient["phone"] is None
        assert patient["bmi"] == pytest.approx(27.7)

    def test_get_missing(self, db):
        assert storage.get_patient(999) is None

    def test_fetch_in_insertion_order(self, db):
        storage.add_patient({"name": "First"})
        storage.add_patient({"name": "Second"})
        storage.add_patient({"name": "First"})  # duplicates are allowed
        assert [p["name"] for p in storage.fetch_patients()] == ["First", "Second", "First"]


class TestAssessments:
    """Assessment persistence and patient updates."""

    def test_round_trip(self, db):
        result = assess({"age": 66, "smoking": True, "height_cm": 175, "weight_kg": 70})
        aid = storage.add_assessment(result)

        rows = storage.fetch_assessments()
        assert len(rows) == 1
        row = rows[0]
        assert row["id"] == aid
        assert row["risk_score"] == result["risk_score"]
        assert row["risk_level"] == result["risk_level"]
        assert row["data"]["smoking"] is True
        assert row["data"]["age"] == 66
        assert row["recommendations"] == result["recommendations"]
        assert row["patient_id"] is None

    def test_updates_linked_patient(self, db):
        pid = storage.add_patient({"name": "Ben Cole", "age": 70})
        when = datetime(2026, 10, 18, 9, 0)
        result = assess({"age": 70, "diabetes": True, "smoking": True, "systolic_bp": 165,
                         "total_cholesterol": 300, "hdl_cholesterol": 40,
                         "height_cm": 175, "weight_kg": 95}, patient_id=pid, now=when)
        storage.add_assessment(result)

        patient = storage.get_patient(pid)
        assert patient["risk_level"] == result["risk_level"] == "moderate"
        assert patient["last_assessment"] == when
        assert result["bmi"] == 31.0
        assert patient["bmi"] == pytest.approx(result["bmi"])

    def test_assessment_without_bmi_keeps_stored_bmi(self, db):
        pid = storage.add_patient({"name": "Ana Ruiz", "age": 50, "bmi": 27.7})
        result = assess({"age": 50, "systolic_bp": 125}, patient_id=pid)
        assert result["bmi"] == 0
        storage.add_assessment(result)

        patient = storage.get_patient(pid)
        assert patient["bmi"] == pytest.approx(27.7)
        assert patient["risk_level"] == result["risk_level"]

    def test_unknown_patient_is_not_an_error(self, db):
        storage.add_assessment(assess({"age": 40}, patient_id=12345))
        assert len(storage.fetch_assessments()) == 1

    def test_filter_by_patient(self, db):
        storage.add_assessment(assess({"age": 40}, patient_id=1))
        storage.add_assessment(assess({"age": 50}, patient_id=2))
        storage.add_assessment(assess({"age": 60}, patient_id=1))

        rows = storage.fetch_assessments(patient_id=1)
        assert [r["data"]["age"] for r in rows] == [40, 60]


class TestAppointments:
    """Appointment persistence and status changes."""

    def test_add_and_fetch(self, db):
        aid = storage.add_appointment({
            "patient_name": "Ada Obi",
            "date": "2026-10-20",
            "time": "10:30",
            "type": "follow-up",
        })
        rows = storage.fetch_appointments()
        assert len(rows) == 1
        assert rows[0]["id"] == aid
        assert rows[0]["date"] == "2026-10-20"
        assert rows[0]["time"] == "10:30"
        assert rows[0]["status"] == "scheduled"
        assert rows[0]["notes"] == ""

    def test_update_status(self, db):
        aid = storage.add_appointment({"patient_name": "Ada", "date": "2026-10-20"})
        storage.update_appointment_status(aid, "completed")
        assert storage.fetch_appointments()[0]["status"] == "completed"

    def test_invalid_status_raises(self, db):
        aid = storage.add_appointment({"patient_name": "Ada", "date": "2026-10-20"})
        with pytest.raises(ValueError):
            storage.update_appointment_status(aid, "lost")

    def test_invalid_type_raises(self, db):
        with pytest.raises(ValueError):
            storage.add_appointment({"patient_name": "Ada", "date": "2026-10-20", "type": "surgery"})
