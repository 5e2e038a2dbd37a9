"""Tests for appointment scheduling helpers."""

from datetime import datetime

from appointments import (
    appointment_datetime,
    default_slot,
    linked_patient_name,
    todays_appointments,
    upcoming_appointments,
    validate_appointment,
)

NOW = datetime(2026, 10, 18, 12, 0)


def _appt(day, at="09:00", status="scheduled", name="Ada Obi", appt_type="consultation"):
    return {"patient_name": name, "date": day, "time": at, "status": status, "type": appt_type}


class TestUpcoming:
    """Upcoming = scheduled and strictly in the future."""

    def test_filters_and_sorts(self):
        appts = [
            _appt("2026-10-20", "10:00", name="late"),
            _appt("2026-10-19", "09:00", name="soon"),
            _appt("2026-10-19", "08:00", status="cancelled", name="cancelled"),
            _appt("2026-10-17", "09:00", name="past"),
            _appt("2026-10-18", "12:00", name="now"),
            _appt("2026-10-18", "15:30", name="later today"),
        ]
        names = [a["patient_name"] for a in upcoming_appointments(appts, NOW)]
        assert names == ["later today", "soon", "late"]

    def test_today_only(self):
        appts = [
            _appt("2026-10-18", "09:00", name="morning"),
            _appt("2026-10-18", "16:00", name="afternoon"),
            _appt("2026-10-19", "09:00", name="tomorrow"),
        ]
        assert [a["patient_name"] for a in todays_appointments(appts, NOW)] == ["afternoon"]

    def test_datetime_parsing(self):
        assert appointment_datetime(_appt("2026-10-19", "14:45")) == datetime(2026, 10, 19, 14, 45)


class TestDefaultSlot:
    def test_tomorrow_nine(self):
        assert default_slot(NOW) == datetime(2026, 10, 19, 9, 0)


class TestValidate:
    """Form validation for new appointments."""

    def test_valid(self):
        assert validate_appointment(_appt("2026-10-18", "16:00"), NOW) == []

    def test_missing_name(self):
        errors = validate_appointment(_appt("2026-10-19", name="  "), NOW)
        assert errors == ["Enter the patient name."]

    def test_past_date(self):
        errors = validate_appointment(_appt("2026-10-17"), NOW)
        assert "Appointment date cannot be in the past." in errors

    def test_bad_date_and_time(self):
        errors = validate_appointment(_appt("not-a-date", "25:99"), NOW)
        assert "Enter a valid appointment date." in errors
        assert "Enter a valid time (HH:MM)." in errors

    def test_unknown_type_and_status(self):
        errors = validate_appointment(_appt("2026-10-19", status="lost", appt_type="surgery"), NOW)
        assert len(errors) == 2


class TestLinkedPatientName:
    """Name prefilled when an appointment is linked to a patient."""

    PATIENTS = [{"id": 1, "name": "Ada Obi"}, {"id": 2, "name": "Ben (#7) Cole"}]

    def test_follows_selected_patient(self):
        assert linked_patient_name(self.PATIENTS, 1) == "Ada Obi"
        assert linked_patient_name(self.PATIENTS, 2) == "Ben (#7) Cole"

    def test_unlinked_or_unknown_is_blank(self):
        assert linked_patient_name(self.PATIENTS, None) == ""
        assert linked_patient_name(self.PATIENTS, 99) == ""
