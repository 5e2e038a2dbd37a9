# appointments.py
from datetime import datetime, date, time, timedelta
from typing import Dict, List, Optional

from config import APPOINTMENTS

TYPE_LABELS = {
    "consultation": "Consultation",
    "follow-up": "Follow-up",
    "assessment": "Assessment",
    "urgent": "Urgent",
}

def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))

def _parse_time(value) -> time:
    if isinstance(value, time):
        return value
    return datetime.strptime(str(value or APPOINTMENTS["default_time"]), "%H:%M").time()

def appointment_datetime(appt: Dict) -> datetime:
    return datetime.combine(_parse_date(appt["date"]), _parse_time(appt.get("time")))

def upcoming_appointments(appts: List[Dict], now: datetime) -> List[Dict]:
    """Scheduled appointments strictly after `now`, soonest first."""
    upcoming = [
        a for a in appts
        if a.get("status") == "scheduled" and appointment_datetime(a) > now
    ]
    return sorted(upcoming, key=appointment_datetime)

def todays_appointments(appts: List[Dict], now: datetime) -> List[Dict]:
    today = now.date()
    return [a for a in upcoming_appointments(appts, now) if _parse_date(a["date"]) == today]

def default_slot(now: datetime) -> datetime:
    return datetime.combine(now.date() + timedelta(days=1), _parse_time(APPOINTMENTS["default_time"]))

def linked_patient_name(patients: List[Dict], patient_id: Optional[int]) -> str:
    # prefill for the appointment form; "" when unlinked or unknown
    if patient_id is None:
        return ""
    for p in patients:
        if p.get("id") == patient_id:
            return p.get("name") or ""
    return ""

def validate_appointment(data: Dict, now: datetime) -> List[str]:
    errors: List[str] = []

    if not (data.get("patient_name") or "").strip():
        errors.append("Enter the patient name.")

    try:
        when = _parse_date(data.get("date"))
        if when < now.date():
            errors.append("Appointment date cannot be in the past.")
    except (TypeError, ValueError):
        errors.append("Enter a valid appointment date.")

    try:
        _parse_time(data.get("time"))
    except (TypeError, ValueError):
        errors.append("Enter a valid time (HH:MM).")

    if data.get("type", "consultation") not in APPOINTMENTS["types"]:
        errors.append(f"Unknown appointment type: {data.get('type')}")
    if data.get("status", "scheduled") not in APPOINTMENTS["statuses"]:
        errors.append(f"Unknown appointment status: {data.get('status')}")

    return errors
