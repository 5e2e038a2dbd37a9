# storage.py
import os
import json
import logging
from datetime import datetime, date
from typing import List, Optional, Dict

from sqlalchemy import (
    create_engine, MetaData, Table, Column,
    Integer, Float, String, Date, DateTime, Text
)
from sqlalchemy.sql import select, insert, update
from sqlalchemy.pool import NullPool

from config import APPOINTMENTS

logger = logging.getLogger(__name__)

def _get_db_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if not url:
        try:
            import streamlit as st
            url = str(st.secrets.get("DATABASE_URL", "")).strip()
        except Exception:
            # no secrets.toml outside of a configured deployment
            logger.debug("No DATABASE_URL in Streamlit secrets; using local SQLite")
    return url

_engine = None

def get_engine():
    global _engine
    if _engine is None:
        db_url = _get_db_url()
        if db_url:
            _engine = create_engine(db_url, pool_pre_ping=True, poolclass=NullPool)
        else:
            _engine = create_engine("sqlite:///arterycheck.db", connect_args={"check_same_thread": False})
    return _engine

metadata = MetaData()

patients = Table(
    "patients", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(200), nullable=False),
    Column("age", Integer, nullable=True),
    Column("email", String(200), nullable=True),
    Column("phone", String(40), nullable=True),
    Column("risk_level", String(20), nullable=False),
    Column("last_assessment", DateTime, nullable=True),
    Column("next_appointment", String(40), nullable=True),
    Column("medical_history", Text, nullable=True),
    Column("medications_json", Text, nullable=True),
    Column("height_cm", Float, nullable=True),
    Column("weight_kg", Float, nullable=True),
    Column("bmi", Float, nullable=True),
    Column("created_at", DateTime, nullable=False),
)

assessments = Table(
    "assessments", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("patient_id", Integer, nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("data_json", Text, nullable=False),
    Column("bmi", Float, nullable=True),
    Column("risk_score", Integer, nullable=False),
    Column("risk_level", String(20), nullable=False),
    Column("recommendations_json", Text, nullable=False),
)

appointments = Table(
    "appointments", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("patient_id", Integer, nullable=True),
    Column("patient_name", String(200), nullable=False),
    Column("date", Date, nullable=False),
    Column("time", String(5), nullable=False),
    Column("type", String(30), nullable=False),
    Column("status", String(20), nullable=False),
    Column("notes", Text, nullable=True),
    Column("created_at", DateTime, nullable=False),
)

def init_db() -> None:
    metadata.create_all(get_engine())

def _load_list(raw: Optional[str]) -> List:
    try:
        value = json.loads(raw or "[]")
    except ValueError:
        return []
    return value if isinstance(value, list) else []

def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))

# -------------------------
# Patients
# -------------------------
def _patient_row(row) -> Dict:
    d = dict(row._mapping)
    d["medications"] = _load_list(d.pop("medications_json", None))
    return d

def add_patient(data: Dict) -> int:
    medications = data.get("medications", [])
    with get_engine().begin() as conn:
        result = conn.execute(insert(patients).values(
            name=(data.get("name") or "").strip(),
            age=data.get("age"),
            email=(data.get("email") or "").strip() or None,
            phone=(data.get("phone") or "").strip() or None,
            risk_level=data.get("risk_level") or "low",
            last_assessment=data.get("last_assessment"),
            next_appointment=data.get("next_appointment"),
            medical_history=data.get("medical_history") or None,
            medications_json=json.dumps(medications if isinstance(medications, list) else []),
            height_cm=data.get("height_cm") or None,
            weight_kg=data.get("weight_kg") or None,
            bmi=data.get("bmi") or None,
            created_at=datetime.now(),
        ))
        patient_id = int(result.inserted_primary_key[0])
    logger.info("Added patient id=%s", patient_id)
    return patient_id

def get_patient(patient_id: int) -> Optional[Dict]:
    with get_engine().begin() as conn:
        row = conn.execute(
            select(patients).where(patients.c.id == patient_id)
        ).fetchone()
    if not row:
        return None
    return _patient_row(row)

def fetch_patients() -> List[Dict]:
    with get_engine().begin() as conn:
        rows = conn.execute(select(patients).order_by(patients.c.id)).fetchall()
    return [_patient_row(r) for r in rows]

def update_patient_assessment(patient_id: int, risk_level: str, assessed_at: datetime, bmi: Optional[float] = None) -> None:
    payload = {"risk_level": risk_level, "last_assessment": assessed_at}
    if bmi:
        payload["bmi"] = bmi
    with get_engine().begin() as conn:
        updated = conn.execute(
            update(patients).where(patients.c.id == patient_id).values(**payload)
        ).rowcount
    if updated == 0:
        logger.warning("Assessment references unknown patient id=%s", patient_id)

# -------------------------
# Assessments
# -------------------------
def _assessment_row(row) -> Dict:
    d = dict(row._mapping)
    try:
        d["data"] = json.loads(d.pop("data_json") or "{}")
    except ValueError:
        d["data"] = {}
    d["recommendations"] = _load_list(d.pop("recommendations_json", None))
    return d

def add_assessment(result: Dict) -> int:
    created_at = result.get("created_at") or datetime.now()
    patient_id = result.get("patient_id")
    with get_engine().begin() as conn:
        res = conn.execute(insert(assessments).values(
            patient_id=patient_id,
            created_at=created_at,
            data_json=json.dumps(result.get("data", {})),
            bmi=result.get("bmi") or None,
            risk_score=int(result["risk_score"]),
            risk_level=result["risk_level"],
            recommendations_json=json.dumps(result.get("recommendations", [])),
        ))
        assessment_id = int(res.inserted_primary_key[0])
    logger.info("Saved assessment id=%s score=%s level=%s", assessment_id, result["risk_score"], result["risk_level"])

    if patient_id is not None:
        update_patient_assessment(patient_id, result["risk_level"], created_at, result.get("bmi"))
    return assessment_id

def fetch_assessments(patient_id: Optional[int] = None) -> List[Dict]:
    query = select(assessments).order_by(assessments.c.id)
    if patient_id is not None:
        query = query.where(assessments.c.patient_id == patient_id)
    with get_engine().begin() as conn:
        rows = conn.execute(query).fetchall()
    return [_assessment_row(r) for r in rows]

# -------------------------
# Appointments
# -------------------------
def _appointment_row(row) -> Dict:
    d = dict(row._mapping)
    d["date"] = d["date"].isoformat()
    d["notes"] = d.get("notes") or ""
    return d

def add_appointment(data: Dict) -> int:
    appt_type = data.get("type") or "consultation"
    status = data.get("status") or "scheduled"
    if appt_type not in APPOINTMENTS["types"]:
        raise ValueError(f"Unknown appointment type: {appt_type}")
    if status not in APPOINTMENTS["statuses"]:
        raise ValueError(f"Unknown appointment status: {status}")

    with get_engine().begin() as conn:
        result = conn.execute(insert(appointments).values(
            patient_id=data.get("patient_id"),
            patient_name=(data.get("patient_name") or "").strip(),
            date=_as_date(data["date"]),
            time=data.get("time") or APPOINTMENTS["default_time"],
            type=appt_type,
            status=status,
            notes=data.get("notes") or None,
            created_at=datetime.now(),
        ))
        appointment_id = int(result.inserted_primary_key[0])
    logger.info("Scheduled appointment id=%s type=%s", appointment_id, appt_type)
    return appointment_id

def fetch_appointments() -> List[Dict]:
    with get_engine().begin() as conn:
        rows = conn.execute(select(appointments).order_by(appointments.c.id)).fetchall()
    return [_appointment_row(r) for r in rows]

def update_appointment_status(appointment_id: int, status: str) -> None:
    if status not in APPOINTMENTS["statuses"]:
        raise ValueError(f"Unknown appointment status: {status}")
    with get_engine().begin() as conn:
        conn.execute(
            update(appointments).where(appointments.c.id == appointment_id).values(status=status)
        )
    logger.info("Appointment id=%s marked %s", appointment_id, status)
