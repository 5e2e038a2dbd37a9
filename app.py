import os
import logging
from datetime import datetime, date
from typing import Dict, List, Optional

import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt

from config import APP, APPOINTMENTS, COLORS, EXERCISE_LABELS, EXERCISE_LEVELS, RISK_LEVELS
from scoring import assess, bmi_category, calculate_bmi, quick_check, vital_statuses
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
from appointments import (
    TYPE_LABELS,
    default_slot,
    linked_patient_name,
    todays_appointments,
    upcoming_appointments,
    validate_appointment,
)
from education_bank import CATEGORIES, modules_in_category
from llm import explain_assessment

from storage import (
    init_db,
    add_patient,
    get_patient,
    fetch_patients,
    add_assessment,
    fetch_assessments,
    add_appointment,
    fetch_appointments,
    update_appointment_status,
)

st.set_page_config(page_title=APP["title"], layout="wide")

logging.basicConfig(
    level=APP["log_level"],
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

def _secret(name: str, default: str) -> str:
    try:
        return str(st.secrets.get(name, default))
    except FileNotFoundError:
        # running locally without .streamlit/secrets.toml
        return default

# Load Streamlit Secrets → environment variables (for Groq)
os.environ["GROQ_API_KEY"] = _secret("GROQ_API_KEY", os.getenv("GROQ_API_KEY", ""))
os.environ["GROQ_BASE_URL"] = _secret(
    "GROQ_BASE_URL",
    os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
)
os.environ["GROQ_MODEL"] = _secret(
    "GROQ_MODEL",
    os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
)

init_db()

# -------------------------
# Header + Disclaimer
# -------------------------
st.title(APP["title"])
st.caption(APP["subtitle"])
st.info(APP["disclaimer"])

tabs = st.tabs(["Dashboard", "Patients", "Assessments", "Analytics", "Education", "Appointments"])

# -------------------------
# Helpers
# -------------------------
def _level_label(level: Optional[str]) -> str:
    return (level or "low").capitalize()

def _show_level(level: str, text: str) -> None:
    if level == "low":
        st.success(text)
    elif level == "moderate":
        st.warning(text)
    else:
        st.error(text)

def _fmt_when(value) -> str:
    if not value:
        return "Never"
    if isinstance(value, str):
        return value
    return value.strftime("%Y-%m-%d %H:%M")

def _bar(labels: List[str], values: List[float], colors=None, title: str = ""):
    fig = plt.figure()
    plt.bar(labels, values, color=colors or COLORS["primary"])
    plt.title(title)
    plt.xticks(rotation=0)
    return fig

def _pie(labels: List[str], values: List[int], colors: List[str]):
    fig = plt.figure()
    if sum(values) == 0:
        plt.text(0.5, 0.5, "No data yet", ha="center", va="center")
        plt.axis("off")
    else:
        plt.pie(values, labels=labels, colors=colors, autopct="%1.0f%%")
    return fig

def _patient_options(patients: List[Dict]) -> Dict[str, Optional[int]]:
    options = {"— Not linked to a patient —": None}
    for p in patients:
        options[f"{p['name']} (#{p['id']})"] = p["id"]
    return options

def _assessment_table(rows: List[Dict]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "date": _fmt_when(a["created_at"]),
                "patient_id": a.get("patient_id"),
                "risk_score": a["risk_score"],
                "risk_level": a["risk_level"],
                "age": (a.get("data") or {}).get("age"),
                "bp": f"{(a.get('data') or {}).get('systolic_bp', 0):.0f}/{(a.get('data') or {}).get('diastolic_bp', 0):.0f}",
            }
            for a in rows
        ],
        columns=["date", "patient_id", "risk_score", "risk_level", "age", "bp"],
    )

def _render_result(result: Dict) -> None:
    _show_level(
        result["risk_level"],
        f"Risk score: {result['risk_score']}% — {_level_label(result['risk_level'])} risk",
    )

    bmi = result.get("bmi") or 0
    if bmi > 0:
        data = result.get("data") or {}
        st.write(f"**BMI:** {bmi:.1f} ({bmi_category(bmi)}) — Height {data.get('height_cm')} cm, Weight {data.get('weight_kg')} kg")

    statuses = vital_statuses(result.get("data") or {})
    if statuses:
        st.write("### Vital signs summary")
        cols = st.columns(min(len(statuses), 3))
        for i, v in enumerate(statuses):
            with cols[i % len(cols)]:
                st.metric(v["name"], f"{v['value']:g} {v['unit']}")
                if v["severity"] == "alert":
                    st.error(v["status"])
                elif v["severity"] == "caution":
                    st.warning(v["status"])
                else:
                    st.success(v["status"])

    st.write("### Recommendations")
    for rec in result.get("recommendations", []):
        st.write("•", rec)

# -------------------------
# 1) Dashboard
# -------------------------
with tabs[0]:
    st.subheader("Dashboard")

    now = datetime.now()
    patients = fetch_patients()
    assessments = fetch_assessments()
    appts = fetch_appointments()
    stats = dashboard_stats(patients, assessments, appts, now)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Patients", stats["total_patients"])
    c2.metric("Assessments", stats["total_assessments"])
    c3.metric("High Risk Cases", stats["high_risk_patients"])
    c4.metric("Upcoming Appointments", stats["upcoming_appointments"])

    col_a, col_b = st.columns(2)
    with col_a:
        st.write("### Risk distribution (patients)")
        rd = risk_distribution(patients)
        st.pyplot(_pie(list(rd["label"]), list(rd["count"]), [COLORS[l] for l in rd["level"]]))
    with col_b:
        st.write("### Recent assessments")
        recent = list(reversed(assessments))[:APP["recent_limit"]]
        if recent:
            st.dataframe(_assessment_table(recent), use_container_width=True)
        else:
            st.info("No assessments yet.")

# -------------------------
# 2) Patients
# -------------------------
with tabs[1]:
    st.subheader("Patient management")

    with st.expander("Add patient", expanded=False):
        p_name = st.text_input("Full name", key="p_name")
        p_age = st.number_input("Age", min_value=18, max_value=100, value=45, key="p_age")
        p_email = st.text_input("Email", key="p_email")
        p_phone = st.text_input("Phone (optional)", key="p_phone")
        col_hw1, col_hw2 = st.columns(2)
        with col_hw1:
            p_height = st.number_input("Height (cm) (optional)", min_value=0.0, max_value=250.0, value=0.0, step=0.1, key="p_height")
        with col_hw2:
            p_weight = st.number_input("Weight (kg) (optional)", min_value=0.0, max_value=300.0, value=0.0, step=0.1, key="p_weight")
        p_history = st.text_area("Medical history (optional)", key="p_history")
        p_meds = st.text_input("Current medications (comma-separated, optional)", key="p_meds")

        if st.button("Save patient"):
            if not p_name.strip():
                st.error("Enter the patient's full name.")
                st.stop()
            if p_email.strip() and "@" not in p_email:
                st.error("Enter a valid email address.")
                st.stop()

            bmi = calculate_bmi(p_height, p_weight)
            add_patient({
                "name": p_name.strip(),
                "age": int(p_age),
                "email": p_email.strip(),
                "phone": p_phone.strip(),
                "risk_level": "low",
                "medical_history": p_history.strip(),
                "medications": [m.strip() for m in p_meds.split(",") if m.strip()],
                "height_cm": float(p_height) if p_height else None,
                "weight_kg": float(p_weight) if p_weight else None,
                "bmi": bmi or None,
            })
            st.success("Patient saved ✅")

    col_s, col_f = st.columns([3, 1])
    with col_s:
        search = st.text_input("Search patients by name or email")
    with col_f:
        risk_filter = st.selectbox("Risk level", ["all"] + RISK_LEVELS, format_func=lambda x: "All Risk Levels" if x == "all" else f"{_level_label(x)} Risk")

    patients = fetch_patients()
    shown = filter_patients(patients, search, risk_filter)

    if not shown:
        st.info("No patients found. Add a patient to get started.")
    else:
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "id": p["id"],
                        "name": p["name"],
                        "age": p.get("age"),
                        "email": p.get("email") or "",
                        "risk": _level_label(p.get("risk_level")),
                        "last_assessment": _fmt_when(p.get("last_assessment")),
                    }
                    for p in shown
                ]
            ),
            use_container_width=True,
        )
        counts = risk_distribution(shown)
        k1, k2, k3 = st.columns(3)
        k1.metric("Low Risk", int(counts.loc[counts["level"] == "low", "count"].iloc[0]))
        k2.metric("Moderate Risk", int(counts.loc[counts["level"] == "moderate", "count"].iloc[0]))
        k3.metric("High Risk", int(counts.loc[counts["level"] == "high", "count"].iloc[0]))

        st.write("### Patient details")
        selected = st.selectbox("View patient", [p["id"] for p in shown], format_func=lambda i: next(p["name"] for p in shown if p["id"] == i))
        patient = get_patient(selected)
        if patient is None:
            st.error("Patient not found.")
        else:
            d1, d2, d3 = st.columns(3)
            with d1:
                st.write(f"**{patient['name']}**, {patient.get('age')} years")
                st.write(f"Email: {patient.get('email') or '—'}")
                if patient.get("phone"):
                    st.write(f"Phone: {patient['phone']}")
            with d2:
                if patient.get("bmi"):
                    st.metric("BMI", f"{patient['bmi']:.1f}", bmi_category(patient["bmi"]))
                else:
                    st.write("BMI: not recorded")
            with d3:
                st.write(f"Risk level: **{_level_label(patient.get('risk_level'))}**")
                st.write(f"Last assessment: {_fmt_when(patient.get('last_assessment'))}")
                if patient.get("next_appointment"):
                    st.write(f"Next appointment: {patient['next_appointment']}")

            history = fetch_assessments(patient_id=patient["id"])
            if history:
                st.write("#### Vital signs trend")
                trend = patient_vitals_trend(history)
                fig = plt.figure()
                plt.plot(trend["date"], trend["systolic_bp"], label="Systolic BP (mmHg)", color=COLORS["primary"])
                plt.plot(trend["date"], trend["total_cholesterol"], label="Cholesterol (mg/dL)", color=COLORS["high"])
                plt.legend()
                plt.xticks(rotation=30)
                st.pyplot(fig)

                st.write("#### Assessment history")
                st.dataframe(_assessment_table(list(reversed(history))[:APP["recent_limit"]]), use_container_width=True)
            else:
                st.info("No assessments recorded for this patient yet.")

            st.write("#### Medical history")
            st.write(patient.get("medical_history") or "No medical history recorded.")
            st.write("#### Current medications")
            if patient.get("medications"):
                for med in patient["medications"]:
                    st.write("•", med)
            else:
                st.write("No medications recorded.")

# -------------------------
# 3) Assessments
# -------------------------
with tabs[2]:
    st.subheader("Cardiovascular risk assessment")

    options = _patient_options(fetch_patients())
    linked = st.selectbox("Patient", list(options.keys()))

    colA, colB = st.columns(2)
    with colA:
        age = st.number_input("Age (years)", min_value=18, max_value=100, value=45)
        systolic = st.number_input("Systolic BP (mmHg)", min_value=80, max_value=250, value=120)
        diastolic = st.number_input("Diastolic BP (mmHg)", min_value=50, max_value=150, value=80)
        total_chol = st.number_input("Total Cholesterol (mg/dL)", min_value=100, max_value=500, value=190)
        hdl = st.number_input("HDL Cholesterol (mg/dL)", min_value=20, max_value=100, value=50)
    with colB:
        height_cm = st.number_input("Height (cm)", min_value=100.0, max_value=250.0, value=170.0, step=0.1)
        weight_kg = st.number_input("Weight (kg)", min_value=30.0, max_value=300.0, value=70.0, step=0.1)
        bmi_preview = calculate_bmi(height_cm, weight_kg)
        st.caption(f"BMI: {bmi_preview:.1f} ({bmi_category(bmi_preview)}) • Normal 18.5–24.9 • Overweight 25–29.9 • Obese ≥ 30")
        exercise = st.selectbox("Exercise Level", EXERCISE_LEVELS, format_func=lambda x: EXERCISE_LABELS[x])
        sex = st.selectbox("Sex (optional, used for waist threshold)", ["Not specified", "Male", "Female"])

    st.markdown("### Additional vitals (optional, leave 0 if unknown)")
    v1, v2, v3 = st.columns(3)
    with v1:
        resting_hr = st.number_input("Resting heart rate (bpm)", min_value=0, max_value=120, value=0, help="Normal: 60-100 bpm")
        glucose = st.number_input("Fasting blood glucose (mg/dL)", min_value=0, max_value=300, value=0, help="Normal: <100 mg/dL")
    with v2:
        waist = st.number_input("Waist circumference (cm)", min_value=0.0, max_value=200.0, value=0.0, step=0.1, help="Healthy: <102 cm (men), <88 cm (women)")
        triglycerides = st.number_input("Triglycerides (mg/dL)", min_value=0, max_value=500, value=0, help="Normal: <150 mg/dL")
    with v3:
        spo2 = st.number_input("Oxygen saturation SpO2 (%)", min_value=0, max_value=100, value=0, help="Normal: 95-100%")
        ldl = st.number_input("LDL cholesterol (mg/dL)", min_value=0, max_value=300, value=0, help="Optimal: <100 mg/dL")

    st.markdown("### Risk factors")
    f1, f2, f3 = st.columns(3)
    with f1:
        smoking = st.checkbox("Current smoker")
    with f2:
        diabetes = st.checkbox("Type 2 Diabetes")
    with f3:
        family_history = st.checkbox("Family history of cardiovascular disease")

    if st.button("Calculate risk"):
        # Optional vitals: 0 means "not provided"; otherwise enforce the form's lower bounds
        lower_bounds = [
            ("Resting heart rate", resting_hr, 40),
            ("Blood glucose", glucose, 70),
            ("Waist circumference", waist, 50),
            ("Triglycerides", triglycerides, 50),
            ("SpO2", spo2, 85),
            ("LDL cholesterol", ldl, 50),
        ]
        for label, value, low in lower_bounds:
            if 0 < value < low:
                st.error(f"{label} must be at least {low} (or 0 if unknown).")
                st.stop()

        result = assess(
            {
                "age": age,
                "systolic_bp": systolic,
                "diastolic_bp": diastolic,
                "total_cholesterol": total_chol,
                "hdl_cholesterol": hdl,
                "ldl_cholesterol": ldl,
                "triglycerides": triglycerides,
                "height_cm": height_cm,
                "weight_kg": weight_kg,
                "resting_heart_rate": resting_hr,
                "blood_glucose": glucose,
                "waist_circumference": waist,
                "oxygen_saturation": spo2,
                "smoking": smoking,
                "diabetes": diabetes,
                "family_history": family_history,
                "exercise": exercise,
                "sex": None if sex == "Not specified" else sex.lower(),
            },
            patient_id=options[linked],
        )
        result["id"] = add_assessment(result)
        st.session_state["last_result"] = result
        st.session_state.pop("last_explanation", None)

    result = st.session_state.get("last_result")
    if result:
        st.write("---")
        _render_result(result)

        if st.button("Explain in plain language"):
            st.session_state["last_explanation"] = explain_assessment(result)
        for tip in st.session_state.get("last_explanation", []):
            st.write("💡", tip)

    st.write("### Recent assessments")
    history = list(reversed(fetch_assessments()))[:APP["recent_limit"]]
    if not history:
        st.info("No assessments yet.")
    else:
        for a in history:
            with st.expander(f"{_fmt_when(a['created_at'])} — {a['risk_score']}% ({a['risk_level']})"):
                _render_result(a)

    with st.expander("Quick check (five-factor screen)", expanded=False):
        q1, q2, q3 = st.columns(3)
        with q1:
            q_age = st.number_input("Age", min_value=0, max_value=120, value=0, key="q_age")
        with q2:
            q_bp = st.number_input("Blood pressure (systolic)", min_value=0, max_value=300, value=0, key="q_bp")
        with q3:
            q_chol = st.number_input("Cholesterol level (mg/dL)", min_value=0, max_value=600, value=0, key="q_chol")
        q_smoke = st.radio("Do you smoke?", ["No", "Yes"], horizontal=True, key="q_smoke")
        q_diab = st.radio("Do you have diabetes?", ["No", "Yes"], horizontal=True, key="q_diab")
        if st.button("Calculate my risk"):
            level, message = quick_check(q_age, q_bp, q_chol, q_smoke == "Yes", q_diab == "Yes")
            _show_level(level, message)

# -------------------------
# 4) Analytics
# -------------------------
with tabs[3]:
    st.subheader("Analytics & insights")

    patients = fetch_patients()
    assessments = fetch_assessments()

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Total Patients", len(patients))
    m2.metric("Total Assessments", len(assessments))
    m3.metric("High Risk Cases", sum(1 for p in patients if p.get("risk_level") == "high"))
    m4.metric("Average Risk Score", f"{average_risk_score(assessments)}%")

    g1, g2 = st.columns(2)
    with g1:
        st.write("### Patient age distribution")
        ad = age_distribution(patients)
        st.pyplot(_bar(list(ad["range"]), list(ad["count"])))
    with g2:
        st.write("### Risk level distribution")
        rd = risk_distribution(patients)
        st.pyplot(_pie(list(rd["label"]), list(rd["count"]), [COLORS[l] for l in rd["level"]]))

    g3, g4 = st.columns(2)
    bd = bmi_distribution(assessments)
    with g3:
        st.write("### BMI distribution")
        st.pyplot(_bar(list(bd["category"]), list(bd["count"]), colors=[COLORS[c] for c in bd["category"]]))
    with g4:
        st.write("### BMI categories")
        st.dataframe(bd, use_container_width=True)
        st.caption("BMI guidelines: Normal (18.5-24.9), Overweight (25-29.9), Obese (≥30)")

    st.write("### Assessment trends (6 months)")
    mt = monthly_trends(assessments, datetime.now())
    fig = plt.figure()
    plt.plot(mt["month"], mt["assessments"], marker="o", label="Total Assessments", color=COLORS["primary"])
    plt.plot(mt["month"], mt["high_risk"], marker="o", label="High Risk Cases", color=COLORS["high"])
    plt.legend()
    st.pyplot(fig)

    st.write("### Risk score by age group")
    ra = risk_by_age(assessments)
    fig = plt.figure()
    x = range(len(ra))
    plt.bar([i - 0.25 for i in x], ra["avg_risk"], width=0.25, label="Average Risk", color=COLORS["primary"])
    plt.bar(list(x), ra["low"], width=0.25, label="Lowest", color=COLORS["low"])
    plt.bar([i + 0.25 for i in x], ra["high"], width=0.25, label="Highest", color=COLORS["high"])
    plt.xticks(list(x), list(ra["age"]))
    plt.legend()
    st.pyplot(fig)

# -------------------------
# 5) Education
# -------------------------
with tabs[4]:
    st.subheader("Health education center")

    category = st.radio("Category", CATEGORIES, horizontal=True)
    for module in modules_in_category(category):
        with st.expander(f"{module['title']} — {module['category']} • {module['duration']}"):
            st.write(module["content"])
            st.write("**Key points**")
            for point in module["points"]:
                st.write("•", point)

# -------------------------
# 6) Appointments
# -------------------------
with tabs[5]:
    st.subheader("Appointment management")

    now = datetime.now()
    with st.expander("New appointment", expanded=False):
        slot = default_slot(now)
        a_patients = fetch_patients()
        a_options = _patient_options(a_patients)
        a_linked = st.selectbox("Existing patient (optional)", list(a_options.keys()), key="a_linked")
        a_default = linked_patient_name(a_patients, a_options[a_linked])
        # keyed per selection so the prefilled name follows the chosen patient
        a_name = st.text_input("Patient name", value=a_default, key=f"a_name_{a_options[a_linked]}")
        a_date = st.date_input("Date", value=slot.date(), min_value=date.today(), key="a_date")
        a_time = st.time_input("Time", value=slot.time(), key="a_time")
        a_type = st.selectbox("Appointment type", APPOINTMENTS["types"], format_func=lambda t: TYPE_LABELS[t], key="a_type")
        a_notes = st.text_area("Notes (optional)", key="a_notes")

        if st.button("Schedule appointment"):
            payload = {
                "patient_id": a_options[a_linked],
                "patient_name": a_name.strip(),
                "date": a_date.isoformat(),
                "time": a_time.strftime("%H:%M"),
                "type": a_type,
                "status": "scheduled",
                "notes": a_notes.strip(),
            }
            errors = validate_appointment(payload, now)
            if errors:
                for e in errors:
                    st.error(e)
            else:
                add_appointment(payload)
                st.success("Appointment scheduled ✅")

    appts = fetch_appointments()

    today_list = todays_appointments(appts, now)
    st.write(f"### Today's appointments ({len(today_list)})")
    if not today_list:
        st.info("No more appointments today.")
    for a in today_list:
        st.write(f"**{a['time']}** — {a['patient_name']} ({TYPE_LABELS[a['type']]})")

    st.write("### Upcoming appointments")
    upcoming = upcoming_appointments(appts, now)
    if not upcoming:
        st.info("No upcoming appointments.")
    for a in upcoming:
        with st.expander(f"{a['date']} {a['time']} — {a['patient_name']} ({TYPE_LABELS[a['type']]})"):
            if a.get("notes"):
                st.write(a["notes"])
            new_status = st.selectbox(
                "Status",
                APPOINTMENTS["statuses"],
                index=APPOINTMENTS["statuses"].index(a["status"]),
                key=f"status_{a['id']}",
            )
            if st.button("Update status", key=f"update_{a['id']}"):
                update_appointment_status(a["id"], new_status)
                st.rerun()

    past = [a for a in appts if a not in upcoming]
    if past:
        st.write("### Past & closed appointments")
        st.dataframe(
            pd.DataFrame(past, columns=["date", "time", "patient_name", "type", "status", "notes"]),
            use_container_width=True,
        )
