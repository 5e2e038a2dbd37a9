# llm.py
import json
import logging
import os
from typing import Dict, List
from openai import OpenAI

logger = logging.getLogger(__name__)

_GENERIC_TIP = "Discuss these results with your healthcare provider at your next visit."


def _client():
    api_key = os.getenv("GROQ_API_KEY", "")
    if not api_key:
        return None
    base_url = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
    return OpenAI(api_key=api_key, base_url=base_url)


def _safe_fallback(result: Dict) -> List[str]:
    tips = list(result.get("recommendations") or [])[:3]
    while len(tips) < 3:
        tips.append(_GENERIC_TIP)
    return tips


def _summary(result: Dict) -> str:
    data = result.get("data") or {}
    return (
        f"Risk score: {result.get('risk_score')} / 100 ({result.get('risk_level')}). "
        f"Age: {data.get('age')}, BP: {data.get('systolic_bp')}/{data.get('diastolic_bp')} mmHg, "
        f"Total cholesterol: {data.get('total_cholesterol')}, HDL: {data.get('hdl_cholesterol')}, "
        f"BMI: {result.get('bmi')}, Smoking: {data.get('smoking')}, Diabetes: {data.get('diabetes')}, "
        f"Exercise: {data.get('exercise')}. "
        f"Recommendations: {'; '.join(result.get('recommendations') or [])}"
    )


def explain_assessment(result: Dict) -> List[str]:
    """Returns exactly 3 plain-language tips about an assessment (no meds/dosing/diagnosis)."""
    client = _client()
    if client is None:
        return _safe_fallback(result)

    model  = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    prompt = (
        "Explain the cardiovascular screening result below to a patient as exactly 3 short, practical tips. "
        "No medication or dosing advice. No diagnosis. Encourage clinician follow-up where relevant. "
        "Respond ONLY as a JSON array of 3 strings.\n\n"
        f"Result: {_summary(result)}"
    )

    try:
        resp    = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.3,
        )
        content = (resp.choices[0].message.content or "").strip()
        data    = json.loads(content)
        if isinstance(data, list) and len(data) >= 3 and all(isinstance(x, str) for x in data):
            return data[:3]
        logger.warning("LLM reply was not a JSON array of 3 strings; using fallback tips")
    except Exception:
        logger.exception("LLM explanation failed; using fallback tips")

    return _safe_fallback(result)
