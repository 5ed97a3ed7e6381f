# llm.py
import json
import logging
from typing import List
from openai import OpenAI

from config import SETTINGS, get_setting

logger = logging.getLogger(__name__)


def _client():
    api_key = get_setting("GROQ_API_KEY")
    if not api_key:
        return None
    base_url = get_setting("GROQ_BASE_URL", SETTINGS["groq_base_url"])
    return OpenAI(api_key=api_key, base_url=base_url)


def _safe_fallback() -> List[str]:
    return [
        "Measure at the same times each day, seated, after 5 minutes of rest.",
        "Cut back on salty processed foods and add more vegetables and fruit.",
        "Aim for regular moderate activity, such as a brisk 30-minute walk most days.",
    ]


def generate_bp_tips(summary_text: str) -> List[str]:
    """Returns exactly 3 general lifestyle tips for the BP summary (no meds/dosing/diagnosis)."""
    client = _client()
    if client is None:
        return _safe_fallback()

    model  = get_setting("GROQ_MODEL", SETTINGS["groq_model"])
    prompt = (
        "Return exactly 3 safe, non-medical lifestyle tips for someone tracking their blood pressure. "
        "No medication advice. No diagnosis. Keep it practical. "
        "Respond ONLY as a JSON array of 3 strings.\n\n"
        f"Summary: {summary_text}"
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
        logger.warning("Unexpected tips payload, using fallback")
    except Exception:
        logger.warning("Tips request failed, using fallback", exc_info=True)

    return _safe_fallback()
