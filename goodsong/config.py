import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

SHEET_URL_DEFAULT = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vTL-7osicYdHztOycmQngj3FA4NU56okNHSg0q7lqlfBeb9oL73mPqxcRB8oKfe2QigzGsuk3xVPeNj"
    "/pub?output=csv"
)
GEMINI_MODEL_DEFAULT = "gemini-2.5-flash"


def _cfg(name: str, default=None):
    # Prefer env var locally; fall back to Streamlit secrets if present.
    v = os.getenv(name)
    if v:
        return v
    try:
        import streamlit as st
        return st.secrets[name]
    except Exception:
        return default


def _flag(value: Any) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    sheet_url: str = SHEET_URL_DEFAULT
    gemini_api_key: Optional[str] = None
    gemini_model: str = GEMINI_MODEL_DEFAULT
    http_timeout: float = 15.0
    feedback_timeout: float = 60.0
    demo_mode: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Collect settings from env, .env and Streamlit secrets.

    A missing Gemini key is not an error here: feedback falls back to
    canned content when no credential is configured.
    """
    return Settings(
        sheet_url=_cfg("SHEET_URL", SHEET_URL_DEFAULT),
        gemini_api_key=_cfg("GEMINI_API_KEY") or _cfg("API_KEY"),
        gemini_model=_cfg("GEMINI_MODEL", GEMINI_MODEL_DEFAULT),
        http_timeout=float(_cfg("HTTP_TIMEOUT", 15)),
        feedback_timeout=float(_cfg("FEEDBACK_TIMEOUT", 60)),
        demo_mode=_flag(_cfg("DEMO_MODE", "0")),
        log_level=str(_cfg("LOG_LEVEL", "INFO")).upper(),
    )
