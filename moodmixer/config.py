# moodmixer/config.py
# Environment-driven settings. Entry points call load_dotenv() first, then
# load_settings() reads os.environ.
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from moodmixer.models import Language

logger = logging.getLogger(__name__)

DEFAULT_FADE_OUT_SEC = 0.5
DEFAULT_FADE_IN_SEC = 0.15


@dataclass(frozen=True)
class Settings:
    language: Language = Language.EN
    history_file: Path = Path("data/history.json")
    fade_out_sec: float = DEFAULT_FADE_OUT_SEC
    fade_in_sec: float = DEFAULT_FADE_IN_SEC
    llm_rpm: int = 10
    llm_daily_limit: Optional[int] = None
    log_level: str = "INFO"
    log_dir: Optional[Path] = None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number), using %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r (negative), using %s", name, raw, default)
        return default
    return value


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %s", name, raw, default)
        return default


def load_settings() -> Settings:
    log_dir = os.getenv("MOOD_LOG_DIR", "").strip()
    return Settings(
        language=Language.parse(os.getenv("MOOD_LANGUAGE", "en"), default=Language.EN),
        history_file=Path(os.getenv("MOOD_HISTORY_FILE", "data/history.json")),
        fade_out_sec=_env_float("MOOD_FADE_OUT_SEC", DEFAULT_FADE_OUT_SEC),
        fade_in_sec=_env_float("MOOD_FADE_IN_SEC", DEFAULT_FADE_IN_SEC),
        llm_rpm=_env_int("LLM_RPM", 10),
        llm_daily_limit=_env_int("LLM_DAILY_LIMIT", None),
        log_level=os.getenv("MOOD_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(log_dir) if log_dir else None,
    )
