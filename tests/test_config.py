from pathlib import Path

import pytest

from moodmixer.config import DEFAULT_FADE_IN_SEC, DEFAULT_FADE_OUT_SEC, load_settings
from moodmixer.models import Language

ENV_VARS = [
    "MOOD_LANGUAGE", "MOOD_HISTORY_FILE", "MOOD_FADE_OUT_SEC", "MOOD_FADE_IN_SEC",
    "MOOD_LOG_LEVEL", "MOOD_LOG_DIR", "LLM_RPM", "LLM_DAILY_LIMIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s.language is Language.EN
    assert s.history_file == Path("data/history.json")
    assert s.fade_out_sec == DEFAULT_FADE_OUT_SEC
    assert s.fade_in_sec == DEFAULT_FADE_IN_SEC
    assert s.llm_rpm == 10
    assert s.llm_daily_limit is None
    assert s.log_dir is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("MOOD_LANGUAGE", "zh")
    monkeypatch.setenv("MOOD_HISTORY_FILE", str(tmp_path / "h.json"))
    monkeypatch.setenv("MOOD_FADE_OUT_SEC", "0.25")
    monkeypatch.setenv("LLM_DAILY_LIMIT", "50")
    monkeypatch.setenv("MOOD_LOG_LEVEL", "debug")
    monkeypatch.setenv("MOOD_LOG_DIR", str(tmp_path / "logs"))

    s = load_settings()
    assert s.language is Language.ZH
    assert s.history_file == tmp_path / "h.json"
    assert s.fade_out_sec == 0.25
    assert s.llm_daily_limit == 50
    assert s.log_level == "DEBUG"
    assert s.log_dir == tmp_path / "logs"


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("MOOD_LANGUAGE", "fr")
    monkeypatch.setenv("MOOD_FADE_IN_SEC", "soon")
    monkeypatch.setenv("MOOD_FADE_OUT_SEC", "-1")
    monkeypatch.setenv("LLM_RPM", "lots")

    s = load_settings()
    assert s.language is Language.EN
    assert s.fade_in_sec == DEFAULT_FADE_IN_SEC
    assert s.fade_out_sec == DEFAULT_FADE_OUT_SEC
    assert s.llm_rpm == 10
