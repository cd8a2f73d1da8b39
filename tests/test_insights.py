import math

import pandas as pd

from conftest import BASE_TS, make_artifact
from moodmixer.insights import DAY_MS, WAVE_COLUMNS, dominant_mood, emotional_wave, recent


def _history():
    return [
        make_artifact(id="t1", created_at=BASE_TS, mood_value=0.8, intensity=0.4),
        make_artifact(id="t2", created_at=BASE_TS - 60_000, mood_value=0.2, intensity=0.6),
        make_artifact(id="y1", created_at=BASE_TS - DAY_MS, mood_value=-0.5, intensity=0.9),
        make_artifact(id="old", created_at=BASE_TS - 20 * DAY_MS, mood_value=-1.0, intensity=1.0),
    ]


def test_recent_drops_entries_outside_window():
    assert [a.id for a in recent(_history(), days=7, now=BASE_TS)] == ["t1", "t2", "y1"]


def test_dominant_mood():
    assert dominant_mood([]) == "neutral"
    assert dominant_mood(_history()[:2]) == "positive"
    assert dominant_mood(_history()[2:]) == "negative"


def test_emotional_wave_has_one_row_per_day():
    wave = emotional_wave(_history(), days=7, now=BASE_TS)
    assert list(wave.columns) == WAVE_COLUMNS
    assert len(wave) == 7
    assert wave["date"].is_monotonic_increasing
    assert wave["date"].iloc[-1] == pd.Timestamp(BASE_TS, unit="ms").normalize()

    today, yesterday = wave.iloc[-1], wave.iloc[-2]
    assert today["count"] == 2
    assert math.isclose(today["mood"], 0.5)
    assert math.isclose(today["intensity"], 0.5)
    assert yesterday["count"] == 1
    assert math.isclose(yesterday["mood"], -0.5)
    assert wave["count"].sum() == 3
    assert wave["mood"].isna().sum() == 5


def test_emotional_wave_empty_history():
    wave = emotional_wave([], days=7, now=BASE_TS)
    assert len(wave) == 7
    assert wave["count"].sum() == 0
    assert wave["mood"].isna().all()
