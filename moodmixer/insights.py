# moodmixer/insights.py
# "Insights & Trends": the 7-day emotional wave and the dominant mood of a
# stretch of history. Days are UTC calendar days.
from typing import List, Optional, Sequence

import pandas as pd

from moodmixer.models import Artifact, now_ms
from moodmixer.sentiment import mood_label

DAY_MS = 86_400_000
WAVE_COLUMNS = ["date", "mood", "intensity", "count"]


def recent(artifacts: Sequence[Artifact], days: int = 7, now: Optional[int] = None) -> List[Artifact]:
    now = now_ms() if now is None else now
    cutoff = now - days * DAY_MS
    return [a for a in artifacts if a.created_at >= cutoff]


def dominant_mood(artifacts: Sequence[Artifact]) -> str:
    if not artifacts:
        return "neutral"
    return mood_label(sum(a.mood_value for a in artifacts) / len(artifacts))


def emotional_wave(artifacts: Sequence[Artifact], days: int = 7, now: Optional[int] = None) -> pd.DataFrame:
    """
    One row per calendar day in the window, oldest first, with the mean mood
    and intensity of that day's artifacts. Empty days get NaN means, count 0.
    """
    now = now_ms() if now is None else now
    dates = pd.date_range(end=pd.Timestamp(now, unit="ms").normalize(), periods=days, freq="D")

    rows = [
        {"date": pd.Timestamp(a.created_at, unit="ms").normalize(),
         "mood": a.mood_value, "intensity": a.intensity}
        for a in recent(artifacts, days=days, now=now)
    ]
    if not rows:
        wave = pd.DataFrame({"date": dates, "mood": float("nan"), "intensity": float("nan"), "count": 0})
        return wave[WAVE_COLUMNS]

    frame = pd.DataFrame(rows)
    grouped = frame.groupby("date").agg(
        mood=("mood", "mean"),
        intensity=("intensity", "mean"),
        count=("mood", "size"),
    )
    wave = grouped.reindex(dates)
    wave["count"] = wave["count"].fillna(0).astype(int)
    wave.index.name = "date"
    return wave.reset_index()[WAVE_COLUMNS]
