# moodmixer/prompts.py
"""
Prompts for the mixologist calls (generate / translate / period report), plus
the per-language output instructions and fallback copy used when the model
is unreachable.
"""
from moodmixer.models import Language

LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.ZH: "Simplified Chinese",
}

MIXOLOGIST_SYSTEM = """You are an expert "Emotional Mixologist".
You turn a person's description of their day or feelings into a metaphorical cocktail
that embodies their current emotional state.

RULES:
- Reply with a single JSON object only; no prose, no markdown fences.
- Every ingredient symbolizes a part of their story; `part` is one of Base|Middle|Top|Finish.
- Colours: blue/purple/grey for sad or deep, red/orange for angry or intense,
  yellow/green for happy or calm. Use #RRGGBB hex.
- Be gentle. No diagnosis, no medical advice; the coping tip is one small, kind action.
"""

GENERATE_TEMPLATE = """
1. Analyze the sentiment (moodValue, -1.0 very negative .. 1.0 very positive) and intensity (0.0 calm .. 1.0 explosive).
2. Pick a one-word physical sensation (e.g. Tight, Floating, Heavy, Warm).
3. Build 3-5 ingredients across Base/Middle/Top/Finish.
4. Add a realRecipe (a real, drinkable non-alcoholic drink that mirrors the metaphor),
   a sonicVibe (genre, tempoBpm 40-160, scale such as "minor pentatonic", instruments, description)
   and a one-sentence copingTip.

Write every free-text field in {language_name}. Keys stay in English.

JSON keys: name, description, baseColor, secondaryColor, moodValue, intensity, sensation,
ingredients[{{part, name, reason}}], realRecipe{{name, ingredients[], steps[]}},
sonicVibe{{genre, tempoBpm, scale, instruments[], description}}, copingTip

User Input: "{text}"
"""

TRANSLATE_SYSTEM = """You translate structured content for a mood journaling app.
Reply with a single JSON object with exactly the keys you were given.
Translate values only; keep list lengths and order; keep the tone poetic and warm."""

TRANSLATE_TEMPLATE = """
Translate every string value of this JSON object into {language_name}.

{payload_json}
"""

REPORT_TEMPLATE = """
Here are the person's recent mood cocktails (newest first), one per line as
date | name | moodValue | intensity | sensation:

{entries}

Write, in {language_name}, a short reflective summary of their emotional trend and suggest
one drink for this period.

JSON keys: summaryText, dominantMood, suggestedDrinkName, suggestedDrinkDescription
"""

FALLBACK_COPY = {
    Language.EN: {
        "name": "Silent Fallback",
        "description": "A quiet mix for when the connection fades.",
        "sensation": "Static",
        "ingredient": "Neutral Spirit",
        "reason": "Connection lost",
        "summary": "Your recent mixes averaged out as {mood}. Take a moment to notice what shifted.",
        "drink": "Steady Tonic",
        "drink_description": "Sparkling water, a slice of lime, and a slow breath.",
    },
    Language.ZH: {
        "name": "静默特调",
        "description": "连接中断时的一杯安静调和。",
        "sensation": "静默",
        "ingredient": "中性基酒",
        "reason": "连接已断开",
        "summary": "你近期的情绪整体偏{mood}。花一点时间留意其中的变化。",
        "drink": "平稳汤力",
        "drink_description": "苏打水、一片青柠，再加一次缓慢的呼吸。",
    },
}
