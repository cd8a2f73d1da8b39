# moodmixer/sentiment.py
# Module: live mood estimator (deterministic heuristic, no model calls).
# Gives the mixing view a mood/intensity reading on every keystroke, before
# the generator has been asked for anything.

import re
from enum import Enum
from typing import List, NamedTuple

IDLE_INTENSITY = 0.1

MATCH_WEIGHT = 0.3
LATIN_NEGATION_SCALE = 0.8
IDEOGRAPH_NEGATED_NEGATIVE = 0.2
IDEOGRAPH_NEGATED_POSITIVE = -0.2

EXCLAMATION_BONUS = 0.2
MAGNITUDE_BONUS = 0.2
MAGNITUDE_THRESHOLD = 0.5

NEGATIVE_LEXICON = (
    "sad", "tired", "angry", "lost", "dark", "heavy", "stress", "pain",
    "anx", "lonely", "hurt", "upset", "depress", "exhaust", "worr", "afraid",
    "awful", "terrible", "frustrat", "miserable", "hopeless", "unhappy",
    "难过", "伤心", "累", "生气", "焦虑", "压力", "痛", "烦", "孤独", "害怕",
    "失望", "糟糕", "沮丧", "哭",
)
POSITIVE_LEXICON = (
    "happy", "bright", "joy", "excit", "light", "love", "good", "great",
    "calm", "peace", "grateful", "relax", "hope", "glad", "proud", "smile",
    "wonderful",
    "开心", "快乐", "高兴", "幸福", "喜欢", "爱", "好", "放松", "平静", "满足",
    "兴奋", "感谢",
)

LATIN_NEGATORS = frozenset({
    "not", "no", "never", "don't", "dont", "didn't", "didnt", "isn't", "isnt",
    "wasn't", "wasnt", "aren't", "arent", "can't", "cant", "cannot", "won't",
    "wont", "hardly", "without",
})
IDEOGRAPH_NEGATORS = frozenset("不没别未无非")

_CJK_RE = re.compile(r"[\u4e00-\u9fff]")
_TOKEN_SPLIT_RE = re.compile(r"[^\w']+")


class Script(Enum):
    LATIN = "latin"
    IDEOGRAPH = "ideograph"


class Estimate(NamedTuple):
    mood_value: float
    intensity: float


def _clamp(val, lo, hi):
    return max(lo, min(hi, val))


def classify_script(text: str) -> Script:
    return Script.IDEOGRAPH if _CJK_RE.search(text or "") else Script.LATIN


def _tokens(text: str) -> List[str]:
    return [t.strip("'") for t in _TOKEN_SPLIT_RE.split(text.lower()) if t.strip("'")]


def _token_weight(token: str) -> float:
    # negative first so "unhappy" / "hopeless" don't read as positive
    if any(w in token for w in NEGATIVE_LEXICON):
        return -MATCH_WEIGHT
    if any(w in token for w in POSITIVE_LEXICON):
        return MATCH_WEIGHT
    return 0.0


def _score_latin(text: str) -> float:
    score = 0.0
    tokens = _tokens(text)
    for i, token in enumerate(tokens):
        weight = _token_weight(token)
        if not weight:
            continue
        if i > 0 and tokens[i - 1] in LATIN_NEGATORS:
            weight = -weight * LATIN_NEGATION_SCALE
        score += weight
    return score


def _occurrences(text: str, word: str):
    idx = text.find(word)
    while idx != -1:
        yield idx
        idx = text.find(word, idx + 1)


def _score_ideograph(text: str) -> float:
    low = text.lower()
    score = 0.0
    for word in NEGATIVE_LEXICON:
        for idx in _occurrences(low, word):
            negated = idx > 0 and low[idx - 1] in IDEOGRAPH_NEGATORS
            score += IDEOGRAPH_NEGATED_NEGATIVE if negated else -MATCH_WEIGHT
    for word in POSITIVE_LEXICON:
        for idx in _occurrences(low, word):
            negated = idx > 0 and low[idx - 1] in IDEOGRAPH_NEGATORS
            score += IDEOGRAPH_NEGATED_POSITIVE if negated else MATCH_WEIGHT
    return score


def estimate(text: str) -> Estimate:
    """
    Score free text into (mood in [-1, 1], intensity in [0, 1]).

    Latin text is scored per token, ideograph text by substring scan; a
    negator right before a match flips it but with a smaller magnitude, so
    "not happy" reads milder than "sad".
    """
    if not text:
        return Estimate(0.0, IDLE_INTENSITY)

    if classify_script(text) is Script.IDEOGRAPH:
        raw = _score_ideograph(text)
    else:
        raw = _score_latin(text)

    intensity = min(1.0, len(text) / 100)
    if "!" in text or "！" in text:
        intensity += EXCLAMATION_BONUS
    if abs(raw) > MAGNITUDE_THRESHOLD:
        intensity += MAGNITUDE_BONUS
    return Estimate(_clamp(raw, -1.0, 1.0), _clamp(intensity, IDLE_INTENSITY, 1.0))


def mood_label(mood_value: float) -> str:
    if mood_value <= -0.2:
        return "negative"
    if mood_value >= 0.2:
        return "positive"
    return "neutral"
