# moodmixer/translations.py
# UI copy for both languages; presentation looks strings up by key.
from moodmixer.models import Language

STRINGS = {
    Language.EN: {
        # Mixing
        "readyStatus": "Ready to listen...",
        "silenceStatus": "Silence is an ingredient too...",
        "capturingStatus": "Capturing your essence...",
        "distillingStatus": "Distilling your emotions...",
        "translatingStatus": "Re-pouring in another language...",
        "mixButton": "Brew My Emotion",
        "sliderDeep": "Deep / Negative",
        "sliderBright": "Bright / Positive",
        "placeholder": "How are you feeling right now? Tell me about your day, your stress, or your joy...",
        # Result
        "signatureBlend": "Your Signature Blend",
        "intensity": "Intensity",
        "sensation": "Sensation",
        "realRecipe": "Make it for real",
        "sonicVibe": "Soundscape",
        "copingTip": "A small kindness",
        "noDrink": "No Drink Found",
        # History / insights
        "journeyTitle": "Your Journey",
        "emptyShelf": "The shelf is empty.",
        "emptyShelfSub": "Start a session to fill your menu.",
        "waveTitle": "Emotional Wave (Last 7 Days)",
        "notEnoughData": "Not enough data to map your wave.",
        "negative": "Negative",
        "neutral": "Neutral",
        "positive": "Positive",
        "dominantMood": "Dominant Mood",
        "recommendedTitle": "Recommended for this period",
        "reportNoData": "Not enough data this week to generate a report.",
        "moodLabel": "Mood",
    },
    Language.ZH: {
        "readyStatus": "准备倾听...",
        "silenceStatus": "沉默也是一种配方...",
        "capturingStatus": "正在捕捉你的情绪...",
        "distillingStatus": "正在提炼情感...",
        "translatingStatus": "正在用另一种语言重新调制...",
        "mixButton": "调配我的情绪",
        "sliderDeep": "低沉 / 负面",
        "sliderBright": "明亮 / 正面",
        "placeholder": "此刻感觉如何？告诉我你的一天，你的压力，或是你的快乐...",
        "signatureBlend": "你的专属特调",
        "intensity": "烈度",
        "sensation": "口感 / 体感",
        "realRecipe": "现实配方",
        "sonicVibe": "声景",
        "copingTip": "一个小小的善意",
        "noDrink": "未找到饮品",
        "journeyTitle": "情感旅程",
        "emptyShelf": "酒架空空如也。",
        "emptyShelfSub": "开始一次会话来丰富你的菜单。",
        "waveTitle": "情绪波动 (近7天)",
        "notEnoughData": "数据不足，无法绘制波动图。",
        "negative": "消极",
        "neutral": "平稳",
        "positive": "积极",
        "dominantMood": "主导情绪",
        "recommendedTitle": "本周期推荐饮品",
        "reportNoData": "本周数据不足，无法生成报告。",
        "moodLabel": "情绪值",
    },
}


def get_translation(language) -> dict:
    return STRINGS[Language.parse(language)]


def status_line(text: str, language, processing: bool = False) -> str:
    t = get_translation(language)
    if processing:
        return t["distillingStatus"]
    if not text:
        return t["silenceStatus"]
    return t["capturingStatus"]
