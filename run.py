# run.py
# Terminal session: type how you feel to see the live reading, /mix to brew it.
import asyncio

from dotenv import load_dotenv

from moodmixer.cache import cache_key
from moodmixer.clients.universal_client import configure_rate_limiter
from moodmixer.config import load_settings
from moodmixer.controller import MoodController
from moodmixer.logging_utils import init_logger
from moodmixer.mixologist import generate_artifact, summarize_period, translate_artifact
from moodmixer.scheduler import AsyncioScheduler
from moodmixer.sentiment import mood_label
from moodmixer.state import JsonHistoryStore
from moodmixer.translations import get_translation, status_line

load_dotenv()

HELP = "commands: /mix  /lang  /history  /open N  /report  /help  /quit  (anything else = live reading)"


def _gauge(value, lo, hi, width=21):
    pos = round((value - lo) / (hi - lo) * (width - 1))
    return "".join("●" if i == pos else "─" for i in range(width))


def render_estimate(text, reading, language):
    t = get_translation(language)
    return (f"{status_line(text, language)}\n"
            f"  {t['sliderDeep']} {_gauge(reading.mood_value, -1, 1)} {t['sliderBright']}"
            f"  ({reading.mood_value:+.2f}, {t['intensity']} {reading.intensity:.0%})")


def render_artifact(a):
    t = get_translation(a.language)
    lines = [
        f"{t['signatureBlend']}: 🍸 {a.name}  [{a.language.value}]",
        f"   {a.description}",
        f"   {t['moodLabel']} {a.mood_value:+.2f} · {t['intensity']} {a.intensity:.0%} · {t['sensation']}: {a.sensation}",
    ]
    for ing in a.ingredients:
        lines.append(f"   - {ing.part.value:<6} {ing.name}: {ing.reason}")
    if a.real_recipe:
        lines.append(f"   {t['realRecipe']}: {a.real_recipe.name} ({', '.join(a.real_recipe.ingredients)})")
    if a.sonic_vibe:
        v = a.sonic_vibe
        lines.append(f"   {t['sonicVibe']}: {v.genre}, {v.tempo_bpm} BPM, {v.scale}")
    if a.coping_tip:
        lines.append(f"   {t['copingTip']}: {a.coping_tip}")
    return "\n".join(lines)


def render_history(history, language):
    t = get_translation(language)
    if not history:
        return f"{t['emptyShelf']} {t['emptyShelfSub']}"
    return "\n".join(
        f"  {i}. {a.name} [{a.language.value}] {t[mood_label(a.mood_value)]} · {a.sensation}"
        for i, a in enumerate(history, 1)
    )


async def session(controller: MoodController):
    draft = ""
    print(HELP)
    while True:
        try:
            line = (await asyncio.to_thread(input, f"[{controller.active_language.value}] > ")).strip()
        except (EOFError, KeyboardInterrupt):
            break
        lang = controller.active_language
        t = get_translation(lang)

        if line in ("/quit", "/exit"):
            break
        if line == "/help":
            print(HELP)
        elif line == "/mix":
            if len(draft.strip()) < 3:
                print(t["placeholder"])
                continue
            print(status_line(draft, lang, processing=True))
            print(render_artifact(await controller.submit(draft)))
            draft = ""
        elif line == "/lang":
            shown = controller.current_artifact
            if shown is not None and cache_key(shown.id, lang.other()) not in controller.cache:
                print(get_translation(lang.other())["translatingStatus"])
            await controller.toggle_language()
            await controller.wait_for_translations()
            if controller.current_artifact is not None:
                print(render_artifact(controller.current_artifact))
            else:
                print(get_translation(controller.active_language)["readyStatus"])
        elif line == "/history":
            print(t["journeyTitle"])
            print(render_history(controller.history, lang))
        elif line.startswith("/open"):
            parts = line.split()
            idx = int(parts[1]) - 1 if len(parts) > 1 and parts[1].isdigit() else -1
            if not 0 <= idx < len(controller.history):
                print(t["noDrink"])
                continue
            print(render_artifact(controller.select_from_history(controller.history[idx])))
        elif line == "/report":
            report = await controller.generate_report()
            if report is None:
                print(t["reportNoData"])
            else:
                print(f"{t['dominantMood']}: {report.dominant_mood}\n  {report.summary_text}")
                print(f"{t['recommendedTitle']}: {report.suggested_drink_name}. {report.suggested_drink_description}")
        else:
            draft = line
            print(render_estimate(draft, controller.estimate(draft), lang))
            print(f"  /mix → {t['mixButton']}")

    await controller.wait_for_translations()


def main():
    settings = load_settings()
    init_logger(settings)
    configure_rate_limiter(rpm=settings.llm_rpm, daily_limit=settings.llm_daily_limit)
    controller = MoodController(
        generate_artifact,
        translate_artifact,
        JsonHistoryStore(settings.history_file),
        scheduler=AsyncioScheduler(),
        language=settings.language,
        fade_out=settings.fade_out_sec,
        fade_in=settings.fade_in_sec,
        reporter=summarize_period,
    )
    asyncio.run(session(controller))
    print(f"✅ History kept at: {settings.history_file}")


if __name__ == "__main__":
    main()
