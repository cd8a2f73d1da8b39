# moodmixer/mixologist.py
# The external collaborators the controller talks to: generate, translate,
# summarise. All three call the model through the blocking HTTP client in a
# worker thread and never raise: failures become fallbacks.
import asyncio
import datetime
import json
import logging
from dataclasses import replace
from typing import Optional, Sequence

from moodmixer.clients.universal_client import call_llm_json
from moodmixer.errors import ArtifactFormatError
from moodmixer.insights import dominant_mood, recent
from moodmixer.models import (
    Artifact, Ingredient, IngredientPart, Language, PeriodSummary, RealRecipe,
    new_artifact_id, now_ms,
)
from moodmixer.prompts import (
    FALLBACK_COPY, GENERATE_TEMPLATE, LANGUAGE_NAMES, MIXOLOGIST_SYSTEM,
    REPORT_TEMPLATE, TRANSLATE_SYSTEM, TRANSLATE_TEMPLATE,
)
from moodmixer.schemas import (
    GENERATED_ARTIFACT_SCHEMA, PERIOD_SUMMARY_SCHEMA, TRANSLATION_SCHEMA, ensure_valid,
)
from moodmixer.translations import get_translation

logger = logging.getLogger(__name__)

FALLBACK_INTENSITY = 0.1
MIN_REPORT_ENTRIES = 2


def fallback_artifact(language: Language) -> Artifact:
    copy = FALLBACK_COPY[language]
    return Artifact(
        id=new_artifact_id(),
        language=language,
        name=copy["name"],
        description=copy["description"],
        base_color="#334155",
        secondary_color="#94a3b8",
        mood_value=0.0,
        intensity=FALLBACK_INTENSITY,
        sensation=copy["sensation"],
        ingredients=(Ingredient(IngredientPart.BASE, copy["ingredient"], copy["reason"]),),
        created_at=now_ms(),
    )


async def generate_artifact(text: str, language: Language = Language.EN) -> Artifact:
    language = Language.parse(language)
    prompt = GENERATE_TEMPLATE.format(
        language_name=LANGUAGE_NAMES[language],
        text=(text or "").replace('"', "'"),
    )
    try:
        data = await asyncio.to_thread(call_llm_json, prompt, MIXOLOGIST_SYSTEM)
        ensure_valid(GENERATED_ARTIFACT_SCHEMA, data, name="generated artifact")
        stamped = dict(data, id=new_artifact_id(), createdAt=now_ms(), language=language.value)
        artifact = Artifact.from_dict(stamped, default_language=language)
    except Exception as e:
        # contract: the generator never raises, it pours the fallback instead
        logger.warning("Generation failed, serving fallback artifact: %s", e)
        return fallback_artifact(language)
    logger.info("Generated artifact %s (%s) mood=%.2f", artifact.id, language.value, artifact.mood_value)
    return artifact


def _translatable_payload(artifact: Artifact) -> dict:
    payload = {
        "name": artifact.name,
        "description": artifact.description,
        "sensation": artifact.sensation,
        "ingredients": [{"name": i.name, "reason": i.reason} for i in artifact.ingredients],
    }
    if artifact.real_recipe is not None:
        payload["realRecipe"] = artifact.real_recipe.to_dict()
    if artifact.sonic_vibe is not None and artifact.sonic_vibe.description:
        payload["sonicVibeDescription"] = artifact.sonic_vibe.description
    if artifact.coping_tip:
        payload["copingTip"] = artifact.coping_tip
    return payload


def _merge_translation(artifact: Artifact, data: dict, target: Language) -> Artifact:
    translated = data["ingredients"]
    if len(translated) != len(artifact.ingredients):
        raise ArtifactFormatError(
            f"translation returned {len(translated)} ingredients, expected {len(artifact.ingredients)}"
        )
    ingredients = tuple(
        Ingredient(orig.part, t.get("name") or orig.name, t.get("reason", orig.reason))
        for orig, t in zip(artifact.ingredients, translated)
    )

    real_recipe = artifact.real_recipe
    if real_recipe is not None and data.get("realRecipe"):
        real_recipe = RealRecipe.from_dict(data["realRecipe"])

    sonic_vibe = artifact.sonic_vibe
    if sonic_vibe is not None and data.get("sonicVibeDescription"):
        sonic_vibe = replace(sonic_vibe, description=data["sonicVibeDescription"])

    coping_tip = artifact.coping_tip
    if coping_tip and data.get("copingTip"):
        coping_tip = data["copingTip"]

    return artifact.with_changes(
        language=target,
        name=data["name"],
        description=data["description"],
        sensation=data["sensation"],
        ingredients=ingredients,
        real_recipe=real_recipe,
        sonic_vibe=sonic_vibe,
        coping_tip=coping_tip,
    )


async def translate_artifact(artifact: Artifact, target: Language) -> Artifact:
    """
    Translate the free-text fields of `artifact` into `target`.

    id, createdAt, numbers, colours and ingredient parts are carried over
    untouched. On any failure the original artifact comes back unchanged,
    still tagged with its own language.
    """
    target = Language.parse(target)
    if artifact.language is target:
        return artifact

    prompt = TRANSLATE_TEMPLATE.format(
        language_name=LANGUAGE_NAMES[target],
        payload_json=json.dumps(_translatable_payload(artifact), ensure_ascii=False, indent=2),
    )
    try:
        data = await asyncio.to_thread(call_llm_json, prompt, TRANSLATE_SYSTEM, 0.2)
        ensure_valid(TRANSLATION_SCHEMA, data, name="translation")
        translated = _merge_translation(artifact, data, target)
    except Exception as e:
        logger.warning("Translation of %s to %s failed, keeping original: %s",
                       artifact.id, target.value, e)
        return artifact
    logger.info("Translated artifact %s to %s", artifact.id, target.value)
    return translated


def fallback_summary(artifacts: Sequence[Artifact], language: Language) -> PeriodSummary:
    copy = FALLBACK_COPY[language]
    label = get_translation(language)[dominant_mood(artifacts)]
    return PeriodSummary(
        summary_text=copy["summary"].format(mood=label.lower()),
        dominant_mood=label,
        suggested_drink_name=copy["drink"],
        suggested_drink_description=copy["drink_description"],
        language=language,
        artifact_count=len(artifacts),
    )


async def summarize_period(artifacts: Sequence[Artifact], language: Language = Language.EN,
                           days: int = 7, now: Optional[int] = None) -> Optional[PeriodSummary]:
    language = Language.parse(language)
    window = recent(artifacts, days=days, now=now)
    if len(window) < MIN_REPORT_ENTRIES:
        return None

    lines = []
    for a in window:
        day = datetime.datetime.fromtimestamp(a.created_at / 1000, tz=datetime.timezone.utc).date().isoformat()
        lines.append(f"{day} | {a.name} | {a.mood_value:.2f} | {a.intensity:.2f} | {a.sensation}")
    prompt = REPORT_TEMPLATE.format(entries="\n".join(lines), language_name=LANGUAGE_NAMES[language])
    try:
        data = await asyncio.to_thread(call_llm_json, prompt, MIXOLOGIST_SYSTEM)
        ensure_valid(PERIOD_SUMMARY_SCHEMA, data, name="period summary")
    except Exception as e:
        logger.warning("Period report failed, using local summary: %s", e)
        return fallback_summary(window, language)
    return PeriodSummary(
        summary_text=data["summaryText"],
        dominant_mood=data["dominantMood"],
        suggested_drink_name=data["suggestedDrinkName"],
        suggested_drink_description=data["suggestedDrinkDescription"],
        language=language,
        artifact_count=len(window),
    )
