import asyncio

import pytest

from moodmixer.controller import MoodController
from moodmixer.models import Artifact, Ingredient, IngredientPart, Language
from moodmixer.scheduler import ManualScheduler
from moodmixer.state import MemoryHistoryStore

FADE_OUT = 0.5
FADE_IN = 0.15
BASE_TS = 1_700_000_000_000


def make_artifact(id="a1", language=Language.EN, name="Midnight Cacao", created_at=BASE_TS,
                  mood_value=-0.4, intensity=0.6, **extra):
    return Artifact(
        id=id,
        language=language,
        name=name,
        description="A slow, dark pour.",
        mood_value=mood_value,
        intensity=intensity,
        sensation="Heavy",
        ingredients=(
            Ingredient(IngredientPart.BASE, "Aged Rum", "For the long week"),
            Ingredient(IngredientPart.FINISH, "Smoke", "For what is left unsaid"),
        ),
        created_at=created_at,
        **extra,
    )


class FakeMixologist:
    """Generator/translator pair that records calls. Translation tags the name."""

    def __init__(self, scheduler=None):
        self.scheduler = scheduler
        self.generate_calls = []
        self.translate_calls = []
        self.translate_delay = 0.0
        self.fail_translations = False
        self.raise_translations = False
        self.tag = ""

    async def generate(self, text, language):
        self.generate_calls.append((text, language))
        n = len(self.generate_calls)
        return make_artifact(id=f"gen-{n}", language=language, name=text, created_at=BASE_TS + n)

    async def translate(self, artifact, target):
        self.translate_calls.append((artifact.id, target))
        tag = self.tag
        if self.translate_delay:
            await self.scheduler.sleep(self.translate_delay)
        if self.raise_translations:
            raise RuntimeError("translator exploded")
        if self.fail_translations:
            return artifact
        return artifact.with_changes(
            language=target,
            name=f"{artifact.name} [{target.value}]{tag}",
            sensation=f"{artifact.sensation} [{target.value}]",
        )


async def toggle_fully(controller, scheduler):
    """Run one toggle through fade-out and fade-in on virtual time."""
    task = asyncio.create_task(controller.toggle_language())
    await scheduler.advance(FADE_OUT)
    await scheduler.advance(FADE_IN)
    return await task


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def mixologist(scheduler):
    return FakeMixologist(scheduler)


@pytest.fixture
def store():
    return MemoryHistoryStore()


@pytest.fixture
def make_controller(mixologist, store, scheduler):
    def _make(**kwargs):
        kwargs.setdefault("store", store)
        return MoodController(
            mixologist.generate,
            mixologist.translate,
            scheduler=scheduler,
            fade_out=FADE_OUT,
            fade_in=FADE_IN,
            **kwargs,
        )
    return _make
