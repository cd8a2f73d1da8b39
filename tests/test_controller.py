import asyncio

import pytest

from conftest import FADE_IN, FADE_OUT, make_artifact, toggle_fully
from moodmixer.cache import cache_key
from moodmixer.controller import TransitionPhase
from moodmixer.models import Language
from moodmixer.state import MemoryHistoryStore


def test_submit_puts_artifact_on_screen_cache_and_history(make_controller, store, mixologist):
    ctrl = make_controller()

    async def scenario():
        return await ctrl.submit("rough day")

    art = asyncio.run(scenario())
    assert ctrl.current_artifact == art
    assert ctrl.history[0] == art
    assert ctrl.cache.get(cache_key(art.id, Language.EN)) == art
    assert mixologist.generate_calls == [("rough day", Language.EN)]
    assert store.saves == 1
    assert store.payload[0]["id"] == art.id


def test_submit_prepends_newest_first(make_controller):
    ctrl = make_controller()

    async def scenario():
        await ctrl.submit("one")
        await ctrl.submit("two")

    asyncio.run(scenario())
    assert [a.name for a in ctrl.history] == ["two", "one"]


def test_history_is_loaded_from_store_at_startup(make_controller):
    older = make_artifact(id="old-1")
    ctrl = make_controller(store=MemoryHistoryStore([older]))
    assert ctrl.history == (older,)
    assert ctrl.current_artifact is None


def test_failing_store_starts_empty(make_controller):
    class BrokenStore(MemoryHistoryStore):
        def load(self):
            raise OSError("disk gone")

        def save(self, artifacts):
            raise OSError("disk gone")

    ctrl = make_controller(store=BrokenStore())
    assert ctrl.history == ()
    asyncio.run(ctrl.submit("still works"))
    assert len(ctrl.history) == 1


def test_toggle_without_artifact_only_flips_language(make_controller, scheduler, mixologist):
    ctrl = make_controller()
    accepted = asyncio.run(toggle_fully(ctrl, scheduler))
    assert accepted is True
    assert ctrl.active_language is Language.ZH
    assert mixologist.translate_calls == []
    assert ctrl.phase is TransitionPhase.IDLE
    assert not ctrl.transitioning


def test_toggle_cache_miss_translates_and_updates_everything(make_controller, scheduler, mixologist, store):
    ctrl = make_controller()

    async def scenario():
        first = await ctrl.submit("first")
        shown = await ctrl.submit("second")
        await toggle_fully(ctrl, scheduler)
        await ctrl.wait_for_translations()
        return first, shown

    first, shown = asyncio.run(scenario())
    translated = ctrl.current_artifact
    assert mixologist.translate_calls == [(shown.id, Language.ZH)]
    assert translated.language is Language.ZH
    assert translated.id == shown.id
    assert translated.created_at == shown.created_at
    assert translated.name == "second [zh]"
    assert ctrl.cache.get(cache_key(shown.id, Language.ZH)) == translated
    # replaced in place, order untouched
    assert [a.id for a in ctrl.history] == [shown.id, first.id]
    assert ctrl.history[0] == translated
    assert store.payload[0]["language"] == "zh"
    assert not ctrl.translating


def test_round_trip_calls_translator_once(make_controller, scheduler, mixologist):
    ctrl = make_controller()

    async def scenario():
        original = await ctrl.submit("steady")
        await toggle_fully(ctrl, scheduler)   # en -> zh, miss
        await ctrl.wait_for_translations()
        await toggle_fully(ctrl, scheduler)   # zh -> en, hit
        back = ctrl.current_artifact
        await toggle_fully(ctrl, scheduler)   # en -> zh, hit
        return original, back

    original, back = asyncio.run(scenario())
    assert len(mixologist.translate_calls) == 1
    assert back == original
    assert ctrl.current_artifact.language is Language.ZH
    assert ctrl.phase is TransitionPhase.IDLE


def test_phases_follow_fade_sequence(make_controller, scheduler):
    ctrl = make_controller()
    seen = []
    ctrl.subscribe(lambda c: seen.append(c.phase))

    async def scenario():
        await ctrl.submit("hello")
        task = asyncio.create_task(ctrl.toggle_language())
        await scheduler.settle()
        assert ctrl.transitioning
        assert ctrl.phase is TransitionPhase.FADING_OUT
        assert ctrl.active_language is Language.EN
        await scheduler.advance(FADE_OUT)
        assert ctrl.active_language is Language.ZH
        assert ctrl.transitioning
        await scheduler.advance(FADE_IN)
        assert await task
        assert not ctrl.transitioning

    asyncio.run(scenario())
    assert TransitionPhase.FADING_OUT in seen
    assert TransitionPhase.FETCHING in seen
    assert seen.index(TransitionPhase.FETCHING) < seen.index(TransitionPhase.FADING_IN)
    assert seen[-1] is TransitionPhase.IDLE


def test_toggle_during_transition_is_dropped(make_controller, scheduler, mixologist):
    ctrl = make_controller()

    async def scenario():
        await ctrl.submit("hello")
        first = asyncio.create_task(ctrl.toggle_language())
        await scheduler.settle()
        second = await ctrl.toggle_language()
        await scheduler.advance(FADE_OUT)
        third = await ctrl.toggle_language()
        await scheduler.advance(FADE_IN)
        return await first, second, third

    first, second, third = asyncio.run(scenario())
    assert (first, second, third) == (True, False, False)
    assert ctrl.active_language is Language.ZH
    assert ctrl.epoch == 1
    assert len(mixologist.translate_calls) == 1


def test_failed_translation_keeps_previous_content(make_controller, scheduler, mixologist, store):
    mixologist.fail_translations = True
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        saves = store.saves
        await toggle_fully(ctrl, scheduler)
        await ctrl.wait_for_translations()
        return art, saves

    art, saves = asyncio.run(scenario())
    assert ctrl.active_language is Language.ZH
    assert ctrl.current_artifact == art
    assert ctrl.history == (art,)
    assert cache_key(art.id, Language.ZH) not in ctrl.cache
    assert store.saves == saves
    assert not ctrl.translating
    assert not ctrl.transitioning


def test_failed_translation_is_retried_on_next_visit(make_controller, scheduler, mixologist):
    mixologist.fail_translations = True
    ctrl = make_controller()

    async def scenario():
        await ctrl.submit("hello")
        await toggle_fully(ctrl, scheduler)   # en -> zh, fails
        await ctrl.wait_for_translations()
        mixologist.fail_translations = False
        await toggle_fully(ctrl, scheduler)   # zh -> en, hit
        await toggle_fully(ctrl, scheduler)   # en -> zh, retried
        await ctrl.wait_for_translations()

    asyncio.run(scenario())
    assert len(mixologist.translate_calls) == 2
    assert ctrl.current_artifact.language is Language.ZH


def test_raising_translator_is_treated_as_failure(make_controller, scheduler, mixologist):
    mixologist.raise_translations = True
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        await toggle_fully(ctrl, scheduler)
        await ctrl.wait_for_translations()
        return art

    art = asyncio.run(scenario())
    assert ctrl.current_artifact == art
    assert not ctrl.translating


def test_slow_translation_outlives_transition(make_controller, scheduler, mixologist):
    mixologist.translate_delay = 2.0
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        await toggle_fully(ctrl, scheduler)
        assert not ctrl.transitioning
        assert ctrl.translating
        assert ctrl.current_artifact == art
        await scheduler.advance(2.0)
        await ctrl.wait_for_translations()

    asyncio.run(scenario())
    assert not ctrl.translating
    assert ctrl.current_artifact.language is Language.ZH


def test_stale_translation_only_seeds_cache(make_controller, scheduler, mixologist, store):
    mixologist.translate_delay = 5.0
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        await toggle_fully(ctrl, scheduler)   # en -> zh, translation in flight
        await toggle_fully(ctrl, scheduler)   # zh -> en, cache hit
        await scheduler.advance(5.0)
        await ctrl.wait_for_translations()
        return art

    art = asyncio.run(scenario())
    assert ctrl.active_language is Language.EN
    assert ctrl.current_artifact == art
    assert ctrl.history == (art,)
    assert store.payload[0]["language"] == "en"
    zh = ctrl.cache.get(cache_key(art.id, Language.ZH))
    assert zh is not None and zh.language is Language.ZH
    assert not ctrl.translating


def test_translation_does_not_overwrite_newer_submission(make_controller, scheduler, mixologist):
    mixologist.translate_delay = 5.0
    ctrl = make_controller()

    async def scenario():
        first = await ctrl.submit("first")
        await toggle_fully(ctrl, scheduler)
        newer = await ctrl.submit("newer")
        await scheduler.advance(5.0)
        await ctrl.wait_for_translations()
        return first, newer

    first, newer = asyncio.run(scenario())
    assert ctrl.current_artifact == newer
    # the history entry for the translated artifact still gets updated
    assert ctrl.history[1].id == first.id
    assert ctrl.history[1].language is Language.ZH


def test_select_from_history_prefers_cached_language(make_controller, scheduler):
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        await toggle_fully(ctrl, scheduler)
        await ctrl.wait_for_translations()
        return art

    art = asyncio.run(scenario())
    # the stored English version resolves to the cached Chinese one
    shown = ctrl.select_from_history(art)
    assert shown.language is Language.ZH
    assert shown.id == art.id


def test_select_from_history_miss_shows_stored_and_seeds(make_controller):
    stored = make_artifact(id="old-zh", language=Language.ZH, name="旧的")
    ctrl = make_controller(store=MemoryHistoryStore([stored]))

    shown = ctrl.select_from_history(ctrl.history[0])
    assert shown == stored
    assert ctrl.current_artifact == stored
    assert ctrl.cache.get(cache_key("old-zh", Language.ZH)) == stored
    assert ctrl.active_language is Language.EN


def test_observer_errors_do_not_break_controller(make_controller):
    ctrl = make_controller()
    calls = []

    def bad(_):
        raise RuntimeError("observer down")

    ctrl.subscribe(bad)
    ctrl.subscribe(lambda c: calls.append(c.current_artifact))
    asyncio.run(ctrl.submit("hello"))
    assert calls and calls[-1] is ctrl.current_artifact


def test_generate_report_passes_history_and_language(make_controller):
    seen = {}

    async def reporter(history, language, days):
        seen.update(history=history, language=language, days=days)
        return "report"

    ctrl = make_controller(reporter=reporter, language=Language.ZH)

    async def scenario():
        await ctrl.submit("hello")
        return await ctrl.generate_report(days=3)

    assert asyncio.run(scenario()) == "report"
    assert seen["language"] is Language.ZH
    assert seen["days"] == 3
    assert seen["history"] == ctrl.history


def test_generate_report_without_reporter(make_controller):
    assert asyncio.run(make_controller().generate_report()) is None


def test_estimate_delegates_to_sentiment(make_controller):
    assert make_controller().estimate("not good").mood_value < 0


def test_late_translation_does_not_replace_newer_cached_one(make_controller, scheduler, mixologist):
    ctrl = make_controller()

    async def scenario():
        art = await ctrl.submit("hello")
        mixologist.translate_delay, mixologist.tag = 5.0, " slow"
        await toggle_fully(ctrl, scheduler)   # en -> zh, slow translation in flight
        await toggle_fully(ctrl, scheduler)   # zh -> en, cache hit
        mixologist.translate_delay, mixologist.tag = 0.0, " fast"
        await toggle_fully(ctrl, scheduler)   # en -> zh, fast translation lands first
        await scheduler.advance(5.0)
        await ctrl.wait_for_translations()
        return art

    art = asyncio.run(scenario())
    cached = ctrl.cache.get(cache_key(art.id, Language.ZH))
    assert len(mixologist.translate_calls) == 2
    assert cached.name == "hello [zh] fast"
    assert cached == ctrl.current_artifact == ctrl.history[0]

    async def round_trip():
        await toggle_fully(ctrl, scheduler)
        await toggle_fully(ctrl, scheduler)

    asyncio.run(round_trip())
    assert ctrl.current_artifact.name == "hello [zh] fast"
    assert len(mixologist.translate_calls) == 2


def test_cancelled_toggle_does_not_lock_out_later_ones(make_controller, scheduler):
    ctrl = make_controller()

    async def scenario():
        task = asyncio.create_task(ctrl.toggle_language())
        await scheduler.settle()
        assert ctrl.transitioning
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not ctrl.transitioning
        assert ctrl.phase is TransitionPhase.IDLE
        assert ctrl.active_language is Language.EN
        return await toggle_fully(ctrl, scheduler)

    assert asyncio.run(scenario()) is True
    assert ctrl.active_language is Language.ZH


def test_fading_in_lasts_for_the_second_delay(make_controller, scheduler):
    ctrl = make_controller()

    async def scenario():
        task = asyncio.create_task(ctrl.toggle_language())
        await scheduler.advance(FADE_OUT)
        assert ctrl.phase is TransitionPhase.FADING_IN
        assert ctrl.transitioning
        assert scheduler.pending == 1
        await scheduler.advance(FADE_IN)
        await task
        assert ctrl.phase is TransitionPhase.IDLE
        assert scheduler.pending == 0

    asyncio.run(scenario())
    assert scheduler.now() == pytest.approx(FADE_OUT + FADE_IN)
