# moodmixer/controller.py
# Language / transition controller. Owns the active language, the artifact
# cache and the history list, and runs the fade-out -> flip -> fade-in
# sequence on a toggle.
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence, Set, Tuple

from moodmixer.cache import ArtifactCache, cache_key
from moodmixer.config import DEFAULT_FADE_IN_SEC, DEFAULT_FADE_OUT_SEC
from moodmixer.models import Artifact, Language, PeriodSummary
from moodmixer.scheduler import AsyncioScheduler, Scheduler
from moodmixer.sentiment import Estimate, estimate
from moodmixer.state import HistoryStore

logger = logging.getLogger(__name__)

# Collaborator contracts; the mixologist module provides the real ones.
Generator = Callable[[str, Language], Awaitable[Artifact]]
Translator = Callable[[Artifact, Language], Awaitable[Artifact]]
Reporter = Callable[[Sequence[Artifact], Language, int], Awaitable[Optional[PeriodSummary]]]


class TransitionPhase(Enum):
    IDLE = "idle"
    FADING_OUT = "fading_out"
    FLIPPED = "flipped"        # language flipped, nothing on screen to re-pour
    CACHE_HIT = "cache_hit"    # flipped, artifact served from cache
    FETCHING = "fetching"      # flipped, translator running
    FADING_IN = "fading_in"    # second delay running; IDLE once it ends


class MoodController:
    """
    Coordinates generated artifacts across the two languages.

    Every artifact produced or translated is cached under (id, language), so
    revisiting a language never calls the translator twice. History is kept
    newest first with one entry per id and persisted on every change.

    Toggles are debounced: while a transition is running further toggles are
    dropped, not queued. Each toggle bumps `epoch`; a translation that
    resolves after a newer toggle only fills an empty cache slot and leaves
    the screen and history alone.
    """

    def __init__(self, generator: Generator, translator: Translator, store: HistoryStore,
                 scheduler: Optional[Scheduler] = None,
                 cache: Optional[ArtifactCache] = None,
                 language: Language = Language.EN,
                 fade_out: float = DEFAULT_FADE_OUT_SEC,
                 fade_in: float = DEFAULT_FADE_IN_SEC,
                 reporter: Optional[Reporter] = None):
        self._generator = generator
        self._translator = translator
        self._store = store
        self._scheduler = scheduler or AsyncioScheduler()
        self._reporter = reporter
        self.cache = cache if cache is not None else ArtifactCache()
        self.fade_out = fade_out
        self.fade_in = fade_in

        self.active_language = Language.parse(language)
        self.transitioning = False
        self.translating = False
        self.phase = TransitionPhase.IDLE
        self.current_artifact: Optional[Artifact] = None
        self.epoch = 0

        self._history: List[Artifact] = self._load_history()
        self._translations: Set[asyncio.Task] = set()
        self._observers: List[Callable] = []

    # ---- observation ----

    @property
    def history(self) -> Tuple[Artifact, ...]:
        return tuple(self._history)

    def subscribe(self, callback: Callable[["MoodController"], None]) -> None:
        self._observers.append(callback)

    def _notify(self):
        for cb in list(self._observers):
            try:
                cb(self)
            except Exception:
                logger.exception("Observer %r failed", cb)

    def _set_phase(self, phase: TransitionPhase):
        self.phase = phase
        self._notify()

    # ---- persistence ----

    def _load_history(self) -> List[Artifact]:
        try:
            return list(self._store.load())
        except Exception as e:
            logger.warning("History store failed to load (%s); starting empty", e)
            return []

    def _persist(self):
        try:
            self._store.save(list(self._history))
        except Exception as e:
            logger.error("History store failed to save: %s", e)

    def _replace_in_history(self, artifact: Artifact) -> bool:
        for i, existing in enumerate(self._history):
            if existing.id == artifact.id:
                self._history[i] = artifact
                return True
        return False

    # ---- operations ----

    def estimate(self, text: str) -> Estimate:
        return estimate(text)

    async def submit(self, text: str) -> Artifact:
        language = self.active_language
        artifact = await self._generator(text, language)
        self.current_artifact = artifact
        self._history = [artifact] + [a for a in self._history if a.id != artifact.id]
        self.cache.put(cache_key(artifact.id, language), artifact)
        self._persist()
        self._notify()
        logger.info("Submitted %s (%s); history size %d", artifact.id, language.value, len(self._history))
        return artifact

    def select_from_history(self, artifact: Artifact) -> Artifact:
        cached = self.cache.get(cache_key(artifact.id, self.active_language))
        if cached is not None:
            self.current_artifact = cached
        else:
            # shown as stored, possibly in the other language
            self.current_artifact = artifact
            self.cache.seed(artifact)
        self._notify()
        return self.current_artifact

    async def toggle_language(self) -> bool:
        if self.transitioning:
            logger.debug("Toggle ignored: transition already running")
            return False

        self.transitioning = True
        self.epoch += 1
        epoch = self.epoch
        started = self._scheduler.now()
        try:
            self._set_phase(TransitionPhase.FADING_OUT)
            await self._scheduler.sleep(self.fade_out)
            self._flip(epoch)
            self._set_phase(TransitionPhase.FADING_IN)
            await self._scheduler.sleep(self.fade_in)
        finally:
            # a cancelled or failed transition must not lock out later toggles
            self.transitioning = False
            self._set_phase(TransitionPhase.IDLE)
        logger.debug("Transition %d to %s took %.2fs", epoch, self.active_language.value,
                     self._scheduler.now() - started)
        return True

    def _flip(self, epoch: int):
        target = self.active_language.other()
        self.active_language = target
        shown = self.current_artifact
        if shown is None:
            self._set_phase(TransitionPhase.FLIPPED)
            return
        cached = self.cache.get(cache_key(shown.id, target))
        if cached is not None:
            self.current_artifact = cached
            self._set_phase(TransitionPhase.CACHE_HIT)
            return
        self.translating = True
        task = asyncio.create_task(self._translate(shown, target, epoch))
        self._translations.add(task)
        self._set_phase(TransitionPhase.FETCHING)

    async def _translate(self, source: Artifact, target: Language, epoch: int):
        try:
            try:
                result = await self._translator(source, target)
            except Exception as e:
                logger.warning("Translator raised for %s -> %s: %s", source.id, target.value, e)
                return

            if result is None or result.id != source.id or result.language is not target:
                logger.warning("Translation of %s to %s failed; keeping %s content",
                               source.id, target.value, source.language.value)
                return

            key = cache_key(source.id, target)
            if epoch != self.epoch:
                # fills a gap only; a newer translation for the key stays authoritative
                if key not in self.cache:
                    self.cache.put(key, result)
                logger.info("Stale translation of %s (epoch %d, now %d) not applied",
                            source.id, epoch, self.epoch)
                return

            self.cache.put(key, result)
            if self.current_artifact is not None and self.current_artifact.id == source.id:
                self.current_artifact = result
            if self._replace_in_history(result):
                self._persist()
        finally:
            self._translations.discard(asyncio.current_task())
            self.translating = bool(self._translations)
            self._notify()

    async def wait_for_translations(self) -> None:
        while self._translations:
            await asyncio.gather(*list(self._translations))

    async def generate_report(self, days: int = 7):
        if self._reporter is None:
            return None
        return await self._reporter(self.history, self.active_language, days)
