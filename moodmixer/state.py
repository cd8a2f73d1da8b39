# moodmixer/state.py
# History persistence. The whole list is written on every mutation and read
# once at startup; anything unreadable degrades to an empty history.
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from moodmixer.errors import ArtifactFormatError
from moodmixer.models import Artifact
from moodmixer.schemas import ARTIFACT_SCHEMA, ensure_valid

logger = logging.getLogger(__name__)

HISTORY_FILE = Path("data/history.json")


class HistoryStore(ABC):
    @abstractmethod
    def load(self) -> List[Artifact]:
        pass

    @abstractmethod
    def save(self, artifacts: Sequence[Artifact]) -> None:
        pass


def parse_history(raw) -> List[Artifact]:
    if isinstance(raw, dict):
        raw = raw.get("history", [])
    if not isinstance(raw, list):
        logger.warning("History payload is %s, expected a list; starting empty", type(raw).__name__)
        return []

    out: List[Artifact] = []
    seen = set()
    for i, item in enumerate(raw):
        try:
            ensure_valid(ARTIFACT_SCHEMA, item, name=f"history[{i}]")
            artifact = Artifact.from_dict(item)
        except (ArtifactFormatError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable history entry %d: %s", i, e)
            continue
        # newest-first order: the first occurrence of an id wins
        if artifact.id in seen:
            continue
        seen.add(artifact.id)
        out.append(artifact)
    return out


class JsonHistoryStore(HistoryStore):
    def __init__(self, path=HISTORY_FILE):
        self.path = Path(path)

    def load(self) -> List[Artifact]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read history from %s (%s); starting empty", self.path, e)
            return []
        history = parse_history(raw)
        logger.info("Loaded %d artifact(s) from %s", len(history), self.path)
        return history

    def save(self, artifacts: Sequence[Artifact]) -> None:
        payload = [a.to_dict() for a in artifacts]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            tmp.replace(self.path)
        except OSError as e:
            logger.error("Failed to save history to %s: %s", self.path, e)


class MemoryHistoryStore(HistoryStore):
    """Keeps the serialised list in memory; handy for tests and demos."""

    def __init__(self, initial=None):
        self.payload = [a.to_dict() if isinstance(a, Artifact) else a for a in (initial or [])]
        self.saves = 0

    def load(self) -> List[Artifact]:
        return parse_history(self.payload)

    def save(self, artifacts: Sequence[Artifact]) -> None:
        self.payload = [a.to_dict() for a in artifacts]
        self.saves += 1
