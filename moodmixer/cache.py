# moodmixer/cache.py
# Session cache of artifacts keyed by (artifact id, language). Owned by a
# controller instance; nothing here is module-global.
from typing import Dict, Optional, Tuple

from moodmixer.models import Artifact, Language

CacheKey = Tuple[str, Language]


def cache_key(artifact_id: str, language: Language) -> CacheKey:
    return (artifact_id, Language.parse(language))


class ArtifactCache:
    """Unbounded, never evicted. A put always overwrites the previous entry."""

    def __init__(self):
        self._entries: Dict[CacheKey, Artifact] = {}

    def get(self, key: CacheKey) -> Optional[Artifact]:
        return self._entries.get(key)

    def put(self, key: CacheKey, artifact: Artifact) -> None:
        self._entries[key] = artifact

    def seed(self, artifact: Artifact) -> CacheKey:
        key = cache_key(artifact.id, artifact.language)
        self.put(key, artifact)
        return key

    def __contains__(self, key) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
