# moodmixer/models.py
# Value types shared by the estimator, controller, store and mixologist.
import time
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Language(Enum):
    EN = "en"
    ZH = "zh"

    def other(self) -> "Language":
        return Language.ZH if self is Language.EN else Language.EN

    @classmethod
    def parse(cls, raw, default: Optional["Language"] = None) -> "Language":
        if isinstance(raw, Language):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            if default is not None:
                return default
            raise


class IngredientPart(Enum):
    BASE = "Base"
    MIDDLE = "Middle"
    TOP = "Top"
    FINISH = "Finish"


def _clamp(val: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, val))


def now_ms() -> int:
    return int(time.time() * 1000)


def new_artifact_id() -> str:
    # time prefix keeps ids roughly sortable, the suffix keeps them unique
    return f"{now_ms()}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class Ingredient:
    part: IngredientPart
    name: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"part": self.part.value, "name": self.name, "reason": self.reason}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ingredient":
        return cls(IngredientPart(data["part"]), str(data["name"]), str(data.get("reason", "")))


@dataclass(frozen=True)
class RealRecipe:
    """A drinkable recipe that mirrors the metaphorical one."""
    name: str
    ingredients: Tuple[str, ...] = ()
    steps: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ingredients": list(self.ingredients), "steps": list(self.steps)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RealRecipe":
        return cls(
            name=str(data["name"]),
            ingredients=tuple(str(i) for i in data.get("ingredients", [])),
            steps=tuple(str(s) for s in data.get("steps", [])),
        )


@dataclass(frozen=True)
class SonicVibe:
    """Soundscape descriptor; tempo and scale drive the ambient player."""
    genre: str
    tempo_bpm: int
    scale: str
    instruments: Tuple[str, ...] = ()
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "genre": self.genre,
            "tempoBpm": self.tempo_bpm,
            "scale": self.scale,
            "instruments": list(self.instruments),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SonicVibe":
        return cls(
            genre=str(data["genre"]),
            tempo_bpm=int(data["tempoBpm"]),
            scale=str(data["scale"]),
            instruments=tuple(str(i) for i in data.get("instruments", [])),
            description=str(data.get("description", "")),
        )


@dataclass(frozen=True)
class Artifact:
    """
    A generated mood cocktail. Never mutated: translations and other updates
    produce a new snapshot via `with_changes`.
    """
    id: str
    language: Language
    name: str
    description: str
    mood_value: float
    intensity: float
    sensation: str
    ingredients: Tuple[Ingredient, ...]
    created_at: int
    base_color: str = "#334155"
    secondary_color: str = "#94a3b8"
    real_recipe: Optional[RealRecipe] = None
    sonic_vibe: Optional[SonicVibe] = None
    coping_tip: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("artifact id must be non-empty")
        object.__setattr__(self, "mood_value", _clamp(float(self.mood_value), -1.0, 1.0))
        object.__setattr__(self, "intensity", _clamp(float(self.intensity), 0.0, 1.0))
        object.__setattr__(self, "ingredients", tuple(self.ingredients))

    def with_changes(self, **changes) -> "Artifact":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "language": self.language.value,
            "name": self.name,
            "description": self.description,
            "baseColor": self.base_color,
            "secondaryColor": self.secondary_color,
            "moodValue": self.mood_value,
            "intensity": self.intensity,
            "sensation": self.sensation,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "createdAt": self.created_at,
        }
        if self.real_recipe is not None:
            out["realRecipe"] = self.real_recipe.to_dict()
        if self.sonic_vibe is not None:
            out["sonicVibe"] = self.sonic_vibe.to_dict()
        if self.coping_tip is not None:
            out["copingTip"] = self.coping_tip
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_language: Language = Language.EN) -> "Artifact":
        recipe = data.get("realRecipe")
        vibe = data.get("sonicVibe")
        return cls(
            id=str(data["id"]),
            language=Language.parse(data.get("language", default_language), default=default_language),
            name=str(data["name"]),
            description=str(data.get("description", "")),
            base_color=str(data.get("baseColor", "#334155")),
            secondary_color=str(data.get("secondaryColor", "#94a3b8")),
            mood_value=float(data["moodValue"]),
            intensity=float(data["intensity"]),
            sensation=str(data["sensation"]),
            ingredients=tuple(Ingredient.from_dict(i) for i in data.get("ingredients", [])),
            created_at=int(data["createdAt"]),
            real_recipe=RealRecipe.from_dict(recipe) if recipe else None,
            sonic_vibe=SonicVibe.from_dict(vibe) if vibe else None,
            coping_tip=data.get("copingTip"),
        )


@dataclass(frozen=True)
class PeriodSummary:
    summary_text: str
    dominant_mood: str
    suggested_drink_name: str
    suggested_drink_description: str
    language: Language = Language.EN
    artifact_count: int = 0
