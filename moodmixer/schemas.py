# JSON Schemas & validators for the payloads that cross the model boundary
# and the history file. We validate what the mixologist consumes and what
# the store reads back so a bad payload turns into a fallback, not a crash.
from jsonschema import Draft202012Validator, ValidationError

from moodmixer.errors import ArtifactFormatError

INGREDIENT_SCHEMA = {
    "type": "object",
    "required": ["part", "name", "reason"],
    "properties": {
        "part": {"type": "string", "enum": ["Base", "Middle", "Top", "Finish"]},
        "name": {"type": "string", "minLength": 1},
        "reason": {"type": "string"}
    }
}

REAL_RECIPE_SCHEMA = {
    "type": ["object", "null"],
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "ingredients": {"type": "array", "items": {"type": "string"}},
        "steps": {"type": "array", "items": {"type": "string"}}
    }
}

SONIC_VIBE_SCHEMA = {
    "type": ["object", "null"],
    "required": ["genre", "tempoBpm", "scale"],
    "properties": {
        "genre": {"type": "string"},
        "tempoBpm": {"type": "integer", "minimum": 20, "maximum": 240},
        "scale": {"type": "string"},
        "instruments": {"type": "array", "items": {"type": "string"}},
        "description": {"type": "string"}
    }
}

# What the generator asks the model for (no id / createdAt: we stamp those).
GENERATED_ARTIFACT_SCHEMA = {
    "type": "object",
    "required": ["name", "description", "baseColor", "secondaryColor", "moodValue",
                 "intensity", "sensation", "ingredients"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "baseColor": {"type": "string", "pattern": "^#[0-9A-Fa-f]{6}$"},
        "secondaryColor": {"type": "string", "pattern": "^#[0-9A-Fa-f]{6}$"},
        "moodValue": {"type": "number", "minimum": -1, "maximum": 1},
        "intensity": {"type": "number", "minimum": 0, "maximum": 1},
        "sensation": {"type": "string", "minLength": 1},
        "ingredients": {"type": "array", "minItems": 1, "items": INGREDIENT_SCHEMA},
        "realRecipe": REAL_RECIPE_SCHEMA,
        "sonicVibe": SONIC_VIBE_SCHEMA,
        "copingTip": {"type": ["string", "null"]}
    }
}

# A persisted artifact: the generated shape plus identity and language.
ARTIFACT_SCHEMA = {
    "type": "object",
    "required": GENERATED_ARTIFACT_SCHEMA["required"] + ["id", "createdAt", "language"],
    "properties": dict(
        GENERATED_ARTIFACT_SCHEMA["properties"],
        id={"type": "string", "minLength": 1},
        createdAt={"type": "integer", "minimum": 0},
        language={"type": "string", "enum": ["en", "zh"]},
    )
}

# Free-text fields only; everything numeric or enumerated stays local.
TRANSLATION_SCHEMA = {
    "type": "object",
    "required": ["name", "description", "sensation", "ingredients"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "sensation": {"type": "string", "minLength": 1},
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "reason"],
                "properties": {"name": {"type": "string"}, "reason": {"type": "string"}}
            }
        },
        "realRecipe": REAL_RECIPE_SCHEMA,
        "sonicVibeDescription": {"type": ["string", "null"]},
        "copingTip": {"type": ["string", "null"]}
    }
}

PERIOD_SUMMARY_SCHEMA = {
    "type": "object",
    "required": ["summaryText", "dominantMood", "suggestedDrinkName", "suggestedDrinkDescription"],
    "properties": {
        "summaryText": {"type": "string", "minLength": 1},
        "dominantMood": {"type": "string"},
        "suggestedDrinkName": {"type": "string"},
        "suggestedDrinkDescription": {"type": "string"}
    }
}


def ensure_valid(schema, obj, name="payload"):
    try:
        Draft202012Validator(schema).validate(obj)
    except ValidationError as e:
        raise ArtifactFormatError(f"{name} failed validation: {e.message}") from e
    return obj
