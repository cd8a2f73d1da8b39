# moodmixer/errors.py
# Error types raised inside the generation layer. None of them reach the
# controller: the mixologist turns them into fallbacks.


class MoodMixerError(Exception):
    """Base class for mood mixer errors."""


class LLMError(MoodMixerError):
    """Transport, HTTP or configuration failure when calling the model."""


class ArtifactFormatError(MoodMixerError):
    """Model output that does not match the expected JSON shape."""
