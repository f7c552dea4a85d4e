# -*- coding: utf-8 -*-
from typing import Optional


class StoryboardError(Exception):
    """Base class for every failure raised by the generation layer."""


class MissingCredential(StoryboardError):
    """No usable API key; blocks every provider call."""


class ValidationFailure(StoryboardError):
    """Structured output could not be parsed or lacks required fields."""


class GenerationFailure(StoryboardError):
    def __init__(self, modality: str, message: str = ""):
        self.modality = modality
        super().__init__(message or f"{modality} generation failed")


class GenerationTimeout(StoryboardError):
    def __init__(self, attempts: int, interval: float):
        self.attempts = attempts
        super().__init__(
            f"video job still running after {attempts} polls ({attempts * interval:.0f}s)"
        )


class SafetyRejection(StoryboardError):
    """Video job finished but returned no result, i.e. it was filtered."""


class NetworkFailure(StoryboardError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class PreconditionViolation(StoryboardError):
    """A call was rejected locally before reaching the provider."""


class ConfigError(StoryboardError):
    """An environment override could not be turned into a config value."""
