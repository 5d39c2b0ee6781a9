"""Exception types raised by clickseg."""

from __future__ import annotations


class ClickSegError(Exception):
    """Base class for all clickseg errors."""


class ConfigError(ClickSegError):
    """Configuration could not be loaded or is invalid."""


class ImageError(ClickSegError):
    """An input image is missing, undecodable or has unusable dimensions."""


class PromptError(ClickSegError):
    """A click prompt cannot be mapped onto the decoder contract."""


class InferenceError(ClickSegError):
    """A model stage failed to load, run, or honour its output contract."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
