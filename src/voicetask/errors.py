"""Exceptions that cross the parser boundary.

Extraction misses and external lookup failures are not exceptions: they are
absorbed by the pipeline and reported through parsing notes.
"""


class VoiceTaskError(Exception):
    """Base class for voicetask errors."""


class InvalidInputError(VoiceTaskError, ValueError):
    """The request cannot be parsed at all (missing or blank text)."""

    def __init__(self, message: str = "Text is required"):
        super().__init__(message)
        self.message = message
