#!/usr/bin/env python3


class LyricCheckError(ValueError):
    """Base class for errors that stop a score or script from being checked."""


class ScoreFormatError(LyricCheckError):
    """Missing element, attribute or root tag, or a value that is not a valid number."""


class RepeatError(LyricCheckError):
    """Repeat barlines and ending brackets that cannot be unrolled into a playback order."""
