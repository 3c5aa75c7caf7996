"""Exception types raised by MorseFlow.

Only precondition violations are represented here.  Failures of the
audio backend (for example ``sounddevice.PortAudioError``) are passed
through to the caller unchanged.
"""

from __future__ import annotations


class MorseFlowError(Exception):
    """Base class for all errors raised by the ``morseflow`` package."""


class InvalidSpeedFormat(MorseFlowError, ValueError):
    """A speed string is missing its character-speed component."""


class AlreadyPlaying(MorseFlowError, RuntimeError):
    """Playback was requested while the engine is already playing."""


__all__ = ["MorseFlowError", "InvalidSpeedFormat", "AlreadyPlaying"]
