"""
Core Morse logic for MorseFlow.

* :class:`TimingModel` – speeds, frequency and derived durations.
* :data:`CHAR_TO_MORSE` and helpers – character to symbol conversion.
* :class:`PlaybackEngine` – the asynchronous keying loop.

Example::

    from morseflow.core import TimingModel, encode
    timing = TimingModel(char_speed=20, overall_speed=20)
    timing.dot_time   # 60.0
    encode("sos")     # '... --- ...'
"""

from .timing import TimingModel, parse_speed_string, normalise_frequency  # noqa: F401
from .symbols import (  # noqa: F401
    CHAR_TO_MORSE,
    char_to_symbols,
    text_to_symbols,
    encode,
    estimate_duration,
)
from .engine import PlaybackEngine  # noqa: F401

__all__ = [
    "TimingModel",
    "parse_speed_string",
    "normalise_frequency",
    "CHAR_TO_MORSE",
    "char_to_symbols",
    "text_to_symbols",
    "encode",
    "estimate_duration",
    "PlaybackEngine",
]
