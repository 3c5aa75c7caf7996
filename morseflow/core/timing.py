"""
Morse timing model
==================

All element and gap durations are derived from two speeds given in
words per minute (WPM):

* ``char_speed`` – the speed at which dots and dashes are sent.
* ``overall_speed`` – the effective throughput of the text.  It can never
  exceed ``char_speed``.

When both speeds are equal the standard PARIS timing applies (a dot lasts
``1200 / wpm`` milliseconds).  When ``overall_speed`` is lower, Farnsworth
timing stretches only the character and word gaps so that the text as a
whole is received at ``overall_speed`` while each character still sounds
as it would at ``char_speed``.

Example::

    timing = TimingModel()
    timing.set_speed_from_string("18:12")
    timing.dot_time          # 66.66…
    timing.word_spacer_time  # Farnsworth word gap in ms

All durations are in milliseconds.  They are recomputed from scratch on
every speed change and are never patched individually.
"""

from __future__ import annotations

import math
from typing import Any, Tuple, Union

from ..errors import InvalidSpeedFormat

DEFAULT_FREQUENCY = 800.0
MIN_FREQUENCY = 440.0
MAX_FREQUENCY = 1200.0

DEFAULT_CHAR_SPEED = 18.0
DEFAULT_OVERALL_SPEED = 18.0

Number = Union[int, float]


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics instead of raising on a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _to_number(text: Any) -> float:
    """Convert *text* to ``float``; unparseable text becomes ``nan``."""
    try:
        return float(text)
    except (TypeError, ValueError):
        return math.nan


def parse_speed_string(text: str) -> Tuple[float, float]:
    """Split a ``"cc:oo"`` or ``"cc"`` speed string into two numbers.

    :param text: Speed specification, e.g. ``"18:12"`` or ``"20"``.
    :return: ``(char_speed, overall_speed)``.  When the overall part is
        missing it equals the character speed.
    :raises InvalidSpeedFormat: If the character-speed part is missing.
    """
    parts = str(text).split(":")
    char_part = parts[0].strip()
    if not char_part:
        raise InvalidSpeedFormat(f"Invalid speed parameter: {text!r}")
    char_speed = _to_number(char_part)
    if len(parts) > 1 and parts[1].strip():
        overall_speed = _to_number(parts[1].strip())
    else:
        overall_speed = char_speed
    return char_speed, overall_speed


def normalise_frequency(value: Any) -> float:
    """Coerce *value* to a tone frequency in Hz.

    Numeric strings are accepted.  Anything outside
    ``[MIN_FREQUENCY, MAX_FREQUENCY]`` or not a number at all becomes
    :data:`DEFAULT_FREQUENCY`.
    """
    try:
        freq = float(value)
    except (TypeError, ValueError):
        return DEFAULT_FREQUENCY
    if math.isnan(freq) or freq < MIN_FREQUENCY or freq > MAX_FREQUENCY:
        return DEFAULT_FREQUENCY
    return freq


class TimingModel:
    """Speed, frequency and the durations derived from them."""

    def __init__(
        self,
        frequency: Any = DEFAULT_FREQUENCY,
        char_speed: Number = DEFAULT_CHAR_SPEED,
        overall_speed: Number = DEFAULT_OVERALL_SPEED,
    ) -> None:
        self._frequency = DEFAULT_FREQUENCY
        self._char_speed = _to_number(char_speed)
        self._overall_speed = _to_number(overall_speed)
        self._dot_time = 0.0
        self._dash_time = 0.0
        self._symbol_spacer_time = 0.0
        self._char_spacer_time = 0.0
        self._word_spacer_time = 0.0
        self.set_frequency(frequency)
        self.set_speed(char_speed, overall_speed)

    # ------------------------------------------------------------------
    # Frequency
    # ------------------------------------------------------------------

    @property
    def frequency(self) -> float:
        """Tone frequency in Hz."""
        return self._frequency

    def set_frequency(self, value: Any) -> float:
        """Store a normalised frequency and return it."""
        self._frequency = normalise_frequency(value)
        return self._frequency

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------

    @property
    def char_speed(self) -> float:
        return self._char_speed

    @property
    def overall_speed(self) -> float:
        return self._overall_speed

    @property
    def is_farnsworth(self) -> bool:
        """``True`` when gaps are stretched beyond standard timing."""
        return self._char_speed != self._overall_speed

    @property
    def speed_string(self) -> str:
        """Current speeds in the ``"cc[:oo]"`` form."""
        char = "%g" % self._char_speed
        if not self.is_farnsworth:
            return char
        return "%s:%g" % (char, self._overall_speed)

    def set_speed(self, char_speed: Number, overall_speed: Number) -> None:
        """Set both speeds (WPM) and recompute every duration.

        ``overall_speed`` is clamped down to ``char_speed``.  Numeric
        strings are accepted.  This never raises: a zero speed yields
        infinite durations and a value that is not a number becomes ``nan``.
        """
        self._char_speed = _to_number(char_speed)
        overall = _to_number(overall_speed)
        # A NaN overall speed fails the comparison and is clamped too.
        if overall <= self._char_speed:
            self._overall_speed = overall
        else:
            self._overall_speed = self._char_speed
        self._recompute()

    def set_speed_from_string(self, text: str) -> None:
        """Set speeds from ``"cc:oo"`` or ``"cc"``.

        :raises InvalidSpeedFormat: If the character speed is missing.
        """
        char_speed, overall_speed = parse_speed_string(text)
        self.set_speed(char_speed, overall_speed)

    def _recompute(self) -> None:
        c = self._char_speed
        o = self._overall_speed
        self._dot_time = _divide(1200.0, c)
        self._dash_time = 3 * self._dot_time
        self._symbol_spacer_time = self._dot_time
        if c == o:
            self._char_spacer_time = 3 * self._dot_time
            self._word_spacer_time = 7 * self._dot_time
        else:
            delay = _divide((60 * c) - (37.2 * o), c * o) * 1000
            self._char_spacer_time = (3 * delay) / 19
            self._word_spacer_time = (7 * delay) / 19

    # ------------------------------------------------------------------
    # Derived durations (milliseconds)
    # ------------------------------------------------------------------

    @property
    def dot_time(self) -> float:
        """Duration of a dot."""
        return self._dot_time

    @property
    def dash_time(self) -> float:
        """Duration of a dash."""
        return self._dash_time

    @property
    def symbol_spacer_time(self) -> float:
        """Gap between the elements of one character."""
        return self._symbol_spacer_time

    @property
    def char_spacer_time(self) -> float:
        """Gap between characters."""
        return self._char_spacer_time

    @property
    def word_spacer_time(self) -> float:
        """Gap between words."""
        return self._word_spacer_time

    def __repr__(self) -> str:
        return (
            f"TimingModel(frequency={self._frequency!r}, "
            f"char_speed={self._char_speed!r}, "
            f"overall_speed={self._overall_speed!r})"
        )


__all__ = [
    "DEFAULT_FREQUENCY",
    "MIN_FREQUENCY",
    "MAX_FREQUENCY",
    "DEFAULT_CHAR_SPEED",
    "DEFAULT_OVERALL_SPEED",
    "InvalidSpeedFormat",
    "TimingModel",
    "normalise_frequency",
    "parse_speed_string",
]
